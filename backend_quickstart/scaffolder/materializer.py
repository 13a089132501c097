"""Template tree materialisation.

Walks a template directory, derives every target path up front (rejecting
collisions before anything is written) and then populates the target
directory: directories first, templates expanded, plain files copied
byte-for-byte.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from ..errors import PathCollisionError, TemplateNotFoundError
from .context import TemplateContext
from .expander import expand
from .paths import derive_target_name, is_template

DIRECTORY = "directory"
TEMPLATE = "template"
FILE = "file"


@dataclass(frozen=True)
class PlannedEntry:
    """One source node and the target path it materialises to."""

    source: Path
    target: PurePosixPath
    kind: str


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def plan_tree(source_root: str | Path, context: TemplateContext) -> list[PlannedEntry]:
    """Walk *source_root* pre-order and derive every target path.

    Directories are listed before their children.  Siblings are visited in
    sorted order so plans are stable, though nothing depends on it.

    Raises:
        TemplateNotFoundError: if *source_root* is not a directory.
        PathCollisionError: if two source nodes derive the same target path.
    """
    root = Path(source_root)
    if not root.is_dir():
        raise TemplateNotFoundError(f"Template directory not found: {root}")

    entries: list[PlannedEntry] = []
    seen: dict[PurePosixPath, Path] = {}
    _plan_directory(root, PurePosixPath(), context, entries, seen)
    return entries


def _plan_directory(
    directory: Path,
    target_dir: PurePosixPath,
    context: TemplateContext,
    entries: list[PlannedEntry],
    seen: dict[PurePosixPath, Path],
) -> None:
    for child in sorted(directory.iterdir()):
        if child.is_dir():
            target = target_dir / child.name
            _claim(target, child, seen)
            entries.append(PlannedEntry(child, target, DIRECTORY))
            _plan_directory(child, target, context, entries, seen)
        else:
            target = target_dir / derive_target_name(child.name, context)
            _claim(target, child, seen)
            kind = TEMPLATE if is_template(child.name) else FILE
            entries.append(PlannedEntry(child, target, kind))


def _claim(target: PurePosixPath, source: Path, seen: dict[PurePosixPath, Path]) -> None:
    if target in seen:
        raise PathCollisionError(str(target), [seen[target], source])
    seen[target] = source


# ---------------------------------------------------------------------------
# Materialisation
# ---------------------------------------------------------------------------


async def materialize(
    source_root: str | Path,
    target_root: str | Path,
    context: TemplateContext,
    *,
    strict: bool = False,
) -> list[Path]:
    """Populate *target_root* from the template tree at *source_root*.

    Any failure (syntax error, undefined variable in strict mode, I/O error)
    propagates immediately; removing a partially written target is the
    caller's job.

    Args:
        source_root: Template directory to read.
        target_root: Existing directory to write into.
        context: Read-only template context.
        strict: Forwarded to :func:`expand`.

    Returns:
        Paths of every file written, in plan order.
    """
    plan = await asyncio.to_thread(plan_tree, source_root, context)
    out_base = Path(target_root)
    written: list[Path] = []

    for entry in plan:
        out = out_base / entry.target
        if entry.kind == DIRECTORY:
            await asyncio.to_thread(out.mkdir, parents=True, exist_ok=True)
            continue
        if entry.kind == TEMPLATE:
            await asyncio.to_thread(_render_file, entry.source, out, context, strict)
        else:
            await asyncio.to_thread(shutil.copyfile, entry.source, out)
        written.append(out)

    return written


def _render_file(source: Path, out: Path, context: TemplateContext, strict: bool) -> None:
    """Synchronous helper: expand one template and write the result."""
    # Bytes in and out so line endings survive untranslated.
    text = source.read_bytes().decode("utf-8")
    content = expand(text, context, source=source, strict=strict)
    out.write_bytes(content.encode("utf-8"))
