"""Main scaffolding orchestrator.

Takes a ``ProjectConfig`` and a target directory and produces a complete
backend project from the packaged template tree.  Generation is all or
nothing: a failed run removes every directory it created, including new
parent directories.  When an existing target is overwritten the project is
built in a sibling staging directory first, and the old target is only
replaced once rendering has succeeded.
"""

from __future__ import annotations

import asyncio
import shutil
import time
import uuid
from pathlib import Path

from pydantic import BaseModel, Field

from ..config import Settings
from ..errors import ConfigValidationError
from ..validation import validate_project_name
from .context import ProjectConfig, TemplateContext, build_context
from .materializer import materialize


class GenerationResult(BaseModel):
    """What a successful generation run produced."""

    project_path: Path
    files: list[Path] = Field(default_factory=list, description="Written files, relative to project_path")
    duration: float = Field(default=0.0, description="Wall-clock seconds")


class ProjectGenerator:
    """Generates a backend project from the packaged templates.

    Given a ``ProjectConfig``:
    - validates the project name and the target directory
    - builds the immutable template context once
    - materialises the template tree into the target
    - removes everything it created if materialisation fails
    """

    def __init__(self, config: ProjectConfig, settings: Settings | None = None) -> None:
        self.config = config
        self.settings = settings or Settings()

    # -- Public API --------------------------------------------------------

    async def generate(self, target_dir: str | Path, *, overwrite: bool = False) -> GenerationResult:
        """Generate the project into *target_dir*.

        Args:
            target_dir: Directory to create.  It must not exist unless
                *overwrite* is set, in which case it is replaced once the
                new project has been rendered.
            overwrite: Replace an existing target.

        Returns:
            A ``GenerationResult`` describing the written files.

        Raises:
            ConfigValidationError: invalid project name, or the target exists
                and *overwrite* is false.  Raised before any filesystem change.
            TemplateError: a template failed to parse or render.
            OSError: a filesystem operation failed.
        """
        started = time.monotonic()
        project_root = Path(target_dir)

        self._validate(project_root, overwrite)

        replacing = overwrite and (project_root.exists() or project_root.is_symlink())
        if replacing:
            build_root = project_root.with_name(f".{project_root.name}.{uuid.uuid4().hex[:8]}")
            created_root = build_root
        else:
            build_root = project_root
            created_root = _first_missing(project_root)

        await asyncio.to_thread(build_root.mkdir, parents=True)
        try:
            context = self._build_context()
            written = await materialize(
                self.settings.template_dir,
                build_root,
                context,
                strict=self.settings.strict,
            )
            if replacing:
                await asyncio.to_thread(_swap_in, build_root, project_root)
        except BaseException:
            await asyncio.to_thread(shutil.rmtree, created_root, ignore_errors=True)
            raise

        return GenerationResult(
            project_path=project_root,
            files=[p.relative_to(build_root) for p in written],
            duration=time.monotonic() - started,
        )

    # -- Steps -------------------------------------------------------------

    def _validate(self, project_root: Path, overwrite: bool) -> None:
        """Fail fast, before touching the filesystem."""
        name_check = validate_project_name(self.config.name)
        if not name_check.valid:
            raise ConfigValidationError(
                f"Invalid project name '{self.config.name}'", name_check.problems
            )
        if project_root.exists() and not overwrite:
            raise ConfigValidationError(
                f"Directory {project_root} already exists. Use --force to overwrite."
            )

    def _build_context(self) -> TemplateContext:
        """Build the template context from the project config."""
        return build_context(self.config)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _first_missing(path: Path) -> Path:
    """Return the topmost directory that ``path.mkdir(parents=True)`` would create."""
    missing = path
    for parent in path.parents:
        if parent.exists():
            break
        missing = parent
    return missing


def _swap_in(staging: Path, target: Path) -> None:
    """Replace *target* with the fully rendered *staging* directory."""
    _remove_path(target)
    staging.rename(target)


def _remove_path(path: Path) -> None:
    """Remove a file, symlink or directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
