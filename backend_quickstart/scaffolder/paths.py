"""Source-to-target path derivation for template leaves.

Rules, applied in order to the leaf name only:

1. a trailing ``.mustache`` marks a template and is stripped;
2. for templates, a ``.ts``/``.js`` extension is swapped to match the
   ``typescript`` flag;
3. a leading ``_`` becomes ``.`` (so ``_env.example`` ships as
   ``.env.example`` without being hidden inside the package).

Directory segments pass through unchanged.
"""

from __future__ import annotations

from pathlib import PurePath, PurePosixPath

from .context import TemplateContext

TEMPLATE_SUFFIX = ".mustache"
HIDDEN_PREFIX = "_"
DOTFILE_PREFIX = "."

LANGUAGE_FLAG = "typescript"
# typescript flag value -> (extension to emit, extension to replace)
_LANGUAGE_EXTENSIONS: dict[bool, tuple[str, str]] = {
    True: (".ts", ".js"),
    False: (".js", ".ts"),
}


def is_template(name: str) -> bool:
    """Return ``True`` if *name* carries the template suffix."""
    return name.endswith(TEMPLATE_SUFFIX)


def derive_target_name(name: str, context: TemplateContext) -> str:
    """Derive the output file name for the source leaf *name*."""
    target = name
    if is_template(target):
        target = target[: -len(TEMPLATE_SUFFIX)]
        wanted, other = _LANGUAGE_EXTENSIONS[bool(context.get(LANGUAGE_FLAG))]
        if target.endswith(other):
            target = target[: -len(other)] + wanted

    if target.startswith(HIDDEN_PREFIX):
        target = DOTFILE_PREFIX + target[len(HIDDEN_PREFIX):]
    return target


def derive_target_path(relative_path: str | PurePath, context: TemplateContext) -> PurePosixPath:
    """Derive the target-relative path of a leaf from its source-relative path."""
    source = PurePosixPath(PurePath(relative_path).as_posix())
    return source.parent / derive_target_name(source.name, context)
