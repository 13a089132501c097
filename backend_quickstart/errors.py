"""Exception hierarchy for backend-quickstart.

Every error raised by the generator derives from :class:`QuickstartError` so
the CLI can report them uniformly.  Filesystem failures are left as plain
``OSError`` and propagate unchanged.
"""

from __future__ import annotations

from pathlib import Path


class QuickstartError(Exception):
    """Base class for all generator errors."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigValidationError(QuickstartError):
    """Raised when the project configuration or target path is unusable.

    Always raised before any filesystem mutation takes place.
    """

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        self.problems = list(problems or [])
        if self.problems:
            message = f"{message}: {', '.join(self.problems)}"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TemplateError(QuickstartError):
    """Base class for errors tied to the template corpus."""


class TemplateSyntaxError(TemplateError):
    """Raised when a template has malformed conditional nesting.

    Attributes:
        source: Template file the error was found in (``"<string>"`` for
            inline text).
        line: 1-based line of the first problem.
        flags: Every flag name involved in the problems.
        problems: One human-readable message per offending tag.
    """

    def __init__(
        self,
        source: str,
        line: int,
        flags: list[str],
        problems: list[str],
    ) -> None:
        self.source = source
        self.line = line
        self.flags = flags
        self.problems = problems
        super().__init__(f"{source}: " + "; ".join(problems))


class UndefinedVariableError(TemplateError):
    """Raised in strict mode when a substitution names a missing key."""

    def __init__(self, source: str, line: int, name: str) -> None:
        self.source = source
        self.line = line
        self.name = name
        super().__init__(f"{source}:{line}: undefined variable '{name}'")


class PathCollisionError(TemplateError):
    """Raised when two template nodes derive the same target path."""

    def __init__(self, target: str, sources: list[Path]) -> None:
        self.target = target
        self.sources = sources
        joined = ", ".join(str(s) for s in sources)
        super().__init__(f"Target path '{target}' is produced by more than one template: {joined}")


class TemplateNotFoundError(TemplateError):
    """Raised when the template root directory does not exist."""
