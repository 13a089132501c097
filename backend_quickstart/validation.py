"""Project name and target path validation.

The generated project is an npm package, so its name must satisfy npm's
rules for new packages.  ``sanitize_project_name`` is the lenient
counterpart used by the question flow to coerce free text into a safe name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

MAX_NAME_LENGTH = 214

_RESERVED_NAMES = frozenset({"node_modules", "favicon.ico"})

_NODE_CORE_MODULES = frozenset({
    "assert", "buffer", "child_process", "cluster", "console", "constants",
    "crypto", "dgram", "dns", "domain", "events", "fs", "http", "http2",
    "https", "module", "net", "os", "path", "perf_hooks", "process",
    "punycode", "querystring", "readline", "repl", "stream", "string_decoder",
    "sys", "timers", "tls", "tty", "url", "util", "v8", "vm", "worker_threads",
    "zlib",
})

# Characters encodeURIComponent leaves untouched.
_URL_SAFE_RE = re.compile(r"^[A-Za-z0-9\-_.!~*'()]*$")
_SPECIAL_CHARS = "~'!()*"


@dataclass
class ValidationResult:
    """Outcome of a validation check."""

    valid: bool
    problems: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Project names
# ---------------------------------------------------------------------------


def validate_project_name(name: str) -> ValidationResult:
    """Check *name* against npm's rules for new package names.

    Examples::

        validate_project_name("my-api")   -> ValidationResult(valid=True, problems=[])
        validate_project_name("My API")   -> invalid: capital letters, URL-unsafe
    """
    problems: list[str] = []

    if not name:
        return ValidationResult(False, ["name length must be greater than zero"])
    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.strip() != name:
        problems.append("name cannot contain leading or trailing spaces")
    if name.lower() in _RESERVED_NAMES:
        problems.append(f"{name} is a blacklisted name")
    if name in _NODE_CORE_MODULES:
        problems.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        problems.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if any(ch in _SPECIAL_CHARS for ch in name):
        problems.append(f'name can no longer contain special characters ("{_SPECIAL_CHARS}")')
    if not _URL_SAFE_RE.match(name):
        problems.append("name can only contain URL-friendly characters")

    return ValidationResult(not problems, problems)


def sanitize_project_name(name: str) -> str:
    """Coerce free text into a safe project name.

    Examples::

        sanitize_project_name("My Cool API") -> "my-cool-api"
        sanitize_project_name(".hidden..app.") -> "hidden-app"
    """
    result = re.sub(r"[^a-z0-9\-_.]", "-", name.lower())
    result = re.sub(r"^[-.]+|[-.]+$", "", result)
    return re.sub(r"[-.]{2,}", "-", result)


# ---------------------------------------------------------------------------
# Target paths
# ---------------------------------------------------------------------------


def validate_project_path(path: str | Path) -> ValidationResult:
    """Check that *path* is free to generate into.

    A path is usable when it does not exist yet or is an empty directory.
    """
    target = Path(path).resolve()
    try:
        if not target.exists():
            return ValidationResult(True)
        if not target.is_dir():
            return ValidationResult(False, ["Path exists and is a file, not a directory"])
        if any(target.iterdir()):
            return ValidationResult(False, ["Directory is not empty"])
    except OSError as exc:
        return ValidationResult(False, [f"Unable to access path: {exc}"])
    return ValidationResult(True)
