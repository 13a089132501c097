"""Template corpus validation.

Parses every template and renders it in strict mode against a matrix of
project configurations, so unbalanced sections and references to unknown
context keys surface before a user ever runs the generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..errors import TemplateError
from .context import FEATURE_FLAGS, DatabaseEngine, ProjectConfig, build_context
from .expander import parse, render
from .paths import TEMPLATE_SUFFIX

_CHECK_PROJECT_NAME = "template-check"


@dataclass
class TemplateCheck:
    """Result of checking one template file."""

    path: Path
    ok: bool = True
    errors: list[str] = field(default_factory=list)


def default_matrix() -> list[ProjectConfig]:
    """Configurations that together reach every section of the templates.

    Every database engine is rendered with and without TypeScript using the
    default feature set.  Each language is then rendered once with every
    feature toggle off and once with every toggle on, so both branches of
    each feature section are evaluated.
    """
    matrix = [
        ProjectConfig(name=_CHECK_PROJECT_NAME, database=engine, typescript=typescript)
        for engine in DatabaseEngine
        for typescript in (True, False)
    ]
    for enabled in (False, True):
        toggles = {attr: enabled for attr in FEATURE_FLAGS}
        matrix.extend(
            ProjectConfig(name=_CHECK_PROJECT_NAME, typescript=typescript, **toggles)
            for typescript in (True, False)
        )
    return matrix


def check_templates(
    template_dir: str | Path,
    configs: list[ProjectConfig] | None = None,
) -> list[TemplateCheck]:
    """Check every template under *template_dir*.

    Args:
        template_dir: Root of the template tree.
        configs: Configurations to render against; defaults to
            :func:`default_matrix`.

    Returns:
        One ``TemplateCheck`` per template, sorted by path.
    """
    root = Path(template_dir)
    contexts = [build_context(c) for c in (configs or default_matrix())]
    results: list[TemplateCheck] = []

    for template in sorted(root.rglob(f"*{TEMPLATE_SUFFIX}")):
        check = TemplateCheck(path=template.relative_to(root))
        results.append(check)
        text = template.read_text(encoding="utf-8")
        try:
            nodes = parse(text, check.path)
        except TemplateError as exc:
            check.ok = False
            check.errors.append(str(exc))
            continue

        for ctx in contexts:
            try:
                render(nodes, ctx, source=check.path, strict=True)
            except TemplateError as exc:
                message = str(exc)
                if message not in check.errors:
                    check.errors.append(message)
                check.ok = False

    return results
