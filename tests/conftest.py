"""Shared pytest fixtures for the backend-quickstart test suite.

Provides reusable fixtures for:
- Project answers and the derived template context
- Small on-disk template trees built inside ``tmp_path``
- Settings pointing the generator at such a tree
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from backend_quickstart.config import Settings
from backend_quickstart.scaffolder.context import ProjectConfig, TemplateContext, build_context


# ---------------------------------------------------------------------------
# Project answers
# ---------------------------------------------------------------------------

@pytest.fixture
def project_config() -> ProjectConfig:
    """Default answers for a project called ``demo-api``."""
    return ProjectConfig(name="demo-api", author="Ada Lovelace")


@pytest.fixture
def context(project_config: ProjectConfig) -> TemplateContext:
    """Template context for ``project_config`` pinned to 2024."""
    return build_context(project_config, today=date(2024, 5, 1))


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

TreeFiles = dict[str, "str | bytes"]


def write_tree(root: Path, files: TreeFiles) -> Path:
    """Write ``{relative_path: content}`` under *root* and return *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
    return root


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeFiles], Path]:
    """Factory that builds a template tree under ``tmp_path/templates``."""

    def _make(files: TreeFiles) -> Path:
        return write_tree(tmp_path / "templates", files)

    return _make


@pytest.fixture
def sample_tree(make_tree) -> Path:
    """The two-file tree: a plain README and a package.json template."""
    return make_tree({
        "README.md": "# Static readme\n",
        "pkg.json.mustache": '{ "name": "{{name}}", {{#docker}}"docker": true{{/docker}}}',
    })


@pytest.fixture
def sample_settings(sample_tree: Path) -> Settings:
    """Settings that point the generator at ``sample_tree``."""
    return Settings(template_dir=sample_tree)
