"""backend-quickstart scaffolder -- materialises a backend project skeleton.

This module takes a ``ProjectConfig`` (the user's answers) and renders the
packaged template tree into a fresh project directory: templates are expanded
with a mustache-style conditional grammar, file names are derived per the
language choice and the ``_`` dotfile convention, and plain files are copied
verbatim.

Quick usage::

    from backend_quickstart.scaffolder import ProjectConfig, ProjectGenerator

    config = ProjectConfig(name="my-api", database="mongodb", typescript=False)
    result = await ProjectGenerator(config).generate("/tmp/my-api")
"""

from backend_quickstart.scaffolder.context import (
    DatabaseEngine,
    ProjectConfig,
    TemplateContext,
    build_context,
)
from backend_quickstart.scaffolder.expander import expand
from backend_quickstart.scaffolder.generator import GenerationResult, ProjectGenerator
from backend_quickstart.scaffolder.materializer import materialize, plan_tree
from backend_quickstart.scaffolder.paths import derive_target_name, derive_target_path

__all__ = [
    "DatabaseEngine",
    "GenerationResult",
    "ProjectConfig",
    "ProjectGenerator",
    "TemplateContext",
    "build_context",
    "derive_target_name",
    "derive_target_path",
    "expand",
    "materialize",
    "plan_tree",
]
