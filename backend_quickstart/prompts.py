"""Interactive question flow.

Collects a ``ProjectConfig`` from the terminal with Rich prompts and shows a
summary before generation starts.
"""

from __future__ import annotations

from typing import Any

from rich.prompt import Confirm, Prompt

from .scaffolder.context import LICENSES, DatabaseEngine, ProjectConfig
from .utils import console, print_error, print_summary_table
from .validation import sanitize_project_name, validate_project_name

DEFAULT_PROJECT_NAME = "my-backend-api"

# (attribute, question, default)
FEATURE_QUESTIONS: list[tuple[str, str, bool]] = [
    ("authentication", "Include JWT authentication system?", True),
    ("swagger", "Include Swagger/OpenAPI documentation?", True),
    ("testing", "Include testing setup (Jest + Supertest)?", True),
    ("docker", "Include Docker configuration?", True),
    ("redis", "Include Redis for caching and sessions?", True),
    ("websockets", "Include WebSocket support (Socket.io)?", False),
    ("background_jobs", "Include background job processing (Bull)?", True),
    ("cors", "Include CORS middleware?", True),
    ("rate_limit", "Include rate limiting?", True),
    ("monitoring", "Include monitoring and health checks?", True),
]


def ask_project_name(default: str | None = None) -> str:
    """Ask for a project name until a valid one is given.

    Input is sanitised first, so ``My API`` becomes ``my-api``.
    """
    while True:
        raw = Prompt.ask("Project name", default=default or DEFAULT_PROJECT_NAME)
        name = sanitize_project_name(raw)
        check = validate_project_name(name)
        if check.valid:
            return name
        print_error(f"Invalid project name: {', '.join(check.problems)}")


def collect_project_info(project_name: str | None = None) -> ProjectConfig:
    """Run the full question flow and return the answers."""
    console.print("\n[bold cyan]Welcome to Backend Quickstart Generator![/bold cyan]")
    console.print("[dim]Let's set up your production-ready backend project.[/dim]\n")

    answers: dict[str, Any] = {"name": ask_project_name(project_name)}
    answers["description"] = Prompt.ask(
        "Project description", default="A production-ready backend API"
    )
    answers["author"] = Prompt.ask("Author name", default="")
    answers["license"] = Prompt.ask("License", choices=LICENSES, default="MIT")
    answers["typescript"] = Confirm.ask("Use TypeScript?", default=True)
    answers["database"] = Prompt.ask(
        "Choose database",
        choices=[engine.value for engine in DatabaseEngine],
        default=DatabaseEngine.POSTGRESQL.value,
    )
    for attr, question, default in FEATURE_QUESTIONS:
        answers[attr] = Confirm.ask(question, default=default)

    return ProjectConfig(**answers)


def confirm_generation(config: ProjectConfig) -> bool:
    """Show the configuration summary and ask whether to proceed."""
    print_summary_table(
        {
            "Project": config.name,
            "Description": config.description,
            "Author": config.author or "Not specified",
            "License": config.license,
            "TypeScript": "Yes" if config.typescript else "No",
            "Database": config.database.value.upper(),
            "Features": ", ".join(config.features) or "None",
        },
        title="Project Configuration Summary",
    )
    return Confirm.ask("Proceed with project generation?", default=True)
