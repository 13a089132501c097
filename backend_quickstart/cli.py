"""backend-quickstart command line interface.

Usage::

    create-backend-quickstart my-api
    create-backend-quickstart my-api --yes --dir ./services/my-api
    create-backend-quickstart --answers answers.json --force
    create-backend-quickstart --check-templates
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from pydantic import ValidationError

from . import __version__
from .config import Settings
from .errors import QuickstartError
from .prompts import collect_project_info, confirm_generation
from .scaffolder.checker import check_templates
from .scaffolder.context import ProjectConfig
from .scaffolder.generator import GenerationResult, ProjectGenerator
from .utils import (
    console,
    format_duration,
    generation_spinner,
    print_banner,
    print_error,
    print_success,
    print_template_report,
    print_warning,
)
from .validation import validate_project_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-backend-quickstart",
        description="Generate a production-ready backend API with Express.js, TypeScript, and more",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-backend-quickstart my-api\n"
            "  create-backend-quickstart my-api -y -d ./services/my-api\n"
            "  create-backend-quickstart --answers answers.json --force\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", default=None, help="Name of the project")
    parser.add_argument(
        "-d", "--dir",
        default=None,
        help="Target directory (default: ./<project-name>)",
    )
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite target directory if it exists",
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Skip prompts and use defaults",
    )
    parser.add_argument(
        "--answers",
        default=None,
        help="Load project answers from a JSON file instead of prompting",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on template variables missing from the context",
    )
    parser.add_argument(
        "--check-templates",
        action="store_true",
        help="Validate every template against all database/language combinations and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.strict:
        settings = settings.model_copy(update={"strict": True})

    print_banner(f"Backend Quickstart Generator v{__version__}")

    if args.check_templates:
        return _run_check(settings)

    try:
        return _run_generate(args, settings)
    except KeyboardInterrupt:
        print_warning("\nProject generation cancelled.")
        return 130


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _run_generate(args: argparse.Namespace, settings: Settings) -> int:
    config = _resolve_config(args)
    if config is None:
        return 2 if args.yes and not args.answers else 1

    project_path = Path(args.dir or config.name).resolve()

    if not args.force:
        path_check = validate_project_path(project_path)
        if not path_check.valid:
            print_error(f"Error: {', '.join(path_check.problems)}")
            return 1

    if not args.yes and not confirm_generation(config):
        print_warning("Project generation cancelled.")
        return 0

    # An existing empty directory has nothing to lose.
    overwrite = args.force or project_path.is_dir()

    generator = ProjectGenerator(config, settings)
    try:
        with generation_spinner():
            result = asyncio.run(generator.generate(project_path, overwrite=overwrite))
    except (QuickstartError, OSError) as exc:
        print_error("Project generation failed")
        print_error(f"{type(exc).__name__}: {exc}")
        return 1

    _print_next_steps(result)
    return 0


def _resolve_config(args: argparse.Namespace) -> ProjectConfig | None:
    """Work out the project answers from ``--answers``, ``--yes`` or prompts."""
    if args.answers:
        try:
            config = ProjectConfig.load(Path(args.answers))
        except (OSError, ValidationError) as exc:
            print_error(f"Could not load answers from {args.answers}: {exc}")
            return None
        if args.project_name:
            config = config.model_copy(update={"name": args.project_name})
        return config

    if args.yes:
        if not args.project_name:
            print_error("Error: a project name is required with --yes")
            return None
        return ProjectConfig(name=args.project_name)

    return collect_project_info(args.project_name)


def _run_check(settings: Settings) -> int:
    if not settings.template_dir.is_dir():
        print_error(f"Template directory not found: {settings.template_dir}")
        return 1

    results = check_templates(settings.template_dir)

    failed = print_template_report(results)
    if failed:
        print_error(f"{failed} of {len(results)} templates failed validation")
        return 1
    print_success(f"All {len(results)} templates are valid")
    return 0


def _print_next_steps(result: GenerationResult) -> None:
    print_success(
        f"Project generated successfully! "
        f"({len(result.files)} files in {format_duration(result.duration)})"
    )
    console.print("\n[bold cyan]Your backend project is ready![/bold cyan]\n")
    console.print("Next steps:")
    for step in (
        f"cd {result.project_path.name}",
        "npm install",
        "cp .env.example .env",
        "# Update .env with your database credentials",
        "npm run migrate",
        "npm run dev",
    ):
        console.print(f"  [dim]{step}[/dim]")
    console.print("\n[bold cyan]Documentation:[/bold cyan]")
    console.print("  [dim]README.md - Getting started guide[/dim]")
    console.print("  [dim]docs/API.md - API documentation[/dim]")


if __name__ == "__main__":
    raise SystemExit(main())
