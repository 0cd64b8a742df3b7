"""Command-line entry point: ``nextra create <directory>``."""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from pathlib import Path

from .config import Settings
from .options import PackageManagerKind
from .pipeline import Pipeline
from .prompts import ask_options, default_options
from .utils import console, ensure_dir

GOODBYES = ("Adios", "Aloha", "Arrivederci", "Au Revoir", "Ciao", "Good bye")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nextra",
        description="Nextra -- scaffold a Next.js project with linting, testing and tooling configured",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  nextra create my-app\n"
            "  nextra create my-app --package-manager pnpm --yes\n"
            "  nextra create my-app --skip-create\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create and configure a new Next.js project")
    create.add_argument(
        "directory",
        help="Project directory to create",
    )
    create.add_argument(
        "--package-manager", "-p",
        choices=[kind.value for kind in PackageManagerKind],
        default=None,
        help="Package manager to use (asked interactively if omitted)",
    )
    create.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Accept the default answer for every question",
    )
    create.add_argument(
        "--skip-create",
        action="store_true",
        help="Configure an existing Next.js project instead of running create-next-app",
    )
    create.add_argument(
        "--dev", "-d",
        action="store_true",
        help="Create the project under ./tmp (for trying out nextra itself)",
    )
    return parser


def resolve_project_dir(directory: str, dev: bool = False) -> Path:
    """Return the absolute project path, under ``./tmp`` in dev mode."""
    if dev:
        return (ensure_dir(Path("tmp")) / directory).resolve()
    return Path(directory).resolve()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``nextra`` and ``python -m nextra``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    project_root = resolve_project_dir(args.directory, dev=args.dev)
    if not args.skip_create and project_root.exists() and any(project_root.iterdir()):
        console.print(f"[bold red]Error:[/bold red] Directory is not empty: {project_root}")
        sys.exit(1)

    package_manager = PackageManagerKind(args.package_manager) if args.package_manager else None
    try:
        if args.yes:
            options = default_options(package_manager or PackageManagerKind.NPM)
        else:
            options = ask_options(package_manager)
    except KeyboardInterrupt:
        console.print("\n[bold red]Aborted.[/bold red]")
        sys.exit(1)

    pipeline = Pipeline(Settings.from_env(), options, project_root, skip_create=args.skip_create)
    result = asyncio.run(pipeline.run())

    if result.get("success"):
        console.print(f"[bold green]Project ready in {project_root}[/bold green]")
        console.print(f"[bold]{random.choice(GOODBYES)}![/bold]")
    else:
        console.print("[bold red]Scaffold failed.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
