"""mern-gen pipeline orchestrator.

Validates the project descriptor, creates the project root and dispatches to
the backend and/or frontend generator according to the mode:

    backend   -- backend only
    frontend  -- frontend only
    full      -- backend, then frontend (also any unrecognised mode)

Usage::

    mern-gen my-app
    mern-gen my-app backend --port 4000
    python -m mern_gen my-app frontend --dir ~/projects
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from mern_gen.config import Config, Mode
from mern_gen.errors import CollisionError, ScaffoldError, UsageError
from mern_gen.runner import CommandRunner, SubprocessRunner
from mern_gen.scaffolder import BackendGenerator, FrontendGenerator, TemplateRenderer
from mern_gen.utils import (
    console,
    format_duration,
    print_error,
    print_section,
    print_success,
    print_summary_table,
    print_warning,
)

USAGE = "Usage: mern-gen <project-name> [backend|frontend|full]"


class Pipeline:
    """Runs one scaffolding invocation.

    Attributes:
        config: Run configuration (project descriptor, paths, toolchain).
        runner: Executes external commands; injected so tests can record
            commands instead of running npm.
    """

    def __init__(
        self,
        config: Config,
        runner: CommandRunner | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessRunner()
        renderer = renderer or TemplateRenderer()
        self.backend = BackendGenerator(config, self.runner, renderer)
        self.frontend = FrontendGenerator(config, self.runner, renderer)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Check the project descriptor without touching the file system.

        Raises:
            UsageError: If no project name was given.
            CollisionError: If the target directory already exists.
        """
        if not self.config.project_name.strip():
            raise UsageError("Please provide a project name")
        if self.config.project_path.exists():
            raise CollisionError(self.config.project_path)

    def build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context."""
        return {
            "project_name": self.config.project_name,
            "project_name_slug": self.config.project_slug,
            "port": self.config.server.port,
            "mongo_uri": self.config.mongo_uri,
            "vite_template": self.config.toolchain.vite_template,
        }

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def run(self) -> dict[str, Any]:
        """Validate, create the project root and run the selected generators.

        Generators run strictly one after the other; the first error
        propagates and leaves the partially generated tree in place.

        Returns:
            A summary dict with ``project_path``, ``mode``, ``generated``
            (list of generated directories) and ``duration_seconds``.
        """
        start = time.monotonic()
        self.validate()

        mode = self.config.mode
        project_path = self.config.project_path

        console.print(
            Panel(
                f"[bold bright_cyan]mern-gen[/bold bright_cyan]\n"
                f"Project : {escape(self.config.project_name)}\n"
                f"Mode    : {mode.value}\n"
                f"Output  : {escape(str(project_path.resolve()))}",
                title="[bold]Scaffold Start[/bold]",
                border_style="bright_cyan",
            )
        )

        await asyncio.to_thread(project_path.mkdir, parents=True)
        print_success("Project folder created")

        context = self.build_context()
        generated: list[Path] = []

        if mode.includes_backend:
            print_section("backend")
            generated.append(await self.backend.generate(context))

        if mode.includes_frontend:
            print_section("frontend")
            generated.append(await self.frontend.generate(context))

        elapsed = time.monotonic() - start
        self._print_final_summary(generated, elapsed)

        return {
            "project_path": project_path,
            "mode": mode,
            "generated": generated,
            "duration_seconds": elapsed,
        }

    def _print_final_summary(self, generated: list[Path], elapsed: float) -> None:
        console.print()
        print_summary_table(
            {
                "Project": escape(self.config.project_name),
                "Mode": self.config.mode.value,
                "Location": escape(str(self.config.project_path.resolve())),
                "Generated": ", ".join(p.name for p in generated),
                "Duration": format_duration(elapsed),
            },
            title="Scaffold Summary",
        )
        for path in generated:
            console.print(
                f"  To start {path.name}: [bold]cd {escape(str(path.resolve()))}"
                f" && npm run dev[/bold]",
                soft_wrap=True,
            )
        console.print()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit with status 1."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``mern-gen`` and ``python -m mern_gen``."""
    parser = _ArgumentParser(
        prog="mern-gen",
        description="mern-gen -- scaffold an Express/MongoDB + React project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  mern-gen my-app\n"
            "  mern-gen my-app backend --port 4000\n"
            "  mern-gen my-app frontend --dir ~/projects\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", help="Name of the project folder to create")
    parser.add_argument(
        "mode",
        nargs="?",
        default=Mode.FULL.value,
        help="backend, frontend or full (default: full)",
    )
    parser.add_argument(
        "--dir", "-d",
        default=None,
        help="Parent directory of the new project (default: current directory)",
    )
    parser.add_argument("--port", "-p", type=int, default=None, help="Backend port (default: 5000)")
    parser.add_argument("--mongo-uri", default=None, help="MongoDB connection string for .env")
    parser.add_argument("--npm", default=None, help="npm executable (default: npm)")
    parser.add_argument("--npx", default=None, help="npx executable (default: npx)")

    args = parser.parse_args(argv)

    if not Mode.is_known(args.mode):
        print_warning(f"Unknown mode '{args.mode}', falling back to full stack")

    try:
        config = Config.from_env(
            project_name=args.project_name or "",
            mode=Mode.parse(args.mode),
            base_dir=args.dir,
            port=args.port,
            mongo_uri=args.mongo_uri,
            npm=args.npm,
            npx=args.npx,
        )
    except (ValidationError, ValueError) as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    pipeline = Pipeline(config)
    try:
        asyncio.run(pipeline.run())
    except UsageError as exc:
        print_error(str(exc))
        console.print(USAGE)
        sys.exit(exc.exit_code)
    except ScaffoldError as exc:
        print_error(str(exc))
        sys.exit(exc.exit_code)


if __name__ == "__main__":
    main()
