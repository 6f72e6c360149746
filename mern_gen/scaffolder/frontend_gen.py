"""React (Vite) + Tailwind frontend generation.

The starter itself comes from ``npm create vite``; this module only installs
the extra packages, runs the Tailwind initializer and overwrites a handful
of starter files.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from mern_gen.config import Config
from mern_gen.runner import CommandRunner
from mern_gen.utils import ensure_dir, print_step, print_success

from .templates import TemplateRenderer


DEPENDENCIES: tuple[str, ...] = ("react-router-dom", "axios")
DEV_DEPENDENCIES: tuple[str, ...] = ("tailwindcss", "postcss", "autoprefixer")

FRONTEND_DIRECTORIES: tuple[str, ...] = (
    "src/components",
    "src/pages",
    "src/services",
)


class FrontendGenerator:
    """Generates the ``frontend/`` half of a project."""

    _STYLE_FILES: dict[str, str] = {
        "frontend/tailwind.config.js.j2": "tailwind.config.js",
        "frontend/src/index.css.j2": "src/index.css",
    }

    _PAGE_FILES: dict[str, str] = {
        "frontend/src/pages/Home.jsx.j2": "src/pages/Home.jsx",
        "frontend/src/App.jsx.j2": "src/App.jsx",
    }

    def __init__(
        self,
        config: Config,
        runner: CommandRunner,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.runner = runner
        self.renderer = renderer or TemplateRenderer()

    async def generate(self, context: dict[str, Any]) -> Path:
        """Run every frontend step in order.

        Returns:
            The ``frontend/`` directory.
        """
        project = self.config.project_path
        frontend = self.config.frontend_path
        toolchain = self.config.toolchain

        print_step("Creating React app with Vite")
        await self.runner.run(
            [
                toolchain.npm, "create", "vite@latest", frontend.name,
                "--", "--template", toolchain.vite_template,
            ],
            project,
            env={"CI": "true"},
        )

        print_step("Installing frontend dependencies")
        await self.runner.run([toolchain.npm, "install"], frontend)
        await self.runner.run([toolchain.npm, "install", *DEPENDENCIES], frontend)
        await self.runner.run(
            [toolchain.npm, "install", "-D", *DEV_DEPENDENCIES], frontend
        )

        print_step("Initializing Tailwind")
        await self.runner.run([toolchain.npx, "tailwindcss", "init", "-p"], frontend)

        print_step("Configuring Tailwind")
        await self._render(self._STYLE_FILES, frontend, context)

        print_step("Creating frontend folder structure")
        await self._create_directory_structure(frontend)

        print_step("Writing pages")
        await self._render(self._PAGE_FILES, frontend, context)

        print_success("Frontend setup complete")
        return frontend

    async def _create_directory_structure(self, frontend: Path) -> None:
        def _mkdirs() -> None:
            for folder in FRONTEND_DIRECTORIES:
                ensure_dir(frontend / folder)

        await asyncio.to_thread(_mkdirs)

    async def _render(
        self, files: dict[str, str], frontend: Path, context: dict[str, Any]
    ) -> list[Path]:
        written: list[Path] = []
        for template_name, output_name in files.items():
            path = await self.renderer.render_to_file(
                template_name, frontend / output_name, context
            )
            written.append(path)
        return written
