"""Express + Mongoose backend generation.

Lays out ``backend/src``, lets npm create and populate ``package.json``,
rewrites the manifest for ES modules, then renders the server boilerplate.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from mern_gen.config import Config
from mern_gen.errors import ManifestError
from mern_gen.runner import CommandRunner
from mern_gen.utils import ensure_dir, load_json, print_step, print_success, save_json

from .templates import TemplateRenderer


BACKEND_DIRECTORIES: tuple[str, ...] = (
    "src",
    "src/config",
    "src/controllers",
    "src/routes",
    "src/models",
    "src/middlewares",
)

DEPENDENCIES: tuple[str, ...] = ("express", "mongoose", "dotenv", "cors")
DEV_DEPENDENCIES: tuple[str, ...] = ("nodemon",)

MANIFEST_SCRIPTS: dict[str, str] = {
    "start": "node src/server.js",
    "dev": "nodemon src/server.js",
}


class BackendGenerator:
    """Generates the ``backend/`` half of a project."""

    # Template name -> path relative to ``backend/``
    _FILES: dict[str, str] = {
        "backend/src/app.js.j2": "src/app.js",
        "backend/src/server.js.j2": "src/server.js",
        "backend/.env.j2": ".env",
        "backend/src/controllers/sample.controller.js.j2": "src/controllers/sample.controller.js",
        "backend/src/routes/sample.routes.js.j2": "src/routes/sample.routes.js",
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
        """Run every backend step in order.

        Any failure propagates; whatever was written before it stays on disk.

        Returns:
            The ``backend/`` directory.
        """
        backend = self.config.backend_path
        npm = self.config.toolchain.npm

        print_step("Creating backend folder structure")
        await self._create_directory_structure(backend)

        print_step("Initializing npm project")
        await self.runner.run([npm, "init", "-y"], backend)

        print_step("Installing dependencies")
        await self.runner.run([npm, "install", *DEPENDENCIES], backend)
        await self.runner.run([npm, "install", "-D", *DEV_DEPENDENCIES], backend)

        print_step("Updating package.json")
        await self.update_manifest(self.config.manifest_path)

        print_step("Writing source files")
        await self._render_files(backend, context)

        print_success("Backend setup completed successfully")
        return backend

    async def _create_directory_structure(self, backend: Path) -> None:
        def _mkdirs() -> None:
            for folder in BACKEND_DIRECTORIES:
                ensure_dir(backend / folder)

        await asyncio.to_thread(_mkdirs)

    async def update_manifest(self, manifest_path: Path) -> dict[str, Any]:
        """Switch the manifest to ES modules and replace its scripts.

        All other keys written by ``npm init`` are kept as they are.

        Raises:
            ManifestError: If the file is missing or is not a JSON object.
        """
        try:
            manifest = load_json(manifest_path)
        except FileNotFoundError as exc:
            raise ManifestError(manifest_path, "file not found") from exc
        except (json.JSONDecodeError, ValueError) as exc:
            raise ManifestError(manifest_path, str(exc)) from exc

        manifest["type"] = "module"
        manifest["scripts"] = dict(MANIFEST_SCRIPTS)

        await save_json(manifest, manifest_path)
        return manifest

    async def _render_files(self, backend: Path, context: dict[str, Any]) -> list[Path]:
        written: list[Path] = []
        for template_name, output_name in self._FILES.items():
            path = await self.renderer.render_to_file(
                template_name, backend / output_name, context
            )
            written.append(path)
        return written
