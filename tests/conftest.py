"""Shared pytest fixtures for the mern-gen test suite.

Provides reusable fixtures for:
- A recording ``FakeRunner`` that stands in for npm/npx
- ``Config`` factories pointed at a temporary base directory
- Mock asyncio subprocess helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from mern_gen.config import Config, Mode
from mern_gen.errors import SubprocessError
from mern_gen.runner import CommandResult


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------

class FakeRunner:
    """Records every command and imitates the side effects the generators rely on.

    * ``npm init -y`` writes a default ``package.json``.
    * ``npm create vite@latest <dir> ...`` writes a minimal React starter.
    * ``npx tailwindcss init -p`` writes both Tailwind/PostCSS config files.

    Args:
        fail_on: If a command's joined text contains this substring, the
            runner raises ``SubprocessError`` with *fail_code* instead.
        fail_code: Exit status reported for the failing command.
    """

    def __init__(self, fail_on: str | None = None, fail_code: int = 1) -> None:
        self.fail_on = fail_on
        self.fail_code = fail_code
        self.calls: list[dict[str, Any]] = []

    @property
    def commands(self) -> list[str]:
        """Each recorded command as a single space-joined string."""
        return [" ".join(call["command"]) for call in self.calls]

    async def run(
        self,
        command: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        self.calls.append({"command": list(command), "cwd": Path(cwd), "env": env})
        joined = " ".join(command)

        if self.fail_on is not None and self.fail_on in joined:
            raise SubprocessError(list(command), Path(cwd), self.fail_code)

        if command[1:3] == ["init", "-y"]:
            _write_npm_init_manifest(Path(cwd))
        elif command[1:3] == ["create", "vite@latest"]:
            _write_vite_starter(Path(cwd) / command[3])
        elif command[1:] == ["tailwindcss", "init", "-p"]:
            (Path(cwd) / "tailwind.config.js").write_text("module.exports = {}\n")
            (Path(cwd) / "postcss.config.js").write_text("export default {}\n")

        return CommandResult(command=list(command), cwd=Path(cwd))


def _write_npm_init_manifest(cwd: Path) -> None:
    manifest = {
        "name": cwd.name,
        "version": "1.0.0",
        "description": "",
        "main": "index.js",
        "scripts": {"test": 'echo "Error: no test specified" && exit 1'},
        "keywords": [],
        "author": "",
        "license": "ISC",
    }
    cwd.mkdir(parents=True, exist_ok=True)
    (cwd / "package.json").write_text(json.dumps(manifest, indent=2))


def _write_vite_starter(target: Path) -> None:
    (target / "src").mkdir(parents=True, exist_ok=True)
    (target / "index.html").write_text("<div id=\"root\"></div>\n")
    (target / "package.json").write_text(json.dumps({"name": target.name}))
    (target / "src" / "App.jsx").write_text("export default function App() { return null }\n")
    (target / "src" / "main.jsx").write_text("import App from './App.jsx'\n")
    (target / "src" / "index.css").write_text(":root { color: black; }\n")


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A runner that records commands and never spawns a process."""
    return FakeRunner()


@pytest.fixture
def failing_runner() -> Callable[..., FakeRunner]:
    """Factory for runners that fail on a matching command.

    Usage:
        def test_x(failing_runner):
            runner = failing_runner("install express", code=7)
    """
    def factory(fail_on: str, code: int = 1) -> FakeRunner:
        return FakeRunner(fail_on=fail_on, fail_code=code)

    return factory


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory for a ``Config`` whose base directory is ``tmp_path``."""
    def factory(
        project_name: str = "my-app",
        mode: Mode = Mode.FULL,
        **kwargs: Any,
    ) -> Config:
        return Config(project_name=project_name, mode=mode, base_dir=tmp_path, **kwargs)

    return factory


@pytest.fixture
def sample_context() -> dict[str, Any]:
    """A template context as ``Pipeline.build_context`` produces it."""
    return {
        "project_name": "my-app",
        "project_name_slug": "my-app",
        "port": 5000,
        "mongo_uri": "mongodb://localhost:27017/my-app",
        "vite_template": "react",
    }


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        return mock_proc

    return factory
