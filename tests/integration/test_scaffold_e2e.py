"""Integration tests for a full scaffold run through real child processes.

npm and npx are replaced by a small executable Python script so that
``SubprocessRunner`` spawns genuine processes (inherited stdio, exit codes)
without needing Node.js or network access.
"""

from __future__ import annotations

import json
import os
import stat
import sys
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest

from mern_gen.config import Config, Mode, ToolchainConfig
from mern_gen.errors import SubprocessError
from mern_gen.pipeline import Pipeline, main
from mern_gen.runner import SubprocessRunner


pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(sys.platform == "win32", reason="uses a shebang script as npm"),
]


_FAKE_NPM = textwrap.dedent(
    """\
    import json, os, sys

    args = sys.argv[1:]
    log = os.environ.get("FAKE_NPM_LOG")
    if log:
        with open(log, "a") as fh:
            fh.write(os.getcwd() + "|" + " ".join(args) + "\\n")

    if os.environ.get("FAKE_NPM_FAIL") and os.environ["FAKE_NPM_FAIL"] in " ".join(args):
        sys.stderr.write("npm ERR! simulated failure\\n")
        sys.exit(int(os.environ.get("FAKE_NPM_CODE", "1")))

    if args[:2] == ["init", "-y"]:
        name = os.path.basename(os.getcwd())
        with open("package.json", "w") as fh:
            json.dump({"name": name, "version": "1.0.0", "scripts": {"test": "exit 1"}}, fh, indent=2)
    elif args[:2] == ["create", "vite@latest"]:
        target = args[2]
        os.makedirs(os.path.join(target, "src"))
        for rel, body in [("index.html", "<div id=root></div>"), ("src/App.jsx", "x"),
                          ("src/main.jsx", "x"), ("src/index.css", "x")]:
            with open(os.path.join(target, rel), "w") as fh:
                fh.write(body)
    elif args[:2] == ["tailwindcss", "init"]:
        for rel in ("tailwind.config.js", "postcss.config.js"):
            with open(rel, "w") as fh:
                fh.write("module.exports = {}")
    """
)


@pytest.fixture
def fake_npm(tmp_path: Path) -> Path:
    """An executable stand-in for both npm and npx."""
    script = tmp_path / "bin" / "fake-npm"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{_FAKE_NPM}")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "ws"
    ws.mkdir()
    return ws


def _config(workspace: Path, fake_npm: Path, mode: Mode) -> Config:
    return Config(
        project_name="shop",
        mode=mode,
        base_dir=workspace,
        toolchain=ToolchainConfig(npm=str(fake_npm), npx=str(fake_npm)),
    )


class TestScaffoldE2E:
    async def test_full_stack(self, workspace: Path, fake_npm: Path, tmp_path: Path):
        log = tmp_path / "npm.log"
        config = _config(workspace, fake_npm, Mode.FULL)

        with patch.dict(os.environ, {"FAKE_NPM_LOG": str(log)}):
            await Pipeline(config, SubprocessRunner(echo=False)).run()

        manifest = json.loads(config.manifest_path.read_text())
        assert manifest["type"] == "module"
        assert set(manifest["scripts"]) == {"start", "dev"}

        frontend = config.frontend_path
        assert (frontend / "src" / "pages" / "Home.jsx").exists()
        assert "@tailwind base;" in (frontend / "src" / "index.css").read_text()
        assert "react-router-dom" in (frontend / "src" / "App.jsx").read_text()

        lines = log.read_text().splitlines()
        assert len(lines) == 8
        assert lines[0] == f"{config.backend_path.resolve()}|init -y"
        assert lines[3] == f"{config.project_path.resolve()}|create vite@latest frontend -- --template react"
        assert lines[-1] == f"{frontend.resolve()}|tailwindcss init -p"

    async def test_failure_surfaces_exit_status(self, workspace: Path, fake_npm: Path):
        config = _config(workspace, fake_npm, Mode.BACKEND)
        env = {"FAKE_NPM_FAIL": "nodemon", "FAKE_NPM_CODE": "9"}

        with patch.dict(os.environ, env):
            with pytest.raises(SubprocessError) as exc_info:
                await Pipeline(config, SubprocessRunner(capture=True, echo=False)).run()

        assert exc_info.value.returncode == 9
        assert "simulated failure" in str(exc_info.value)
        assert not (config.backend_path / "src" / "app.js").exists()

    def test_main_end_to_end(self, workspace: Path, fake_npm: Path):
        argv = ["shop", "backend", "--dir", str(workspace), "--npm", str(fake_npm)]
        env = {k: v for k, v in os.environ.items() if not k.startswith("MERN_GEN_")}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(SystemExit) as exc_info:
                main(argv)
                raise SystemExit(0)

        assert exc_info.value.code == 0
        assert (workspace / "shop" / "backend" / ".env").read_text().startswith("PORT=5000\n")
