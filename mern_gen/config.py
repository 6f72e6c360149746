"""mern-gen configuration.

Typed configuration for a single scaffolding run. Everything the generators
need from the outside world (target directory, ports, executables) is held
here and passed down explicitly, so no generator reads the working directory
or the environment on its own.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from mern_gen.utils import sanitize_name


class Mode(str, Enum):
    """Generation scope selector."""

    BACKEND = "backend"
    FRONTEND = "frontend"
    FULL = "full"

    @classmethod
    def is_known(cls, value: str | None) -> bool:
        """Return ``True`` if *value* names one of the modes exactly."""
        return value in {m.value for m in cls}

    @classmethod
    def parse(cls, value: str | None) -> "Mode":
        """Map a raw CLI value to a ``Mode``.

        ``None`` and any unrecognised string fall through to ``FULL``.
        """
        if cls.is_known(value):
            return cls(value)
        return cls.FULL

    @property
    def includes_backend(self) -> bool:
        return self is not Mode.FRONTEND

    @property
    def includes_frontend(self) -> bool:
        return self is not Mode.BACKEND


class ServerConfig(BaseModel):
    """Values written into the generated backend's ``.env`` file."""

    port: int = Field(default=5000, ge=1, le=65535)
    mongo_uri: str | None = Field(
        default=None,
        description="Connection string; defaults to a local database named after the project",
    )


class ToolchainConfig(BaseModel):
    """External executables invoked during generation."""

    npm: str = Field(default="npm", min_length=1)
    npx: str = Field(default="npx", min_length=1)
    vite_template: str = Field(default="react", min_length=1)


class Config(BaseModel):
    """Configuration for one ``mern-gen`` invocation.

    Instances are created once by the CLI entry point (or directly in tests)
    and handed to ``Pipeline``.
    """

    project_name: str = Field(default="")
    mode: Mode = Field(default=Mode.FULL)
    base_dir: Path = Field(default=Path("."))
    server: ServerConfig = Field(default_factory=ServerConfig)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_slug(self) -> str:
        """Filesystem- and database-safe form of the project name."""
        return sanitize_name(self.project_name) or "app"

    @property
    def project_path(self) -> Path:
        """Root directory of the project being generated."""
        return self.base_dir / self.project_name

    @property
    def backend_path(self) -> Path:
        return self.project_path / "backend"

    @property
    def frontend_path(self) -> Path:
        return self.project_path / "frontend"

    @property
    def manifest_path(self) -> Path:
        """The backend's ``package.json``."""
        return self.backend_path / "package.json"

    @property
    def mongo_uri(self) -> str:
        """Connection string for the generated ``.env``."""
        if self.server.mongo_uri:
            return self.server.mongo_uri
        return f"mongodb://localhost:27017/{self.project_slug}"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            MERN_GEN_DIR, MERN_GEN_PORT, MERN_GEN_MONGO_URI,
            MERN_GEN_NPM, MERN_GEN_NPX.

        Keyword arguments whose value is not ``None`` take precedence over
        the environment. ``port``, ``mongo_uri``, ``npm`` and ``npx`` are
        routed into the nested models.
        """
        server_kwargs: dict[str, Any] = {}
        if os.environ.get("MERN_GEN_PORT"):
            server_kwargs["port"] = int(os.environ["MERN_GEN_PORT"])
        if os.environ.get("MERN_GEN_MONGO_URI"):
            server_kwargs["mongo_uri"] = os.environ["MERN_GEN_MONGO_URI"]

        toolchain_kwargs: dict[str, Any] = {}
        if os.environ.get("MERN_GEN_NPM"):
            toolchain_kwargs["npm"] = os.environ["MERN_GEN_NPM"]
        if os.environ.get("MERN_GEN_NPX"):
            toolchain_kwargs["npx"] = os.environ["MERN_GEN_NPX"]

        base_dir = Path(os.environ.get("MERN_GEN_DIR") or Path.cwd())

        overrides = {k: v for k, v in overrides.items() if v is not None}
        for key in ("port", "mongo_uri"):
            if key in overrides:
                server_kwargs[key] = overrides.pop(key)
        for key in ("npm", "npx"):
            if key in overrides:
                toolchain_kwargs[key] = overrides.pop(key)
        if "base_dir" in overrides:
            base_dir = Path(overrides.pop("base_dir"))

        return cls(
            base_dir=base_dir,
            server=ServerConfig(**server_kwargs),
            toolchain=ToolchainConfig(**toolchain_kwargs),
            **overrides,
        )
