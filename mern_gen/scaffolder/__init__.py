"""mern-gen scaffolder -- writes the backend and frontend halves of a project.

Quick usage::

    from mern_gen.config import Config, Mode
    from mern_gen.runner import SubprocessRunner
    from mern_gen.scaffolder import BackendGenerator

    config = Config(project_name="my-app", mode=Mode.BACKEND, base_dir=Path("/tmp"))
    backend = BackendGenerator(config, SubprocessRunner())
    await backend.generate({"project_name": "my-app", "port": 5000, ...})
"""

from mern_gen.scaffolder.backend_gen import BackendGenerator
from mern_gen.scaffolder.frontend_gen import FrontendGenerator
from mern_gen.scaffolder.templates import TemplateRenderer

__all__ = [
    "BackendGenerator",
    "FrontendGenerator",
    "TemplateRenderer",
]
