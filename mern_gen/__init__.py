"""mern-gen: scaffold an Express/MongoDB backend and a React frontend."""

__version__ = "1.0.0"
