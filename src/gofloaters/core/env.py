"""
`.env` loading and project-relative paths.

The backend is started from several places (uvicorn, the `gofloaters` CLI,
pytest), so relative settings such as the cache directory are anchored to the
project root rather than the current directory.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = (".env", ".git", "pyproject.toml")


def _find_root(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        if any((directory / marker).exists() for marker in _ROOT_MARKERS):
            return directory
    return None


@lru_cache
def get_project_root() -> Path:
    """Project root: `GOFLOATERS_PROJECT_ROOT`, else the env file's folder, else a marker search."""
    explicit_root = os.getenv("GOFLOATERS_PROJECT_ROOT")
    if explicit_root:
        return Path(explicit_root).expanduser().resolve()

    env_file = os.getenv("GOFLOATERS_ENV_FILE")
    if env_file:
        return Path(env_file).expanduser().resolve().parent

    return (
        _find_root(Path.cwd().resolve())
        or _find_root(Path(__file__).resolve().parent)
        or Path.cwd().resolve()
    )


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the env file once without overriding variables already set."""
    env_file = os.getenv("GOFLOATERS_ENV_FILE")
    path = Path(env_file).expanduser().resolve() if env_file else get_project_root() / ".env"
    if not path.is_file():
        return None
    load_dotenv(dotenv_path=path, override=False)
    return path


def resolve_project_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()
