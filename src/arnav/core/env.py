"""
Environment + project-root helpers.

Foursquare credentials usually live in a repo-local `.env` file, and the CLI / API may
be started from any working directory. This module provides:
- `load_dotenv_if_present()`: load `.env` once (never overrides existing env vars)
- `get_project_root()`: find the repo root (`ARNAV_PROJECT_ROOT`, `.env`, `.git`, `pyproject.toml`)
- `resolve_project_path()`: resolve relative paths (e.g. the cache dir) against that root
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = (".env", ".git", "pyproject.toml")


def _looks_like_project_root(path: Path) -> bool:
    return any((path / marker).exists() for marker in _ROOT_MARKERS)


@lru_cache
def get_project_root() -> Path:
    """Return the best-guess project root directory (cached)."""
    override = os.getenv("ARNAV_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    env_file = os.getenv("ARNAV_ENV_FILE")
    if env_file:
        return Path(env_file).expanduser().resolve().parent

    cwd = Path.cwd().resolve()
    for candidate in [cwd, *cwd.parents]:
        if _looks_like_project_root(candidate):
            return candidate

    # Running from elsewhere (e.g. an installed checkout): search from this file.
    here = Path(__file__).resolve().parent
    for candidate in [here, *here.parents]:
        if _looks_like_project_root(candidate):
            return candidate

    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `.env` once if present; returns the loaded env path (or None)."""
    explicit = os.getenv("ARNAV_ENV_FILE")
    env_path = Path(explicit).expanduser().resolve() if explicit else get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against the project root."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_project_root() / p).resolve()
