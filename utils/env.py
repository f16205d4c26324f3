"""Environment helper utilities.

Loads a `.env` file from the project root so that engine settings
(e.g., ``FORECAST_MAX_CONCURRENCY`` or ``FORECAST_REDIS_URL``) defined there
become available via ``os.getenv``.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

__all__ = ["load_project_dotenv"]


def _find_project_root(start: Path | None = None) -> Path:
    """Walk upwards to the first directory holding `pyproject.toml`."""
    current = start or Path(__file__).resolve().parent
    for _ in range(10):
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv() -> bool:
    """Load environment variables from the project-level `.env` if present.

    Existing variables win over the file. Returns True when a file was loaded.
    """
    dotenv_path = _find_project_root() / ".env"
    if not dotenv_path.exists():
        return False
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return True
