"""Project-wide paths."""

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
DEFAULT_CONFIG_PATH = BASE_DIR / "config.toml"

__all__ = ["BASE_DIR", "DATA_DIR", "DEFAULT_CONFIG_PATH"]
