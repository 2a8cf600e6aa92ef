"""
Editor Configuration.

Controls where the remote engine lives, how long requests may take,
and where the working workflow is persisted between sessions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tritan.config.env_utils import read_env_defaults

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_STORAGE_KEY = "tritan-workflow-storage"
_DEFAULT_STORAGE_DIR = str(Path.home() / ".tritan")


@dataclass
class EditorConfig:
    """Engine endpoint, request timeout, and snapshot storage settings."""

    api_url: str = DEFAULT_API_URL
    request_timeout: float = 30.0
    storage_dir: str = _DEFAULT_STORAGE_DIR
    storage_key: str = DEFAULT_STORAGE_KEY
    log_level: str = "INFO"

    _ENV_MAP = {
        "api_url": "TRITAN_API_URL",
        "request_timeout": "TRITAN_REQUEST_TIMEOUT",
        "storage_dir": "TRITAN_STORAGE_DIR",
        "storage_key": "TRITAN_STORAGE_KEY",
        "log_level": "TRITAN_LOG_LEVEL",
    }

    @classmethod
    def get_default_instance(cls) -> "EditorConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @property
    def storage_path(self) -> Path:
        return Path(self.storage_dir).expanduser()
