"""Editor configuration."""
from tritan.config.editor_config import (
    DEFAULT_API_URL,
    DEFAULT_STORAGE_KEY,
    EditorConfig,
)

__all__ = ['DEFAULT_API_URL', 'DEFAULT_STORAGE_KEY', 'EditorConfig']
