"""
配置模块
"""

from .settings import (
    PROVIDERS,
    EditorSettings,
    load_config,
    get_api_key,
)
from .storage import WorkspaceStore, default_store_dir

__all__ = [
    "PROVIDERS",
    "EditorSettings",
    "load_config",
    "get_api_key",
    "WorkspaceStore",
    "default_store_dir",
]
