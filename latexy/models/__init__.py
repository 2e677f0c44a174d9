"""
数据模型模块
"""

from .chat import ChatMessage, ChatResult, LLMOptions
from .workspace import (
    DEFAULT_DOCUMENT,
    DEFAULT_FILENAME,
    DocumentFile,
    Workspace,
    WorkspaceError,
)

__all__ = [
    "ChatMessage",
    "ChatResult",
    "LLMOptions",
    "DEFAULT_DOCUMENT",
    "DEFAULT_FILENAME",
    "DocumentFile",
    "Workspace",
    "WorkspaceError",
]
