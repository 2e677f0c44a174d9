"""
Prompt 模板模块
"""

from .templates import (
    SYSTEM_PROMPT,
    CONTEXT_MESSAGE_PROMPT,
    build_context_message,
)

__all__ = [
    "SYSTEM_PROMPT",
    "CONTEXT_MESSAGE_PROMPT",
    "build_context_message",
]
