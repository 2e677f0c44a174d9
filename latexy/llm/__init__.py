"""
LLM 模块
"""

from .base import (
    LLMError,
    LLMProvider,
    LLMResponse,
    extract_error_message,
)
from .providers import (
    AnthropicProvider,
    GeminiProvider,
    OllamaProvider,
    OpenAIProvider,
    PROVIDER_CLASSES,
    create_provider,
)
from .assistant import EditorAssistant

__all__ = [
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "extract_error_message",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "OllamaProvider",
    "PROVIDER_CLASSES",
    "create_provider",
    "EditorAssistant",
]
