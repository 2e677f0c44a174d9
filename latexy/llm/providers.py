"""
各模型服务商的 Provider 实现

四个服务商接口形状不同，但都只做一次非流式的 JSON 请求：
- OpenAI: Chat Completions
- Anthropic: Messages
- Gemini: generateContent（API Key 放在查询参数中）
- Ollama: 本地 /api/chat
"""

from __future__ import annotations

from typing import Sequence

import httpx

from ..config import EditorSettings, get_api_key
from ..models import ChatMessage, LLMOptions
from .base import LLMError, LLMProvider, LLMResponse


OPENAI_BASE_URL = "https://api.openai.com/v1"
ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
ANTHROPIC_VERSION = "2023-06-01"


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions Provider"""

    default_model = "gpt-4o-mini"

    @property
    def name(self) -> str:
        return "openai"

    @property
    def error_fallback(self) -> str:
        return "OpenAI API error"

    async def invoke(
        self,
        prompt: str,
        *,
        history: Sequence[ChatMessage] = (),
        system_prompt: str | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        options = options or LLMOptions()

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.extend(self.history_messages(history))
        messages.append({"role": "user", "content": prompt})

        data = await self._post(
            f"{self.base_url}/chat/completions",
            {
                "model": self.model,
                "messages": messages,
                "max_tokens": options.max_tokens,
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
            options=options,
        )

        return LLMResponse(
            content=data["choices"][0]["message"]["content"],
            model=data.get("model", self.model),
        )


class AnthropicProvider(LLMProvider):
    """Anthropic Messages Provider"""

    default_model = "claude-3-5-sonnet-20241022"

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def error_fallback(self) -> str:
        return "Anthropic API error"

    async def invoke(
        self,
        prompt: str,
        *,
        history: Sequence[ChatMessage] = (),
        system_prompt: str | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        options = options or LLMOptions()

        payload = {
            "model": self.model,
            "max_tokens": options.max_tokens,
            "messages": [
                *self.history_messages(history),
                {"role": "user", "content": prompt},
            ],
        }
        # system 是顶层字段，不放进 messages
        if system_prompt:
            payload["system"] = system_prompt

        data = await self._post(
            f"{self.base_url}/messages",
            payload,
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            options=options,
        )

        return LLMResponse(
            content=data["content"][0]["text"],
            model=data.get("model", self.model),
        )


class GeminiProvider(LLMProvider):
    """
    Google Gemini Provider

    不发送对话历史；系统提示词拼接在唯一的用户消息之前
    """

    default_model = "gemini-2.0-flash"

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def error_fallback(self) -> str:
        return "Gemini API error"

    async def invoke(
        self,
        prompt: str,
        *,
        history: Sequence[ChatMessage] = (),
        system_prompt: str | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        options = options or LLMOptions()

        text = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt
        url = f"{self.base_url}/models/{self.model}:generateContent?key={self.api_key}"

        data = await self._post(
            url,
            {
                "contents": [
                    {"role": "user", "parts": [{"text": text}]},
                ],
                "generationConfig": {"maxOutputTokens": options.max_tokens},
            },
            options=options,
        )

        return LLMResponse(
            content=data["candidates"][0]["content"]["parts"][0]["text"],
            model=self.model,
        )


class OllamaProvider(LLMProvider):
    """本地 Ollama Provider，无需 API Key"""

    default_model = "llama3.2"
    connection_error = "Ollama connection failed. Is it running?"

    @property
    def name(self) -> str:
        return "ollama"

    def _describe_error(self, response: httpx.Response) -> str:
        return self.connection_error

    async def invoke(
        self,
        prompt: str,
        *,
        history: Sequence[ChatMessage] = (),
        system_prompt: str | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.extend(self.history_messages(history))
        messages.append({"role": "user", "content": prompt})

        try:
            data = await self._post(
                f"{self.base_url}/api/chat",
                {
                    "model": self.model,
                    "messages": messages,
                    "stream": False,
                },
                options=options,
            )
        except httpx.TransportError as e:
            raise LLMError(self.connection_error) from e

        return LLMResponse(
            content=data["message"]["content"],
            model=data.get("model", self.model),
        )


PROVIDER_CLASSES: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
    "ollama": OllamaProvider,
}


def create_provider(
    provider_type: str,
    settings: EditorSettings,
    *,
    model: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LLMProvider:
    """
    工厂方法：创建 LLM Provider

    Args:
        provider_type: 提供商类型 (openai, anthropic, gemini, ollama)
        settings: 编辑器设置（API Key 与 Ollama 地址）
        model: 覆盖默认模型
        transport: 自定义 httpx 传输层

    Returns:
        LLMProvider 实例
    """
    provider_class = PROVIDER_CLASSES.get(provider_type)
    if provider_class is None:
        raise ValueError(f"Unknown provider: {provider_type}")

    base_urls = {
        "openai": OPENAI_BASE_URL,
        "anthropic": ANTHROPIC_BASE_URL,
        "gemini": GEMINI_BASE_URL,
        "ollama": settings.ollama_url,
    }
    return provider_class(
        api_key=get_api_key(settings, provider_type),
        base_url=base_urls[provider_type],
        model=model,
        transport=transport,
    )
