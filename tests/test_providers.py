"""
测试各模型服务商的请求格式与错误处理

使用 httpx.MockTransport 截获请求，不访问网络
"""

import asyncio
import json

import httpx
import pytest

from latexy.config import EditorSettings
from latexy.llm import (
    AnthropicProvider,
    GeminiProvider,
    LLMError,
    OllamaProvider,
    OpenAIProvider,
    create_provider,
)
from latexy.models import ChatMessage, LLMOptions


HISTORY = [
    ChatMessage(role="user", content="first"),
    ChatMessage(role="assistant", content="reply"),
]


def mock_transport(body, status_code=200, captured=None):
    """返回固定响应的传输层，请求记录到 captured"""
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)
    return httpx.MockTransport(handler)


def payload_of(request: httpx.Request) -> dict:
    return json.loads(request.content)


class TestOpenAIProvider:

    def test_request_shape(self):
        captured = []
        provider = OpenAIProvider(
            "sk-test", "https://api.openai.com/v1",
            transport=mock_transport({"choices": [{"message": {"content": "hi"}}]}, captured=captured),
        )
        response = asyncio.run(provider.invoke(
            "question", history=HISTORY, system_prompt="sys", options=LLMOptions(max_tokens=100),
        ))

        assert response.content == "hi"
        request = captured[0]
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer sk-test"
        body = payload_of(request)
        assert body["model"] == "gpt-4o-mini"
        assert body["max_tokens"] == 100
        assert body["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "reply"},
            {"role": "user", "content": "question"},
        ]

    def test_error_message_from_body(self):
        provider = OpenAIProvider(
            "sk-bad", "https://api.openai.com/v1",
            transport=mock_transport({"error": {"message": "Invalid API key"}}, status_code=401),
        )
        with pytest.raises(LLMError, match="Invalid API key"):
            asyncio.run(provider.invoke("q"))

    def test_error_fallback(self):
        provider = OpenAIProvider(
            "sk", "https://api.openai.com/v1",
            transport=mock_transport("upstream failure", status_code=502),
        )
        with pytest.raises(LLMError, match="OpenAI API error"):
            asyncio.run(provider.invoke("q"))


class TestAnthropicProvider:

    def test_request_shape(self):
        captured = []
        provider = AnthropicProvider(
            "ak", "https://api.anthropic.com/v1",
            transport=mock_transport({"content": [{"type": "text", "text": "ok"}]}, captured=captured),
        )
        response = asyncio.run(provider.invoke("question", history=HISTORY, system_prompt="sys"))

        assert response.content == "ok"
        request = captured[0]
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "ak"
        assert request.headers["anthropic-version"] == "2023-06-01"
        body = payload_of(request)
        assert body["system"] == "sys"
        assert body["max_tokens"] == 2048
        assert body["messages"][-1] == {"role": "user", "content": "question"}
        assert all(m["role"] != "system" for m in body["messages"])

    def test_error_fallback(self):
        provider = AnthropicProvider(
            "ak", "https://api.anthropic.com/v1",
            transport=mock_transport({"type": "error"}, status_code=500),
        )
        with pytest.raises(LLMError, match="Anthropic API error"):
            asyncio.run(provider.invoke("q"))


class TestGeminiProvider:

    def test_request_shape(self):
        captured = []
        provider = GeminiProvider(
            "gk", "https://generativelanguage.googleapis.com/v1beta",
            transport=mock_transport(
                {"candidates": [{"content": {"parts": [{"text": "gemini says"}]}}]},
                captured=captured,
            ),
        )
        response = asyncio.run(provider.invoke("question", history=HISTORY, system_prompt="sys"))

        assert response.content == "gemini says"
        request = captured[0]
        assert request.url.path == "/v1beta/models/gemini-2.0-flash:generateContent"
        assert request.url.params["key"] == "gk"
        body = payload_of(request)
        # 只发送一条用户消息，不带历史
        assert body["contents"] == [
            {"role": "user", "parts": [{"text": "sys\n\nquestion"}]},
        ]
        assert body["generationConfig"] == {"maxOutputTokens": 2048}

    def test_error_message_from_body(self):
        provider = GeminiProvider(
            "gk", "https://generativelanguage.googleapis.com/v1beta",
            transport=mock_transport({"error": {"message": "API key not valid"}}, status_code=400),
        )
        with pytest.raises(LLMError, match="API key not valid"):
            asyncio.run(provider.invoke("q"))


class TestOllamaProvider:

    def test_request_shape(self):
        captured = []
        provider = OllamaProvider(
            "", "http://localhost:11434/",
            transport=mock_transport({"message": {"role": "assistant", "content": "local"}}, captured=captured),
        )
        response = asyncio.run(provider.invoke("question", system_prompt="sys"))

        assert response.content == "local"
        request = captured[0]
        assert str(request.url) == "http://localhost:11434/api/chat"
        body = payload_of(request)
        assert body["model"] == "llama3.2"
        assert body["stream"] is False
        assert body["messages"][0] == {"role": "system", "content": "sys"}

    def test_error_response(self):
        provider = OllamaProvider(
            "", "http://localhost:11434",
            transport=mock_transport({"error": {"message": "model not found"}}, status_code=404),
        )
        with pytest.raises(LLMError, match="Ollama connection failed. Is it running?"):
            asyncio.run(provider.invoke("q"))

    def test_connection_refused(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider = OllamaProvider("", "http://localhost:11434", transport=httpx.MockTransport(handler))
        with pytest.raises(LLMError, match="Ollama connection failed. Is it running?"):
            asyncio.run(provider.invoke("q"))


class TestCreateProvider:

    def test_known_providers(self):
        settings = EditorSettings(openai_key="o", anthropic_key="a", gemini_key="g")
        assert isinstance(create_provider("openai", settings), OpenAIProvider)
        assert create_provider("anthropic", settings).api_key == "a"
        assert create_provider("gemini", settings).name == "gemini"

    def test_ollama_uses_configured_url(self):
        settings = EditorSettings(ollama_url="http://gpu-box:11434/")
        provider = create_provider("ollama", settings)
        assert provider.base_url == "http://gpu-box:11434"
        assert provider.api_key == ""

    def test_model_override(self):
        provider = create_provider("openai", EditorSettings(), model="gpt-4o")
        assert provider.model == "gpt-4o"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_provider("mistral", EditorSettings())
