"""
LLM Provider 抽象基类
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

import httpx
from pydantic import BaseModel, Field

from ..models import ChatMessage, LLMOptions


class LLMError(RuntimeError):
    """模型服务调用失败，消息可直接展示给用户"""


class LLMResponse(BaseModel):
    """LLM 响应"""
    content: str = Field(..., description="生成的内容")
    model: str = Field(..., description="使用的模型名称")


def extract_error_message(response: httpx.Response, fallback: str) -> str:
    """从错误响应体中取出 error.message，取不到时使用 fallback"""
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return fallback


class LLMProvider(ABC):
    """LLM Provider 抽象基类"""

    default_model: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model or self.default_model
        # 测试时注入 httpx.MockTransport
        self.transport = transport

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider 名称"""
        pass

    @property
    def error_fallback(self) -> str:
        """错误响应中没有 message 时使用的提示"""
        return f"{self.name} API error"

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        *,
        history: Sequence[ChatMessage] = (),
        system_prompt: str | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        """
        调用 LLM 生成内容

        Args:
            prompt: 本轮用户消息（已注入文档上下文）
            history: 之前的对话历史
            system_prompt: 系统提示词
            options: 调用选项

        Returns:
            LLM 响应
        """
        pass

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        options: LLMOptions | None = None,
    ) -> dict[str, Any]:
        """发送 JSON 请求，非 2xx 时抛出 LLMError"""
        options = options or LLMOptions()
        request_headers = {"Content-Type": "application/json"}
        request_headers.update(headers or {})

        async with httpx.AsyncClient(timeout=options.timeout, transport=self.transport) as client:
            response = await client.post(url, headers=request_headers, json=payload)

        if response.is_error:
            raise LLMError(self._describe_error(response))
        return response.json()

    def _describe_error(self, response: httpx.Response) -> str:
        return extract_error_message(response, self.error_fallback)

    @staticmethod
    def history_messages(history: Sequence[ChatMessage]) -> list[dict[str, str]]:
        return [{"role": m.role, "content": m.content} for m in history]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.name} ({self.model})>"
