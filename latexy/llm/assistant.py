"""
编辑器 AI 助手

把一条用户消息路由到当前选择的模型服务商，并注入当前文档作为上下文
"""

from __future__ import annotations

import httpx

from ..config import EditorSettings, get_api_key
from ..models import ChatMessage, ChatResult, LLMOptions, Workspace
from ..prompts import SYSTEM_PROMPT, build_context_message
from .providers import create_provider


class EditorAssistant:
    """
    编辑器 AI 助手

    对话历史保存在 Workspace 上；失败时不抛异常，而是返回带 error 的 ChatResult
    """

    def __init__(
        self,
        workspace: Workspace,
        settings: EditorSettings,
        *,
        options: LLMOptions | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.workspace = workspace
        self.settings = settings
        self.options = options or LLMOptions()
        self.transport = transport

    async def send_message(self, message: str) -> ChatResult:
        """
        发送一条消息（不修改对话历史）

        Args:
            message: 用户输入

        Returns:
            ChatResult，content 与 error 二选一
        """
        provider_type = self.settings.llm_provider

        # 未知服务商没有对应的 Key，同样提示去设置里配置
        api_key = get_api_key(self.settings, provider_type)
        if not api_key and provider_type != "ollama":
            return ChatResult(
                error=f"Please configure your {provider_type.upper()} API key in Settings."
            )

        context_message = build_context_message(self.workspace.active_content, message)

        try:
            provider = create_provider(provider_type, self.settings, transport=self.transport)
            response = await provider.invoke(
                context_message,
                history=list(self.workspace.chat_history),
                system_prompt=SYSTEM_PROMPT,
                options=self.options,
            )
        except Exception as e:
            return ChatResult(error=str(e) or e.__class__.__name__)

        return ChatResult(content=response.content)

    async def handle_send(self, message: str) -> ChatResult | None:
        """
        处理一次发送：记录用户消息，调用模型，成功时记录回复

        Returns:
            空消息时返回 None
        """
        message = message.strip()
        if not message:
            return None

        result = await self.send_message(message)
        self.workspace.chat_history.append(ChatMessage(role="user", content=message))

        if result.ok:
            self.workspace.chat_history.append(ChatMessage(role="assistant", content=result.content or ""))
        return result
