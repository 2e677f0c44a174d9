"""
对话相关数据模型
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LLMOptions(BaseModel):
    """LLM 调用选项"""
    max_tokens: int = Field(default=2048, description="最大 Token 数")
    timeout: float = Field(default=120.0, description="超时时间（秒）")


class ChatMessage(BaseModel):
    """对话历史中的一条消息"""
    role: Literal["user", "assistant"] = Field(..., description="消息角色")
    content: str = Field(..., description="消息内容")


class ChatResult(BaseModel):
    """
    一次发送的结果

    content 与 error 二选一：成功时为模型回复，失败时为可展示给用户的错误信息
    """
    content: str | None = Field(default=None, description="模型回复")
    error: str | None = Field(default=None, description="错误信息")

    @property
    def ok(self) -> bool:
        return self.error is None
