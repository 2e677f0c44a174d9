"""
配置管理模块
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field


PROVIDERS = ("openai", "anthropic", "gemini", "ollama")


class EditorSettings(BaseModel):
    """编辑器设置"""
    openai_key: str = Field(default="", description="OpenAI API Key")
    anthropic_key: str = Field(default="", description="Anthropic API Key")
    gemini_key: str = Field(default="", description="Gemini API Key")
    ollama_url: str = Field(default="http://localhost:11434", description="Ollama 服务地址")
    auto_compile: bool = Field(default=True, description="内容变化后自动重新编译预览")
    sync_scroll: bool = Field(default=False, description="同步滚动")
    llm_provider: str = Field(default="openai", description="当前使用的模型服务商")

    def merged(self, overrides: dict[str, Any]) -> "EditorSettings":
        """返回合并了已保存设置的新实例（未知字段忽略，取值重新校验）"""
        known = {k: v for k, v in overrides.items() if k in type(self).model_fields}
        return self.model_validate({**self.model_dump(), **known})


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(env_file: str | Path | None = None) -> EditorSettings:
    """
    从环境变量加载配置

    Args:
        env_file: .env 文件路径，默认为当前目录的 .env

    Returns:
        EditorSettings 实例
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return EditorSettings(
        openai_key=os.getenv("OPENAI_API_KEY", ""),
        anthropic_key=os.getenv("ANTHROPIC_API_KEY", ""),
        gemini_key=os.getenv("GEMINI_API_KEY", ""),
        ollama_url=os.getenv("OLLAMA_URL", "http://localhost:11434"),
        auto_compile=_env_flag("LATEXY_AUTO_COMPILE", True),
        sync_scroll=_env_flag("LATEXY_SYNC_SCROLL", False),
        llm_provider=os.getenv("LATEXY_PROVIDER", "openai"),
    )


def get_api_key(settings: EditorSettings, provider: str) -> str:
    """取得服务商对应的 API Key，Ollama 及未知服务商返回空字符串"""
    keys = {
        "openai": settings.openai_key,
        "anthropic": settings.anthropic_key,
        "gemini": settings.gemini_key,
    }
    return keys.get(provider, "")
