"""
LaTeXy: AI 辅助的 LaTeX 编辑器
上下文补全、多服务商 AI 助手、宏包管理、差异对比与 PDF 导出
"""

__version__ = "0.1.0"

from .models import Workspace, DocumentFile, WorkspaceError, ChatMessage, ChatResult, LLMOptions
from .config import EditorSettings, WorkspaceStore, load_config
from .completion import Completion, CompletionResult, resolve_completions, rank_completions
from .llm import LLMProvider, LLMResponse, LLMError, EditorAssistant, create_provider
from .editor import add_package, remove_package, get_installed_packages, apply_code, diff_lines
from .render import LatexCompiler, PdfExporter
from .session import EditorSession

__all__ = [
    # 版本
    "__version__",
    # 模型
    "Workspace",
    "DocumentFile",
    "WorkspaceError",
    "ChatMessage",
    "ChatResult",
    "LLMOptions",
    # 配置
    "EditorSettings",
    "WorkspaceStore",
    "load_config",
    # 补全
    "Completion",
    "CompletionResult",
    "resolve_completions",
    "rank_completions",
    # LLM
    "LLMProvider",
    "LLMResponse",
    "LLMError",
    "EditorAssistant",
    "create_provider",
    # 编辑
    "add_package",
    "remove_package",
    "get_installed_packages",
    "apply_code",
    "diff_lines",
    # 渲染
    "LatexCompiler",
    "PdfExporter",
    # 会话
    "EditorSession",
]
