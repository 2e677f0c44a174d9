"""
Prompt 模板
"""

from __future__ import annotations


SYSTEM_PROMPT = """You are a helpful LaTeX assistant integrated into LaTeXy, an AI-powered LaTeX editor.

Your capabilities:
1. Help users write and edit LaTeX documents
2. Explain LaTeX concepts and syntax
3. Suggest appropriate packages for specific needs
4. Fix LaTeX errors and improve formatting
5. Generate mathematical equations, tables, figures, and diagrams

When providing LaTeX code, wrap it in ```latex code blocks so the user can easily apply it to their document.

Current document context will be provided. Be concise but thorough."""


CONTEXT_MESSAGE_PROMPT = """Current LaTeX document:
```latex
{document}
```

User request: {message}"""


def build_context_message(document: str, message: str) -> str:
    """
    把当前文档注入到用户请求中

    Args:
        document: 当前文件的完整内容
        message: 用户输入

    Returns:
        发送给模型的用户消息
    """
    return CONTEXT_MESSAGE_PROMPT.format(document=document, message=message)
