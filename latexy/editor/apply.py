"""
把模型回复中的代码块应用到文档
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from pydantic import BaseModel, Field


END_DOCUMENT = "\\end{document}"

_markdown = MarkdownIt("commonmark")


class CodeBlock(BaseModel):
    """回复中的一个代码块"""
    code: str = Field(..., description="代码内容")
    language: str = Field(default="", description="围栏上标注的语言")

    @property
    def is_latex(self) -> bool:
        return is_latex_code(self.code)


def extract_code_blocks(markdown: str) -> list[CodeBlock]:
    """
    提取 Markdown 中的代码块（围栏代码块与缩进代码块）

    Args:
        markdown: 模型回复

    Returns:
        按出现顺序排列的代码块
    """
    blocks = []
    for token in _markdown.parse(markdown):
        if token.type in ("fence", "code_block"):
            language = token.info.strip().split(" ")[0] if token.info else ""
            blocks.append(CodeBlock(code=token.content.removesuffix("\n"), language=language))
    return blocks


def is_latex_code(code: str) -> bool:
    """只有看起来像 LaTeX 的代码块才提供「应用到编辑器」"""
    return "\\" in code or "begin{" in code


def apply_code(document: str, code: str) -> str:
    """
    把代码片段应用到文档

    - 含 \\documentclass：视为完整文档，整体替换
    - 否则插入到最后一个 \\end{document} 之前
    - 文档没有 \\end{document} 时追加到末尾

    Returns:
        新的文档内容
    """
    if "\\documentclass" in code:
        return code

    end_pos = document.rfind(END_DOCUMENT)
    if end_pos != -1:
        return document[:end_pos] + code + "\n\n" + document[end_pos:]

    return document + "\n\n" + code
