"""
上下文相关的补全解析

光标位于 \\usepackage{ 参数内时给出宏包名候选，否则给出全部命令与片段候选。
排序（boost 优先，再按字典序）属于调用方，由 rank_completions 提供。
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from .catalog import PACKAGE_COMPLETIONS, Completion, all_completions
from .snippets import expand_snippet


# 只向前看这么多字符来确定正在输入的词
MAX_LOOKBEHIND = 250

WORD_BEFORE = re.compile(r"\\?[\w@]*$", re.ASCII)
PACKAGE_ARGUMENT = re.compile(r"\\usepackage\{[\w,]*$", re.ASCII)

PACKAGE_VALID_FOR = r"^[\w]*$"
COMMAND_VALID_FOR = r"^\\?[\w@]*$"


class CompletionResult(BaseModel):
    """补全结果"""
    from_pos: int = Field(..., description="被替换词的起点")
    to_pos: int = Field(..., description="被替换词的终点（光标位置）")
    text: str = Field(default="", description="已输入的词")
    options: list[Completion] = Field(default_factory=list, description="候选列表")
    valid_for: str = Field(..., description="继续输入时结果仍然有效的正则")

    def is_valid_for(self, typed: str) -> bool:
        return re.match(self.valid_for, typed, re.ASCII) is not None


def line_before_cursor(text: str, pos: int) -> tuple[int, str]:
    """返回光标所在行的行首偏移和行首到光标的文本"""
    line_start = text.rfind("\n", 0, pos) + 1
    return line_start, text[line_start:pos]


def resolve_completions(text: str, pos: int, explicit: bool = False) -> CompletionResult | None:
    """
    解析光标处的补全候选

    Args:
        text: 缓冲区全文
        pos: 光标偏移
        explicit: 是否为用户主动触发（如 Ctrl+Space）

    Returns:
        CompletionResult；未输入任何字符且非主动触发时返回 None
    """
    if not 0 <= pos <= len(text):
        raise ValueError(f"Cursor position out of range: {pos}")

    line_start, before = line_before_cursor(text, pos)
    window_start = max(line_start, pos - MAX_LOOKBEHIND)
    window = text[window_start:pos]

    word = WORD_BEFORE.search(window)
    word_from = window_start + word.start()
    if word_from == pos and not explicit:
        return None

    if PACKAGE_ARGUMENT.search(before):
        return CompletionResult(
            from_pos=word_from,
            to_pos=pos,
            text=word.group(0),
            options=list(PACKAGE_COMPLETIONS),
            valid_for=PACKAGE_VALID_FOR,
        )

    return CompletionResult(
        from_pos=word_from,
        to_pos=pos,
        text=word.group(0),
        options=all_completions(),
        valid_for=COMMAND_VALID_FOR,
    )


def rank_completions(result: CompletionResult, typed: str | None = None) -> list[Completion]:
    """
    过滤并排序候选：前缀匹配（忽略大小写），boost 降序，再按标签字典序
    """
    typed = result.text if typed is None else typed
    needle = typed.lower()
    matches = [c for c in result.options if c.label.lower().startswith(needle)]
    return sorted(matches, key=lambda c: (-(c.boost or 0), c.label))


def apply_completion(text: str, result: CompletionResult, completion: Completion) -> tuple[str, int]:
    """
    把选中的候选写入缓冲区

    Returns:
        (新文本, 新光标位置)
    """
    expanded = expand_snippet(completion.insert_text)
    new_text = text[:result.from_pos] + expanded.text + text[result.to_pos:]
    return new_text, result.from_pos + expanded.cursor
