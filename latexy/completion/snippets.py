"""
片段模板展开

模板中 ${name} 为带默认文本的占位字段，${} 为空字段
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field


FIELD_PATTERN = re.compile(r"\$\{([^}]*)\}")


class ExpandedSnippet(BaseModel):
    """展开后的片段"""
    text: str = Field(..., description="插入文本")
    fields: list[tuple[int, int]] = Field(default_factory=list, description="各字段在 text 中的 [start, end) 区间")

    @property
    def cursor(self) -> int:
        """插入后光标位置：第一个字段的起点，没有字段时为末尾"""
        return self.fields[0][0] if self.fields else len(self.text)


def expand_snippet(template: str) -> ExpandedSnippet:
    """
    展开片段模板

    Args:
        template: 片段模板

    Returns:
        ExpandedSnippet，字段区间按出现顺序排列
    """
    parts: list[str] = []
    fields: list[tuple[int, int]] = []
    length = 0
    last = 0

    for match in FIELD_PATTERN.finditer(template):
        literal = template[last:match.start()]
        parts.append(literal)
        length += len(literal)

        placeholder = match.group(1)
        parts.append(placeholder)
        fields.append((length, length + len(placeholder)))
        length += len(placeholder)
        last = match.end()

    parts.append(template[last:])
    return ExpandedSnippet(text="".join(parts), fields=fields)
