"""
差异视图

按行号逐行对比，不做任何对齐：在中间插入或删除一行会让之后的所有行都显示为变化
"""

from __future__ import annotations

from typing import Literal

from jinja2 import Environment
from markupsafe import Markup
from pydantic import BaseModel, Field


class DiffRow(BaseModel):
    """一行对比结果"""
    original: str = Field(default="", description="原始行")
    modified: str = Field(default="", description="修改后的行")
    status: Literal["equal", "changed"] = Field(..., description="是否相同")


DIFF_TEMPLATE = """\
<div class="diff-pane original">
{%- for row in rows %}<div class="diff-line{{ ' removed' if row.status == 'changed' }}">{{ row.original or nbsp }}</div>{% endfor -%}
</div>
<div class="diff-pane modified">
{%- for row in rows %}<div class="diff-line{{ ' added' if row.status == 'changed' }}">{{ row.modified or nbsp }}</div>{% endfor -%}
</div>
"""

_env = Environment(autoescape=True)
_template = _env.from_string(DIFF_TEMPLATE)


def diff_lines(original: str, modified: str) -> list[DiffRow]:
    """
    逐行对比两段文本

    Args:
        original: 基准内容
        modified: 当前内容

    Returns:
        长度为两者行数较大值的对比结果，缺失的一侧为空字符串
    """
    original_lines = original.split("\n")
    modified_lines = modified.split("\n")

    rows = []
    for i in range(max(len(original_lines), len(modified_lines))):
        orig_line = original_lines[i] if i < len(original_lines) else ""
        mod_line = modified_lines[i] if i < len(modified_lines) else ""
        rows.append(DiffRow(
            original=orig_line,
            modified=mod_line,
            status="equal" if orig_line == mod_line else "changed",
        ))
    return rows


def has_changes(rows: list[DiffRow]) -> bool:
    return any(row.status == "changed" for row in rows)


def render_diff_html(rows: list[DiffRow]) -> str:
    """渲染左右两栏的 HTML，行内容会被转义，空行显示为 &nbsp;"""
    return _template.render(rows=rows, nbsp=Markup("&nbsp;"))
