"""
自动补全候选数据

四组固定候选：LaTeX 命令、表格片段、环境片段、宏包名
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


CompletionType = Literal["keyword", "function", "constant", "snippet", "module"]


class Completion(BaseModel):
    """一个补全候选"""
    label: str = Field(..., description="显示与匹配用的标签")
    type: CompletionType = Field(..., description="候选类型（决定图标）")
    detail: str = Field(default="", description="附加说明")
    boost: int | None = Field(default=None, description="排序加权，越大越靠前")
    template: str | None = Field(default=None, description="片段模板，${name} 为占位字段")

    @property
    def insert_text(self) -> str:
        """未展开的插入文本"""
        return self.template if self.template is not None else self.label


def snippet(
    template: str,
    label: str,
    type: CompletionType,
    detail: str,
    boost: int | None = None,
) -> Completion:
    return Completion(label=label, type=type, detail=detail, boost=boost, template=template)


def symbol(label: str, detail: str) -> Completion:
    return Completion(label=label, type="constant", detail=detail)


LATEX_COMMANDS: list[Completion] = [
    # 文档结构
    snippet(r"\documentclass{${article}}", r"\documentclass", "keyword", "Document class", boost=10),
    snippet(r"\usepackage{${package}}", r"\usepackage", "keyword", "Import package", boost=9),
    snippet("\\begin{${environment}}\n\t${}\n\\end{${environment}}", r"\begin", "keyword", "Begin environment", boost=8),

    # 章节
    snippet(r"\section{${title}}", r"\section", "function", "Section heading"),
    snippet(r"\subsection{${title}}", r"\subsection", "function", "Subsection heading"),
    snippet(r"\subsubsection{${title}}", r"\subsubsection", "function", "Subsubsection heading"),
    snippet(r"\section*{${title}}", r"\section*", "function", "Unnumbered section"),
    snippet(r"\paragraph{${title}}", r"\paragraph", "function", "Paragraph heading"),
    snippet(r"\chapter{${title}}", r"\chapter", "function", "Chapter heading"),

    # 文本格式
    snippet(r"\textbf{${text}}", r"\textbf", "function", "Bold text"),
    snippet(r"\textit{${text}}", r"\textit", "function", "Italic text"),
    snippet(r"\underline{${text}}", r"\underline", "function", "Underlined text"),
    snippet(r"\emph{${text}}", r"\emph", "function", "Emphasized text"),
    snippet(r"\texttt{${text}}", r"\texttt", "function", "Monospace text"),
    snippet(r"\textsc{${text}}", r"\textsc", "function", "Small caps"),

    # 数学
    snippet(r"\frac{${num}}{${denom}}", r"\frac", "function", "Fraction"),
    snippet(r"\sqrt{${expr}}", r"\sqrt", "function", "Square root"),
    snippet(r"\sqrt[${n}]{${expr}}", r"\sqrt[n]", "function", "Nth root"),
    snippet(r"\sum_{${i=1}}^{${n}}", r"\sum", "function", "Summation"),
    snippet(r"\int_{${a}}^{${b}}", r"\int", "function", "Integral"),
    snippet(r"\lim_{${x \to \infty}}", r"\lim", "function", "Limit"),
    snippet(r"\prod_{${i=1}}^{${n}}", r"\prod", "function", "Product"),

    # 希腊字母
    symbol(r"\alpha", "α"),
    symbol(r"\beta", "β"),
    symbol(r"\gamma", "γ"),
    symbol(r"\delta", "δ"),
    symbol(r"\epsilon", "ε"),
    symbol(r"\theta", "θ"),
    symbol(r"\lambda", "λ"),
    symbol(r"\mu", "μ"),
    symbol(r"\pi", "π"),
    symbol(r"\sigma", "σ"),
    symbol(r"\omega", "ω"),
    symbol(r"\Gamma", "Γ"),
    symbol(r"\Delta", "Δ"),
    symbol(r"\Sigma", "Σ"),
    symbol(r"\Omega", "Ω"),

    # 数学符号
    symbol(r"\infty", "∞"),
    symbol(r"\partial", "∂"),
    symbol(r"\nabla", "∇"),
    symbol(r"\times", "×"),
    symbol(r"\cdot", "·"),
    symbol(r"\leq", "≤"),
    symbol(r"\geq", "≥"),
    symbol(r"\neq", "≠"),
    symbol(r"\approx", "≈"),
    symbol(r"\equiv", "≡"),
    symbol(r"\rightarrow", "→"),
    symbol(r"\leftarrow", "←"),
    symbol(r"\Rightarrow", "⇒"),
    symbol(r"\Leftarrow", "⇐"),
    symbol(r"\forall", "∀"),
    symbol(r"\exists", "∃"),
    symbol(r"\in", "∈"),
    symbol(r"\subset", "⊂"),
    symbol(r"\cup", "∪"),
    symbol(r"\cap", "∩"),

    # 引用
    snippet(r"\label{${key}}", r"\label", "function", "Create label"),
    snippet(r"\ref{${key}}", r"\ref", "function", "Reference"),
    snippet(r"\cite{${key}}", r"\cite", "function", "Citation"),
    snippet(r"\footnote{${text}}", r"\footnote", "function", "Footnote"),

    # 图片
    snippet(r"\includegraphics[width=${0.8}\textwidth]{${filename}}", r"\includegraphics", "function", "Include image"),
    snippet(r"\caption{${text}}", r"\caption", "function", "Caption"),
]


TABLE_SNIPPETS: list[Completion] = [
    snippet(
        r"""\begin{tabular}{|c|c|c|}
\hline
${Header 1} & ${Header 2} & ${Header 3} \\
\hline
${Cell 1} & ${Cell 2} & ${Cell 3} \\
\hline
\end{tabular}""",
        "table3", "snippet", "3-column table", boost=5,
    ),
    snippet(
        r"""\begin{tabular}{|l|r|}
\hline
${Left} & ${Right} \\
\hline
${Data 1} & ${Data 2} \\
\hline
\end{tabular}""",
        "table2", "snippet", "2-column table", boost=5,
    ),
    snippet(
        r"""\begin{table}[h]
\centering
\begin{tabular}{|c|c|c|}
\hline
${Header 1} & ${Header 2} & ${Header 3} \\
\hline
${Row 1} & ${} & ${} \\
${Row 2} & ${} & ${} \\
\hline
\end{tabular}
\caption{${Table caption}}
\label{tab:${label}}
\end{table}""",
        "tablefloat", "snippet", "Floating table with caption", boost=6,
    ),
    snippet(
        r"""\begin{tabular}{@{}lll@{}}
\toprule
${Header 1} & ${Header 2} & ${Header 3} \\
\midrule
${} & ${} & ${} \\
${} & ${} & ${} \\
\bottomrule
\end{tabular}""",
        "tablebooktabs", "snippet", "Professional booktabs table", boost=5,
    ),
]


ENVIRONMENT_SNIPPETS: list[Completion] = [
    snippet("\\begin{itemize}\n  \\item ${}\n  \\item ${}\n\\end{itemize}", "itemize", "snippet", "Bullet list"),
    snippet("\\begin{enumerate}\n  \\item ${}\n  \\item ${}\n\\end{enumerate}", "enumerate", "snippet", "Numbered list"),
    snippet("\\begin{equation}\n  ${}\n\\end{equation}", "equation", "snippet", "Numbered equation"),
    snippet("\\begin{align}\n  ${} &= ${} \\\\\n  &= ${}\n\\end{align}", "align", "snippet", "Aligned equations"),
    snippet(
        "\\begin{figure}[h]\n"
        "  \\centering\n"
        "  \\includegraphics[width=0.8\\textwidth]{${filename}}\n"
        "  \\caption{${caption}}\n"
        "  \\label{fig:${label}}\n"
        "\\end{figure}",
        "figure", "snippet", "Figure environment",
    ),
    snippet("\\begin{abstract}\n  ${}\n\\end{abstract}", "abstract", "snippet", "Abstract"),
    snippet("\\begin{center}\n  ${}\n\\end{center}", "center", "snippet", "Centered content"),
    snippet("\\begin{verbatim}\n${}\n\\end{verbatim}", "verbatim", "snippet", "Verbatim text"),
    snippet("\\begin{quote}\n  ${}\n\\end{quote}", "quote", "snippet", "Block quote"),
    snippet("\\begin{matrix}\n  ${a} & ${b} \\\\\n  ${c} & ${d}\n\\end{matrix}", "matrix", "snippet", "Matrix"),
    snippet("\\begin{bmatrix}\n  ${a} & ${b} \\\\\n  ${c} & ${d}\n\\end{bmatrix}", "bmatrix", "snippet", "Bracketed matrix"),
    snippet(
        "\\begin{cases}\n"
        "  ${expr1} & \\text{if } ${cond1} \\\\\n"
        "  ${expr2} & \\text{otherwise}\n"
        "\\end{cases}",
        "cases", "snippet", "Piecewise function",
    ),
]


PACKAGE_COMPLETIONS: list[Completion] = [
    Completion(label=name, type="module", detail=detail)
    for name, detail in [
        ("amsmath", "Advanced math"),
        ("amssymb", "Math symbols"),
        ("graphicx", "Graphics support"),
        ("hyperref", "Hyperlinks"),
        ("geometry", "Page layout"),
        ("booktabs", "Professional tables"),
        ("tikz", "Diagrams"),
        ("xcolor", "Colors"),
        ("listings", "Code listings"),
        ("algorithm2e", "Algorithms"),
        ("biblatex", "Bibliography"),
        ("fontspec", "Font selection"),
        ("microtype", "Typography"),
        ("siunitx", "SI units"),
        ("cleveref", "Smart references"),
    ]
]


def all_completions() -> list[Completion]:
    """通用位置的候选：命令 + 表格片段 + 环境片段"""
    return [*LATEX_COMMANDS, *TABLE_SNIPPETS, *ENVIRONMENT_SNIPPETS]
