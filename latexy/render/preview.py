"""
LaTeX 预览渲染

通过 pandoc 把 LaTeX 转为 HTML 片段，再套上带 KaTeX 自动渲染的页面模板
"""

from __future__ import annotations

import shutil
import subprocess

from jinja2 import Environment
from markupsafe import Markup
from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape


console = Console()

MIN_ZOOM = 0.5
MAX_ZOOM = 2.0
ZOOM_STEP = 0.1


PREVIEW_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{{ title }}</title>
    <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/katex@0.16.11/dist/katex.min.css">
    <script defer src="https://cdn.jsdelivr.net/npm/katex@0.16.11/dist/katex.min.js"></script>
    <script defer src="https://cdn.jsdelivr.net/npm/katex@0.16.11/dist/contrib/auto-render.min.js"></script>
    <style>
        body {
            margin: 0;
            padding: 20px;
            background: white;
            font-family: "Latin Modern Roman", "Computer Modern", Georgia, serif;
        }
        #latexOutput {
            transform: scale({{ zoom }});
            transform-origin: top left;
        }
        .latex-error {
            color: #e87a7a;
            font-family: monospace;
        }
    </style>
</head>
<body>
    <div id="latexOutput">
{{ body }}
    </div>
    <script>
        document.addEventListener("DOMContentLoaded", function () {
            renderMathInElement(document.getElementById("latexOutput"), {
                delimiters: [
                    { left: "$$", right: "$$", display: true },
                    { left: "\\\\[", right: "\\\\]", display: true },
                    { left: "$", right: "$", display: false },
                    { left: "\\\\(", right: "\\\\)", display: false }
                ],
                throwOnError: false,
                ignoredTags: ["script", "noscript", "style", "textarea", "pre", "code"]
            });
            document.body.setAttribute("data-rendered", "true");
        });
    </script>
</body>
</html>
"""

ERROR_HTML_TEMPLATE = """\
<div class="latex-error">
    <strong>LaTeX Error:</strong><br>
    <pre>{{ message }}</pre>
</div>"""

_env = Environment(autoescape=True)


class CompileResult(BaseModel):
    """编译结果，html 与 error 二选一"""
    html: str | None = Field(default=None, description="HTML 片段")
    error: str | None = Field(default=None, description="错误信息")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_html(self) -> str:
        """成功时返回片段，失败时返回错误提示块"""
        if self.ok:
            return self.html or ""
        return _env.from_string(ERROR_HTML_TEMPLATE).render(message=self.error)


def clamp_zoom(zoom: float) -> float:
    """缩放限制在 [0.5, 2.0]，保留一位小数"""
    return round(min(max(zoom, MIN_ZOOM), MAX_ZOOM), 1)


def build_preview_page(fragment: str, zoom: float = 1.0, title: str = "LaTeXy Preview") -> str:
    """
    生成完整的预览页面

    Args:
        fragment: 编译得到的 HTML 片段（不再转义）
        zoom: 缩放比例
        title: 页面标题

    Returns:
        HTML 文档字符串
    """
    template = _env.from_string(PREVIEW_HTML_TEMPLATE)
    return template.render(body=Markup(fragment), zoom=clamp_zoom(zoom), title=title)


class LatexCompiler:
    """
    LaTeX → HTML 编译器

    使用 pandoc 完成转换，数学公式保留给 KaTeX 在页面中渲染
    """

    def __init__(self, pandoc_path: str | None = None, timeout: float = 30.0):
        self.pandoc_path = pandoc_path or self._find_pandoc()
        self.timeout = timeout

    def _find_pandoc(self) -> str | None:
        """查找 pandoc 可执行文件"""
        return shutil.which("pandoc")

    def check_pandoc(self) -> bool:
        """检查 pandoc 是否可用"""
        if not self.pandoc_path:
            return False
        try:
            result = subprocess.run(
                [self.pandoc_path, "--version"],
                capture_output=True,
                text=True,
            )
            return result.returncode == 0
        except OSError:
            return False

    def compile(self, content: str) -> CompileResult:
        """
        编译 LaTeX 源码

        Args:
            content: LaTeX 源码

        Returns:
            CompileResult；pandoc 报错时 error 为其输出
        """
        if not self.check_pandoc():
            raise RuntimeError(
                "pandoc is not installed or not available. See https://pandoc.org/installing.html"
            )

        cmd = [
            self.pandoc_path,
            "--from", "latex",
            "--to", "html5",
            "--katex",
        ]
        try:
            result = subprocess.run(
                cmd,
                input=content,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return CompileResult(error=f"Compilation timed out after {self.timeout:g}s")

        if result.returncode != 0:
            message = result.stderr.strip() or f"pandoc exited with code {result.returncode}"
            return CompileResult(error=message)

        return CompileResult(html=result.stdout)

    def render_page(self, content: str, zoom: float = 1.0) -> str:
        """编译并生成完整预览页面（出错时页面中显示错误块）"""
        console.print("[dim]Compiling...[/dim]")
        result = self.compile(content)
        if not result.ok:
            console.print(f"[red]LaTeX Error: {escape(result.error or '')}[/red]")
        return build_preview_page(result.to_html(), zoom=zoom)
