"""
LaTeXy CLI 命令行入口

在终端中操作编辑器工作区：
- 文件管理：files / new / open / show / write
- 补全：complete
- 宏包：packages / add-package / remove-package
- AI 助手：chat / apply / history
- 对比与导出：diff / preview / export-pdf
- 设置：settings
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from .completion import apply_completion, rank_completions, resolve_completions
from .config import PROVIDERS
from .editor import extract_code_blocks, has_changes, package_listing, render_diff_html
from .models import WorkspaceError
from .render import PdfExporter, ZOOM_STEP, clamp_zoom
from .session import EditorSession


app = typer.Typer(
    name="latexy",
    help="LaTeXy - AI 辅助的 LaTeX 编辑器",
    add_completion=False,
)

console = Console()


class CLIState:
    """全局选项"""
    store_dir: Optional[Path] = None
    env_file: Optional[Path] = None


state = CLIState()


def open_session() -> EditorSession:
    return EditorSession.open(state.store_dir, state.env_file)


def read_source(source: str) -> str:
    """读取文件内容，"-" 表示标准输入"""
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        console.print(f"[red]错误: 文件不存在: {path}[/red]")
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def offset_from_line_column(text: str, line: int, column: int) -> int:
    """把 1 起始的行号、列号转换为偏移"""
    lines = text.split("\n")
    if not 1 <= line <= len(lines):
        raise ValueError(f"Line out of range: {line}")
    if not 1 <= column <= len(lines[line - 1]) + 1:
        raise ValueError(f"Column out of range: {column}")
    return sum(len(l) + 1 for l in lines[:line - 1]) + column - 1


def last_assistant_reply(session: EditorSession) -> str | None:
    for message in reversed(session.workspace.chat_history):
        if message.role == "assistant":
            return message.content
    return None


def print_code_blocks(reply: str) -> None:
    """列出回复中可应用的 LaTeX 代码块"""
    blocks = [b for b in extract_code_blocks(reply) if b.is_latex]
    if not blocks:
        return
    console.print(f"[dim]可应用的代码块: {len(blocks)} 个，使用 latexy apply --block N 应用到编辑器[/dim]")


@app.command("files")
def files() -> None:
    """列出工作区中的文件"""
    session = open_session()

    table = Table(title="文件", show_header=True)
    table.add_column("文件名", style="cyan")
    table.add_column("行数", justify="right")
    table.add_column("当前", justify="center")

    for name, document in session.workspace.files.items():
        active = name == session.workspace.active_file
        table.add_row(
            name,
            str(document.content.count("\n") + 1),
            "[green]●[/green]" if active else "",
        )

    console.print(table)


@app.command("new")
def new_file(
    filename: str = typer.Argument(..., help="新文件名，如 chapter1.tex"),
) -> None:
    """新建文件并切换过去"""
    session = open_session()
    try:
        name = session.create_file(filename)
    except WorkspaceError as e:
        console.print(f"[red]错误: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ 已创建并打开: {name}[/green]")


@app.command("open")
def open_file(
    filename: str = typer.Argument(..., help="文件名"),
) -> None:
    """切换当前文件（同时重置差异基准）"""
    session = open_session()
    if not session.switch_to_file(filename):
        console.print(f"[red]错误: 文件不存在: {filename}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ 当前文件: {filename}[/green]")


@app.command("show")
def show(
    line_numbers: bool = typer.Option(True, "--line-numbers/--no-line-numbers", help="显示行号"),
) -> None:
    """显示当前文件内容"""
    session = open_session()
    console.print(Panel(
        Syntax(session.content, "latex", line_numbers=line_numbers, word_wrap=True),
        title=session.workspace.active_file,
        border_style="blue",
    ))


@app.command("write")
def write(
    source: str = typer.Argument(..., help="内容来源文件，\"-\" 表示标准输入"),
) -> None:
    """用文件内容替换当前文件"""
    session = open_session()
    session.update_content(read_source(source))
    console.print(f"[green]✓ 已写入: {session.workspace.active_file}[/green]")


@app.command("complete")
def complete(
    line: int = typer.Option(..., "--line", "-l", help="光标所在行（从 1 开始）"),
    column: int = typer.Option(..., "--column", "-c", help="光标所在列（从 1 开始）"),
    explicit: bool = typer.Option(False, "--explicit", help="未输入字符时也给出候选"),
    select: Optional[str] = typer.Option(None, "--select", "-s", help="应用指定标签的候选"),
    limit: int = typer.Option(30, "--limit", help="最多显示的候选数"),
) -> None:
    """
    查看光标处的补全候选

    光标位于 \\usepackage{ 参数内时给出宏包名，否则给出命令、表格与环境片段。
    """
    session = open_session()
    text = session.content

    try:
        pos = offset_from_line_column(text, line, column)
    except ValueError as e:
        console.print(f"[red]错误: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    result = resolve_completions(text, pos, explicit=explicit)
    if result is None:
        console.print("[dim]没有候选[/dim]")
        return

    ranked = rank_completions(result)

    if select is not None:
        chosen = next((c for c in result.options if c.label == select), None)
        if chosen is None:
            console.print(f"[red]错误: 没有该候选: {escape(select)}[/red]")
            raise typer.Exit(code=1)
        new_text, cursor = apply_completion(text, result, chosen)
        session.update_content(new_text)
        console.print(f"[green]✓ 已插入 {escape(chosen.label)}，光标偏移 {cursor}[/green]")
        return

    table = Table(title=f"补全候选（已输入: {result.text or '-'}）", show_header=True)
    table.add_column("标签", style="cyan")
    table.add_column("类型")
    table.add_column("说明")
    table.add_column("权重", justify="right")
    for completion in ranked[:limit]:
        table.add_row(
            Text(completion.label, style="cyan"),
            completion.type,
            Text(completion.detail),
            str(completion.boost) if completion.boost is not None else "",
        )
    console.print(table)


@app.command("packages")
def packages(
    query: str = typer.Argument("", help="按名称或说明过滤"),
) -> None:
    """列出可用宏包及安装状态"""
    session = open_session()

    table = Table(title="宏包", show_header=True)
    table.add_column("宏包", style="cyan")
    table.add_column("说明")
    table.add_column("预览支持", justify="center")
    table.add_column("已引入", justify="center")

    for entry in package_listing(session.content, query):
        pkg = entry.package
        table.add_row(
            pkg.name,
            pkg.desc if pkg.supported else f"{pkg.desc} (PDF only)",
            "✓" if pkg.supported else "",
            "[green]✓[/green]" if entry.installed else "[dim]-[/dim]",
        )

    console.print(table)


@app.command("add-package")
def add_package_cmd(
    name: str = typer.Argument(..., help="宏包名"),
) -> None:
    """在导言区引入宏包"""
    session = open_session()
    session.add_package(name)
    console.print(f"[green]✓ 已引入宏包: {name}[/green]")


@app.command("remove-package")
def remove_package_cmd(
    name: str = typer.Argument(..., help="宏包名"),
) -> None:
    """删除宏包的 \\usepackage 行"""
    session = open_session()
    session.remove_package(name)
    console.print(f"[green]✓ 已移除宏包: {name}[/green]")


@app.command("chat")
def chat(
    message: str = typer.Argument(..., help="发送给 AI 助手的消息"),
    provider: Optional[str] = typer.Option(
        None,
        "--provider", "-p",
        help=f"模型服务商（{', '.join(PROVIDERS)}）",
    ),
) -> None:
    """
    向 AI 助手发送消息

    当前文件内容会作为上下文一并发送。
    """
    session = open_session()
    if provider:
        session.settings.llm_provider = provider

    with console.status("[cyan]思考中...[/cyan]"):
        result = asyncio.run(session.send(message))

    if result is None:
        console.print("[yellow]消息为空[/yellow]")
        raise typer.Exit(code=1)
    if not result.ok:
        console.print(f"[red]⚠️ {escape(result.error or '')}[/red]")
        raise typer.Exit(code=1)

    console.print(Panel(Markdown(result.content or ""), title="Assistant", border_style="green"))
    print_code_blocks(result.content or "")


@app.command("apply")
def apply(
    source: Optional[str] = typer.Argument(None, help="代码来源文件，\"-\" 表示标准输入"),
    block: int = typer.Option(1, "--block", "-b", help="未给出来源时，应用最近一次回复中的第 N 个 LaTeX 代码块"),
) -> None:
    """
    把代码应用到当前文件

    含 \\documentclass 的代码替换整个文档，否则插入到 \\end{document} 之前。
    """
    session = open_session()

    if source is not None:
        code = read_source(source)
    else:
        reply = last_assistant_reply(session)
        if reply is None:
            console.print("[red]错误: 还没有助手回复[/red]")
            raise typer.Exit(code=1)
        blocks = [b for b in extract_code_blocks(reply) if b.is_latex]
        if not 1 <= block <= len(blocks):
            console.print(f"[red]错误: 最近的回复中只有 {len(blocks)} 个 LaTeX 代码块[/red]")
            raise typer.Exit(code=1)
        code = blocks[block - 1].code

    session.apply_code(code)
    console.print(f"[green]✓ 已应用到: {session.workspace.active_file}[/green]")


@app.command("history")
def history(
    clear: bool = typer.Option(False, "--clear", help="清空对话历史"),
) -> None:
    """查看 AI 对话历史"""
    session = open_session()
    if clear:
        session.clear_chat()
        console.print("[green]✓ 对话历史已清空[/green]")
        return

    if not session.workspace.chat_history:
        console.print("[dim]暂无对话[/dim]")
        return

    for message in session.workspace.chat_history:
        if message.role == "user":
            console.print(Panel(Text(message.content), title="You", border_style="cyan"))
        else:
            console.print(Panel(Markdown(message.content), title="Assistant", border_style="green"))


@app.command("diff")
def diff(
    html_output: Optional[Path] = typer.Option(None, "--html", help="同时输出 HTML 对比视图"),
    reset: bool = typer.Option(False, "--reset", help="以当前内容作为新的基准"),
) -> None:
    """逐行对比当前文件与基准内容"""
    session = open_session()

    if reset:
        session.reset_baseline()
        console.print("[green]✓ 差异基准已重置[/green]")
        return

    rows = session.diff()

    if html_output:
        html_output.parent.mkdir(parents=True, exist_ok=True)
        html_output.write_text(render_diff_html(rows), encoding="utf-8")
        console.print(f"[green]✓ HTML 对比视图: {html_output}[/green]")

    if not has_changes(rows):
        console.print("[dim]没有变化[/dim]")
        return

    table = Table(show_header=True, title=session.workspace.active_file)
    table.add_column("#", justify="right", style="dim")
    table.add_column("原始")
    table.add_column("当前")
    for i, row in enumerate(rows, 1):
        if row.status == "changed":
            table.add_row(str(i), Text(row.original, style="red"), Text(row.modified, style="green"))
        else:
            table.add_row(str(i), Text(row.original), Text(row.modified))
    console.print(table)


@app.command("preview")
def preview(
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="输出 HTML 路径（默认写入存储目录）"),
    zoom: float = typer.Option(1.0, "--zoom", "-z", help=f"缩放比例（0.5 ~ 2.0，步长 {ZOOM_STEP}）"),
) -> None:
    """编译当前文件并生成 HTML 预览"""
    session = open_session()
    zoom = clamp_zoom(zoom)

    if output_file is None:
        path = session.compile_preview(zoom)
        if path is None:
            raise typer.Exit(code=1)
    else:
        try:
            html = session.render_preview(zoom)
        except RuntimeError as e:
            console.print(f"[red]错误: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(html, encoding="utf-8")
        path = output_file

    console.print(f"[green]✓ 预览: {path}[/green]")


@app.command("export-pdf")
def export_pdf(
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="输出 PDF 路径（默认由文件名生成）"),
    zoom: float = typer.Option(1.0, "--zoom", "-z", help="缩放比例"),
) -> None:
    """导出当前文件为 PDF"""
    session = open_session()
    output_path = output_file or Path(session.default_pdf_name())

    console.print("[bold blue]📄 Exporting...[/bold blue]")
    try:
        html = session.render_preview(clamp_zoom(zoom))
        PdfExporter().export(html, output_path)
    except Exception as e:
        console.print(f"[red]PDF export failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command("settings")
def settings(
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help=f"模型服务商（{', '.join(PROVIDERS)}）"),
    openai_key: Optional[str] = typer.Option(None, "--openai-key", help="OpenAI API Key"),
    anthropic_key: Optional[str] = typer.Option(None, "--anthropic-key", help="Anthropic API Key"),
    gemini_key: Optional[str] = typer.Option(None, "--gemini-key", help="Gemini API Key"),
    ollama_url: Optional[str] = typer.Option(None, "--ollama-url", help="Ollama 服务地址"),
    auto_compile: Optional[bool] = typer.Option(None, "--auto-compile/--no-auto-compile", help="修改后自动编译预览"),
    sync_scroll: Optional[bool] = typer.Option(None, "--sync-scroll/--no-sync-scroll", help="同步滚动"),
) -> None:
    """查看或修改设置"""
    session = open_session()

    updates = {
        "llm_provider": provider,
        "openai_key": openai_key,
        "anthropic_key": anthropic_key,
        "gemini_key": gemini_key,
        "ollama_url": ollama_url,
        "auto_compile": auto_compile,
        "sync_scroll": sync_scroll,
    }
    updates = {k: v for k, v in updates.items() if v is not None}

    if provider is not None and provider not in PROVIDERS:
        console.print(f"[red]错误: 未知的服务商: {provider}[/red]")
        raise typer.Exit(code=1)

    if updates:
        session.settings = session.settings.merged(updates)
        session.save_settings()
        console.print("[green]✓ 设置已保存[/green]")

    display_settings(session)


def mask_key(key: str) -> str:
    if not key:
        return "[dim]未设置[/dim]"
    return f"{key[:4]}…{key[-4:]}" if len(key) > 8 else "****"


def display_settings(session: EditorSession) -> None:
    """显示设置"""
    s = session.settings
    table = Table(title="设置", show_header=False)
    table.add_column("项", style="cyan")
    table.add_column("值")
    table.add_row("服务商", s.llm_provider)
    table.add_row("OpenAI Key", mask_key(s.openai_key))
    table.add_row("Anthropic Key", mask_key(s.anthropic_key))
    table.add_row("Gemini Key", mask_key(s.gemini_key))
    table.add_row("Ollama URL", s.ollama_url)
    table.add_row("自动编译", "✓" if s.auto_compile else "-")
    table.add_row("同步滚动", "✓" if s.sync_scroll else "-")
    table.add_row("存储目录", str(session.store.root))
    console.print(table)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    store_dir: Optional[Path] = typer.Option(
        None,
        "--store",
        help="工作区存储目录（默认 $LATEXY_HOME 或 ./.latexy）",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
):
    """
    LaTeXy - AI 辅助的 LaTeX 编辑器

    直接运行 latexy（不带参数）进入交互式界面
    """
    state.store_dir = store_dir
    state.env_file = env_file

    if ctx.invoked_subcommand is None:
        from .tui import run_tui
        run_tui(open_session())


if __name__ == "__main__":
    app()
