"""
LaTeXy 交互式终端界面 (TUI)

提供菜单式操作界面，无需记忆命令行参数
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import questionary
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from .completion import apply_completion, rank_completions, resolve_completions
from .config import PROVIDERS
from .editor import extract_code_blocks, has_changes, package_listing
from .models import WorkspaceError
from .render import PdfExporter
from .session import EditorSession

console = Console()


# 自定义样式
STYLE = questionary.Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:green"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:green"),
])

# value=None 时 questionary 会返回标题，跳过项使用单独的取值
SKIP = -1


def show_banner(session: EditorSession):
    """显示欢迎横幅"""
    banner = """
    ╭─────────────────────────────────────────╮
    │      ✨ LaTeXy - AI LaTeX Editor        │
    ╰─────────────────────────────────────────╯
    """
    console.print(banner, style="cyan")
    console.print(
        f"[dim]当前文件: {escape(session.workspace.active_file)} | "
        f"服务商: {session.settings.llm_provider}[/dim]\n"
    )


def show_main_menu() -> str:
    """显示主菜单"""
    choices = [
        questionary.Choice("💬 AI 助手", value="chat"),
        questionary.Choice("📄 文件", value="files"),
        questionary.Choice("⌨️  补全", value="complete"),
        questionary.Choice("📦 宏包", value="packages"),
        questionary.Choice("🔍 对比", value="diff"),
        questionary.Choice("👁  预览", value="preview"),
        questionary.Choice("📤 导出 PDF", value="pdf"),
        questionary.Choice("⚙️  设置", value="settings"),
        questionary.Choice("🚪 退出", value="quit"),
    ]

    return questionary.select(
        "请选择操作：",
        choices=choices,
        style=STYLE,
    ).ask()


def chat_flow(session: EditorSession):
    """AI 对话，空输入返回主菜单"""
    console.print("\n[bold cyan]━━━ 💬 AI 助手 ━━━[/bold cyan]")
    console.print("[dim]当前文档会作为上下文发送，直接回车返回[/dim]\n")

    while True:
        message = questionary.text("You:", style=STYLE).ask()
        if not message or not message.strip():
            return

        with console.status("[cyan]思考中...[/cyan]"):
            result = asyncio.run(session.send(message))

        if result is None:
            continue
        if not result.ok:
            console.print(f"[red]⚠️ {escape(result.error or '')}[/red]\n")
            continue

        console.print(Panel(Markdown(result.content or ""), title="Assistant", border_style="green"))
        offer_code_blocks(session, result.content or "")


def offer_code_blocks(session: EditorSession, reply: str):
    """询问是否把回复中的 LaTeX 代码块应用到编辑器"""
    blocks = [b for b in extract_code_blocks(reply) if b.is_latex]
    if not blocks:
        return

    choices = [
        questionary.Choice(
            f"+ Apply #{i}: {block.code.splitlines()[0][:60] if block.code else ''}",
            value=i,
        )
        for i, block in enumerate(blocks)
    ]
    choices.append(questionary.Choice("跳过", value=SKIP))

    selected = questionary.select("应用代码块到编辑器？", choices=choices, style=STYLE).ask()
    if selected is None or selected == SKIP:
        return

    session.apply_code(blocks[selected].code)
    console.print(f"[green]✓ 已应用到 {escape(session.workspace.active_file)}[/green]\n")


def files_flow(session: EditorSession):
    """文件管理"""
    choices = [
        questionary.Choice(
            f"{'● ' if name == session.workspace.active_file else '  '}{name}",
            value=name,
        )
        for name in session.workspace.list_files()
    ]
    choices.append(questionary.Choice("+ 新建文件", value="__new__"))
    choices.append(questionary.Choice("查看当前文件", value="__show__"))

    choice = questionary.select("文件：", choices=choices, style=STYLE).ask()
    if choice is None:
        return

    if choice == "__show__":
        console.print(Panel(
            Syntax(session.content, "latex", line_numbers=True, word_wrap=True),
            title=session.workspace.active_file,
            border_style="blue",
        ))
    elif choice == "__new__":
        filename = questionary.text("文件名：", default="chapter.tex", style=STYLE).ask()
        if not filename:
            return
        try:
            session.create_file(filename)
            console.print(f"[green]✓ 已创建: {escape(filename.strip())}[/green]")
        except WorkspaceError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
    else:
        session.switch_to_file(choice)
        console.print(f"[green]✓ 当前文件: {escape(choice)}[/green]")


def complete_flow(session: EditorSession):
    """在指定行末尾查看并插入补全"""
    lines = session.content.split("\n")
    line_str = questionary.text(f"行号（1-{len(lines)}）：", style=STYLE).ask()
    try:
        line = int(line_str)
    except (TypeError, ValueError):
        return
    if not 1 <= line <= len(lines):
        console.print("[red]行号超出范围[/red]")
        return

    pos = sum(len(l) + 1 for l in lines[:line - 1]) + len(lines[line - 1])
    result = resolve_completions(session.content, pos, explicit=True)
    ranked = rank_completions(result) if result else []
    if not ranked:
        console.print("[dim]没有候选[/dim]")
        return

    choices = [
        questionary.Choice(f"{c.label}  {c.detail}", value=i)
        for i, c in enumerate(ranked[:30])
    ]
    selected = questionary.select("选择补全：", choices=choices, style=STYLE).ask()
    if selected is None:
        return

    new_text, _ = apply_completion(session.content, result, ranked[selected])
    session.update_content(new_text)
    console.print(f"[green]✓ 已插入 {escape(ranked[selected].label)}[/green]")


def packages_flow(session: EditorSession):
    """宏包管理"""
    query = questionary.text("搜索宏包（回车显示全部）：", style=STYLE).ask()
    if query is None:
        return

    entries = package_listing(session.content, query)
    if not entries:
        console.print("[dim]没有匹配的宏包[/dim]")
        return

    choices = []
    for entry in entries:
        pkg = entry.package
        mark = "✓" if pkg.supported else " "
        desc = pkg.desc if pkg.supported else f"{pkg.desc} (PDF only)"
        action = "Remove" if entry.installed else "Add"
        choices.append(questionary.Choice(f"[{action}] {pkg.name} {mark}  {desc}", value=entry))

    entry = questionary.select("宏包：", choices=choices, style=STYLE).ask()
    if entry is None:
        return

    if entry.installed:
        session.remove_package(entry.package.name)
        console.print(f"[green]✓ 已移除 {entry.package.name}[/green]")
    else:
        session.add_package(entry.package.name)
        console.print(f"[green]✓ 已引入 {entry.package.name}[/green]")


def diff_flow(session: EditorSession):
    """显示与基准的逐行对比"""
    rows = session.diff()
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

    if questionary.confirm("以当前内容作为新的基准？", default=False, style=STYLE).ask():
        session.reset_baseline()


def preview_flow(session: EditorSession):
    """生成 HTML 预览"""
    path = session.compile_preview()
    if path:
        console.print(f"[green]✓ 预览: {path}[/green]")


def pdf_flow(session: EditorSession):
    """导出 PDF"""
    output = questionary.text("输出文件：", default=session.default_pdf_name(), style=STYLE).ask()
    if not output:
        return

    console.print("[bold blue]📄 Exporting...[/bold blue]")
    try:
        html = session.render_preview()
        PdfExporter().export(html, Path(output))
    except Exception as e:
        console.print(f"[red]PDF export failed: {escape(str(e))}[/red]")


def settings_flow(session: EditorSession):
    """设置"""
    s = session.settings
    provider = questionary.select(
        "模型服务商：",
        choices=list(PROVIDERS),
        default=s.llm_provider if s.llm_provider in PROVIDERS else PROVIDERS[0],
        style=STYLE,
    ).ask()
    if provider is None:
        return

    updates: dict[str, object] = {"llm_provider": provider}
    key_fields = {"openai": "openai_key", "anthropic": "anthropic_key", "gemini": "gemini_key"}
    if provider in key_fields:
        key = questionary.password(f"{provider.upper()} API Key（回车保持不变）：", style=STYLE).ask()
        if key:
            updates[key_fields[provider]] = key
    else:
        url = questionary.text("Ollama URL：", default=s.ollama_url, style=STYLE).ask()
        if url:
            updates["ollama_url"] = url

    updates["auto_compile"] = questionary.confirm("自动编译预览？", default=s.auto_compile, style=STYLE).ask()

    session.settings = s.merged({k: v for k, v in updates.items() if v is not None})
    session.save_settings()
    console.print("[green]✓ 设置已保存[/green]")


FLOWS = {
    "chat": chat_flow,
    "files": files_flow,
    "complete": complete_flow,
    "packages": packages_flow,
    "diff": diff_flow,
    "preview": preview_flow,
    "pdf": pdf_flow,
    "settings": settings_flow,
}


def run_tui(session: EditorSession | None = None):
    """运行交互式界面"""
    session = session or EditorSession.open()
    try:
        while True:
            console.clear()
            show_banner(session)

            choice = show_main_menu()

            if choice == "quit" or choice is None:
                console.print("\n[cyan]再见！👋[/cyan]\n")
                break

            FLOWS[choice](session)

            if choice not in ("chat", "settings"):
                questionary.press_any_key_to_continue("\n按任意键返回主菜单...").ask()

    except KeyboardInterrupt:
        console.print("\n\n[cyan]再见！👋[/cyan]\n")


if __name__ == "__main__":
    run_tui()
