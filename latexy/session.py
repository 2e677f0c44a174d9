"""
编辑会话

把工作区、设置、持久化与预览编译组合在一起。每次修改缓冲区都会立即保存；
开启 auto_compile 时同时刷新预览页面。
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .config import EditorSettings, WorkspaceStore, load_config
from .editor import add_package, apply_code, diff_lines, remove_package, DiffRow
from .llm import EditorAssistant
from .models import ChatResult, Workspace
from .render import LatexCompiler, pdf_filename


console = Console()

PREVIEW_FILENAME = "preview.html"


class EditorSession:
    """编辑会话"""

    def __init__(
        self,
        store: WorkspaceStore | None = None,
        settings: EditorSettings | None = None,
        compiler: LatexCompiler | None = None,
    ):
        self.store = store or WorkspaceStore()
        self.settings = self.store.load_settings(settings or EditorSettings())
        self.workspace: Workspace = self.store.load_workspace()
        self.compiler = compiler or LatexCompiler()

    @classmethod
    def open(cls, root: str | Path | None = None, env_file: str | Path | None = None) -> "EditorSession":
        """从环境变量与存储目录打开会话"""
        return cls(store=WorkspaceStore(root), settings=load_config(env_file))

    @property
    def content(self) -> str:
        return self.workspace.active_content

    @property
    def preview_path(self) -> Path:
        return self.store.root / PREVIEW_FILENAME

    def save(self) -> None:
        self.store.save_workspace(self.workspace)

    def save_settings(self) -> None:
        self.store.save_settings(self.settings)

    def update_content(self, content: str) -> None:
        """写入当前文件并保存，按设置自动编译"""
        self.workspace.set_content(content)
        self.save()
        if self.settings.auto_compile:
            self.compile_preview()

    def create_file(self, filename: str) -> str:
        name = self.workspace.create_file(filename)
        self.save()
        return name

    def switch_to_file(self, filename: str) -> bool:
        switched = self.workspace.switch_to_file(filename)
        if switched:
            self.save()
        return switched

    def add_package(self, name: str) -> None:
        self.update_content(add_package(self.content, name))

    def remove_package(self, name: str) -> None:
        self.update_content(remove_package(self.content, name))

    def apply_code(self, code: str) -> None:
        self.update_content(apply_code(self.content, code))

    def reset_baseline(self) -> None:
        """以当前内容作为新的差异基准"""
        self.workspace.snapshot()
        self.save()

    def diff(self) -> list[DiffRow]:
        return diff_lines(self.workspace.original_content, self.content)

    def assistant(self) -> EditorAssistant:
        return EditorAssistant(self.workspace, self.settings)

    async def send(self, message: str) -> ChatResult | None:
        """发送消息并保存对话历史"""
        result = await self.assistant().handle_send(message)
        if result is not None:
            self.save()
        return result

    def clear_chat(self) -> None:
        self.workspace.chat_history = []
        self.save()

    def render_preview(self, zoom: float = 1.0) -> str:
        return self.compiler.render_page(self.content, zoom=zoom)

    def compile_preview(self, zoom: float = 1.0) -> Path | None:
        """
        编译当前文件并写出预览页面

        Returns:
            预览文件路径；pandoc 不可用时返回 None
        """
        try:
            html = self.render_preview(zoom)
        except RuntimeError as e:
            console.print(f"[yellow]⚠ {escape(str(e))}[/yellow]")
            return None

        self.store.root.mkdir(parents=True, exist_ok=True)
        self.preview_path.write_text(html, encoding="utf-8")
        return self.preview_path

    def default_pdf_name(self) -> str:
        return pdf_filename(self.workspace.active_file)

