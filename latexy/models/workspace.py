"""
数据模型定义：Workspace, DocumentFile 等核心结构

文档模型只是「文件名 → 文本」的平面映射，不做结构化解析，
内容以最后一次写入为准。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .chat import ChatMessage


DEFAULT_FILENAME = "main.tex"

DEFAULT_DOCUMENT = r"""\documentclass{article}
\usepackage{amsmath}
\usepackage{graphicx}

\begin{document}

\section*{What is LaTeXy?}

\textbf{LaTeXy} is an AI-powered \LaTeX{} editor for writing scientific documents. It supports real-time collaboration with coauthors and includes AI-powered intelligence to help you draft and edit text, reason through ideas, and handle formatting.

\section*{Features}

LaTeXy includes AI directly in the editor and can access your project, so you can ask it to do things like:

\begin{itemize}
  \item Write an abstract based on the rest of the paper
  \item Add a bibliography to my paper
  \item Add equations to the introduction
\end{itemize}

\subsection*{Mathematical Equations}

The Laplace transform of $\cos(\alpha t)$ is:

$$
\mathcal{L}\{\cos(\alpha t)\} = \frac{s}{s^2 + \alpha^2}
$$

And the quadratic formula:

$$
x = \frac{-b \pm \sqrt{b^2 - 4ac}}{2a}
$$

\section*{Collaboration}

Invite collaborators by clicking the \textbf{Share} menu. As you edit, they will see your updates in real time.

\end{document}"""


class WorkspaceError(ValueError):
    """文件管理操作失败"""


class DocumentFile(BaseModel):
    """单个文档文件"""
    content: str = Field(default="", description="文件内容")
    history: list[Any] = Field(default_factory=list, description="历史记录（保留字段）")


class Workspace(BaseModel):
    """编辑器工作区"""
    files: dict[str, DocumentFile] = Field(
        default_factory=lambda: {DEFAULT_FILENAME: DocumentFile(content=DEFAULT_DOCUMENT)},
        description="文件名到文档的映射",
    )
    active_file: str = Field(default=DEFAULT_FILENAME, description="当前打开的文件")
    original_content: str = Field(default="", description="差异视图的基准内容")
    chat_history: list[ChatMessage] = Field(default_factory=list, description="AI 对话历史")

    @property
    def active_content(self) -> str:
        """当前文件内容（文件不存在时为空字符串）"""
        document = self.files.get(self.active_file)
        return document.content if document else ""

    def set_content(self, content: str) -> None:
        """写入当前文件"""
        self.files.setdefault(self.active_file, DocumentFile()).content = content

    def snapshot(self) -> None:
        """以当前内容作为差异视图的基准"""
        self.original_content = self.active_content

    def create_file(self, filename: str) -> str:
        """
        新建文件并切换过去

        Args:
            filename: 文件名（首尾空白会被去掉）

        Returns:
            实际使用的文件名
        """
        filename = filename.strip()
        if not filename:
            raise WorkspaceError("File name must not be empty")
        if filename in self.files:
            raise WorkspaceError(f"File already exists: {filename}")

        self.files[filename] = DocumentFile(content=f"% {filename}\n\n")
        self.switch_to_file(filename)
        return filename

    def switch_to_file(self, filename: str) -> bool:
        """切换当前文件，未知文件名时不做任何事"""
        if filename not in self.files:
            return False
        self.active_file = filename
        self.snapshot()
        return True

    def list_files(self) -> list[str]:
        return list(self.files)
