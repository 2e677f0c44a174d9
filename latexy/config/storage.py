"""
工作区持久化

以目录下的 YAML 文件保存设置、文件与会话状态：
- texflow-settings.yaml: 编辑器设置
- texflow-files.yaml: 文件名 → 文档内容
- session.yaml: 当前文件、差异基准、对话历史
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..models import ChatMessage, DocumentFile, Workspace
from .settings import EditorSettings


SETTINGS_KEY = "texflow-settings"
FILES_KEY = "texflow-files"
SESSION_KEY = "session"


def default_store_dir() -> Path:
    """默认存储目录：$LATEXY_HOME 或当前目录下的 .latexy"""
    return Path(os.getenv("LATEXY_HOME", ".latexy"))


class WorkspaceStore:
    """
    工作区存储

    设置按字段合并到默认值之上；文件映射整体替换。
    """

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root else default_store_dir()

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.yaml"

    def _read(self, key: str) -> Any:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    def _write(self, key: str, data: Any) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)

    def load_settings(self, defaults: EditorSettings | None = None) -> EditorSettings:
        """读取设置，已保存的字段覆盖默认值"""
        settings = defaults or EditorSettings()
        saved = self._read(SETTINGS_KEY)
        if isinstance(saved, dict):
            settings = settings.merged(saved)
        return settings

    def save_settings(self, settings: EditorSettings) -> None:
        self._write(SETTINGS_KEY, settings.model_dump())

    def load_workspace(self) -> Workspace:
        """读取工作区；没有保存过时返回默认工作区"""
        workspace = Workspace()

        saved_files = self._read(FILES_KEY)
        if isinstance(saved_files, dict) and saved_files:
            workspace.files = {
                name: DocumentFile(**data) if isinstance(data, dict) else DocumentFile(content=str(data))
                for name, data in saved_files.items()
            }

        session = self._read(SESSION_KEY)
        if not isinstance(session, dict):
            session = {}

        active = session.get("active_file")
        if active in workspace.files:
            workspace.active_file = active
        elif workspace.active_file not in workspace.files:
            workspace.active_file = next(iter(workspace.files))

        if isinstance(session.get("original_content"), str):
            workspace.original_content = session["original_content"]
        else:
            workspace.snapshot()

        workspace.chat_history = self._load_history(session.get("chat_history"))
        return workspace

    @staticmethod
    def _load_history(entries: Any) -> list[ChatMessage]:
        """读取对话历史，跳过格式不对的条目"""
        if not isinstance(entries, list):
            return []

        history = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            try:
                history.append(ChatMessage(**entry))
            except ValidationError:
                continue
        return history

    def save_files(self, workspace: Workspace) -> None:
        self._write(FILES_KEY, {
            name: document.model_dump() for name, document in workspace.files.items()
        })

    def save_session(self, workspace: Workspace) -> None:
        self._write(SESSION_KEY, {
            "active_file": workspace.active_file,
            "original_content": workspace.original_content,
            "chat_history": [m.model_dump() for m in workspace.chat_history],
        })

    def save_workspace(self, workspace: Workspace) -> None:
        """保存文件与会话状态"""
        self.save_files(workspace)
        self.save_session(workspace)
