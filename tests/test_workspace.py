"""
测试工作区、设置与持久化
"""

import pytest
import yaml

from latexy.config import EditorSettings, WorkspaceStore, get_api_key, load_config
from latexy.models import DEFAULT_FILENAME, ChatMessage, Workspace, WorkspaceError


class TestWorkspace:

    def test_default_workspace(self):
        ws = Workspace()
        assert ws.active_file == DEFAULT_FILENAME
        assert ws.list_files() == [DEFAULT_FILENAME]
        assert ws.active_content.startswith("\\documentclass{article}")

    def test_create_file_switches(self):
        ws = Workspace()
        name = ws.create_file("  chapter1.tex ")
        assert name == "chapter1.tex"
        assert ws.active_file == "chapter1.tex"
        assert ws.active_content == "% chapter1.tex\n\n"
        assert ws.original_content == ws.active_content

    def test_create_file_rejects_empty_and_duplicate(self):
        ws = Workspace()
        with pytest.raises(WorkspaceError):
            ws.create_file("   ")
        with pytest.raises(WorkspaceError):
            ws.create_file(DEFAULT_FILENAME)

    def test_switch_unknown_file(self):
        ws = Workspace()
        assert ws.switch_to_file("missing.tex") is False
        assert ws.active_file == DEFAULT_FILENAME

    def test_switch_resets_baseline(self):
        ws = Workspace()
        ws.create_file("a.tex")
        ws.set_content("changed")
        ws.switch_to_file(DEFAULT_FILENAME)
        assert ws.original_content == ws.active_content
        assert ws.files["a.tex"].content == "changed"


class TestSettings:

    def test_load_config_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("LATEXY_PROVIDER", "anthropic")
        monkeypatch.setenv("LATEXY_AUTO_COMPILE", "0")
        monkeypatch.setenv("OLLAMA_URL", "http://ollama:11434")
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        settings = load_config(tmp_path / ".env")
        assert settings.openai_key == "sk-openai"
        assert settings.anthropic_key == ""
        assert settings.llm_provider == "anthropic"
        assert settings.auto_compile is False
        assert settings.ollama_url == "http://ollama:11434"

    def test_get_api_key(self):
        settings = EditorSettings(openai_key="a", anthropic_key="b", gemini_key="c")
        assert get_api_key(settings, "openai") == "a"
        assert get_api_key(settings, "anthropic") == "b"
        assert get_api_key(settings, "gemini") == "c"
        assert get_api_key(settings, "ollama") == ""

    def test_merged_ignores_unknown_fields(self):
        settings = EditorSettings().merged({"llm_provider": "gemini", "bogus": 1})
        assert settings.llm_provider == "gemini"
        assert not hasattr(settings, "bogus")


class TestWorkspaceStore:

    def test_empty_store_gives_default_workspace(self, tmp_path):
        ws = WorkspaceStore(tmp_path).load_workspace()
        assert ws.active_file == DEFAULT_FILENAME
        assert ws.original_content == ws.active_content
        assert ws.chat_history == []

    def test_round_trip(self, tmp_path):
        store = WorkspaceStore(tmp_path)
        ws = Workspace()
        ws.create_file("notes.tex")
        ws.set_content("\\section{Notes}")
        ws.chat_history.append(ChatMessage(role="user", content="hi"))
        store.save_workspace(ws)

        loaded = store.load_workspace()
        assert loaded.list_files() == [DEFAULT_FILENAME, "notes.tex"]
        assert loaded.active_file == "notes.tex"
        assert loaded.active_content == "\\section{Notes}"
        assert loaded.original_content == "% notes.tex\n\n"
        assert loaded.chat_history == [ChatMessage(role="user", content="hi")]

    def test_files_replace_defaults(self, tmp_path):
        (tmp_path / "texflow-files.yaml").write_text(
            yaml.safe_dump({"paper.tex": {"content": "x", "history": []}}), encoding="utf-8"
        )
        ws = WorkspaceStore(tmp_path).load_workspace()
        assert ws.list_files() == ["paper.tex"]
        assert ws.active_file == "paper.tex"

    def test_settings_merge_over_defaults(self, tmp_path):
        (tmp_path / "texflow-settings.yaml").write_text(
            yaml.safe_dump({"llm_provider": "ollama"}), encoding="utf-8"
        )
        store = WorkspaceStore(tmp_path)
        settings = store.load_settings(EditorSettings(openai_key="sk-env"))
        assert settings.llm_provider == "ollama"
        assert settings.openai_key == "sk-env"

    def test_save_settings(self, tmp_path):
        store = WorkspaceStore(tmp_path)
        store.save_settings(EditorSettings(gemini_key="g", auto_compile=False))
        loaded = store.load_settings()
        assert loaded.gemini_key == "g"
        assert loaded.auto_compile is False


class TestMalformedStore:

    def test_session_that_is_not_a_mapping(self, tmp_path):
        (tmp_path / "session.yaml").write_text("- a\n- b\n", encoding="utf-8")
        ws = WorkspaceStore(tmp_path).load_workspace()
        assert ws.active_file == DEFAULT_FILENAME
        assert ws.original_content == ws.active_content
        assert ws.chat_history == []

    def test_bad_history_entries_are_skipped(self, tmp_path):
        (tmp_path / "session.yaml").write_text(
            yaml.safe_dump({
                "active_file": DEFAULT_FILENAME,
                "chat_history": [
                    "loose string",
                    {"role": "system", "content": "not allowed"},
                    {"role": "user", "content": "kept"},
                ],
            }),
            encoding="utf-8",
        )
        ws = WorkspaceStore(tmp_path).load_workspace()
        assert ws.chat_history == [ChatMessage(role="user", content="kept")]

    def test_history_that_is_not_a_list(self, tmp_path):
        (tmp_path / "session.yaml").write_text(
            yaml.safe_dump({"chat_history": "oops"}), encoding="utf-8"
        )
        assert WorkspaceStore(tmp_path).load_workspace().chat_history == []

    def test_saved_settings_are_validated(self, tmp_path):
        (tmp_path / "texflow-settings.yaml").write_text(
            "auto_compile: 'false'\nsync_scroll: 'yes'\n", encoding="utf-8"
        )
        settings = WorkspaceStore(tmp_path).load_settings()
        assert settings.auto_compile is False
        assert settings.sync_scroll is True
