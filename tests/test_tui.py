"""
测试交互式界面的流程（questionary 以固定答案替换）
"""

import pytest

from latexy import tui
from latexy.config import EditorSettings, WorkspaceStore
from latexy.models import DEFAULT_DOCUMENT
from latexy.render import LatexCompiler
from latexy.session import EditorSession


REPLY = "Try this:\n\n```latex\n\\alpha + \\beta\n```\n"


class Answer:
    """模拟 questionary 问题对象"""

    def __init__(self, value):
        self.value = value

    def ask(self):
        return self.value


def choose(title_prefix):
    """模拟 select：选中标题以 title_prefix 开头的选项，返回其取值"""
    def select(message, choices, **kwargs):
        chosen = next(c for c in choices if c.title.startswith(title_prefix))
        return Answer(chosen.value)
    return select


def reply_with(value):
    return lambda *args, **kwargs: Answer(value)


@pytest.fixture
def session(tmp_path):
    return EditorSession(
        store=WorkspaceStore(tmp_path),
        settings=EditorSettings(auto_compile=False),
        compiler=LatexCompiler(pandoc_path="/nonexistent/pandoc"),
    )


class TestOfferCodeBlocks:

    def test_skip_leaves_document_unchanged(self, session, monkeypatch):
        monkeypatch.setattr(tui.questionary, "select", choose("跳过"))
        tui.offer_code_blocks(session, REPLY)
        assert session.content == DEFAULT_DOCUMENT

    def test_apply_selected_block(self, session, monkeypatch):
        monkeypatch.setattr(tui.questionary, "select", choose("+ Apply #0"))
        tui.offer_code_blocks(session, REPLY)
        assert "\\alpha + \\beta\n\n\\end{document}" in session.content

    def test_no_latex_blocks_asks_nothing(self, session, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("select should not be called")

        monkeypatch.setattr(tui.questionary, "select", fail)
        tui.offer_code_blocks(session, "```\nplain\n```")
        assert session.content == DEFAULT_DOCUMENT


class TestFlows:

    def test_add_package(self, session, monkeypatch):
        monkeypatch.setattr(tui.questionary, "text", reply_with("xcolor"))
        monkeypatch.setattr(tui.questionary, "select", choose("[Add] xcolor"))
        tui.packages_flow(session)
        assert "\\usepackage{xcolor}" in session.content

    def test_remove_package(self, session, monkeypatch):
        monkeypatch.setattr(tui.questionary, "text", reply_with("graphicx"))
        monkeypatch.setattr(tui.questionary, "select", choose("[Remove] graphicx"))
        tui.packages_flow(session)
        assert "\\usepackage{graphicx}" not in session.content

    def test_new_file(self, session, monkeypatch):
        monkeypatch.setattr(tui.questionary, "select", choose("+ 新建文件"))
        monkeypatch.setattr(tui.questionary, "text", reply_with("appendix.tex"))
        tui.files_flow(session)
        assert session.workspace.active_file == "appendix.tex"
        assert WorkspaceStore(session.store.root).load_workspace().active_file == "appendix.tex"
