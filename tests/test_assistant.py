"""
测试编辑器 AI 助手的路由、上下文注入与对话历史
"""

import asyncio
import json

import httpx

from latexy.config import EditorSettings
from latexy.llm import EditorAssistant
from latexy.models import Workspace
from latexy.prompts import SYSTEM_PROMPT


def openai_transport(captured, content="Sure!", status_code=200):
    def handler(request):
        captured.append(json.loads(request.content))
        if status_code != 200:
            return httpx.Response(status_code, json={"error": {"message": "Rate limited"}})
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})
    return httpx.MockTransport(handler)


def make_assistant(transport=None, **settings):
    workspace = Workspace()
    workspace.set_content("\\section{Intro}")
    settings.setdefault("openai_key", "sk-test")
    return EditorAssistant(workspace, EditorSettings(**settings), transport=transport)


class TestSendMessage:

    def test_missing_api_key(self):
        assistant = make_assistant(openai_key="")
        result = asyncio.run(assistant.send_message("hi"))
        assert not result.ok
        assert result.error == "Please configure your OPENAI API key in Settings."

    def test_missing_key_names_provider(self):
        assistant = make_assistant(llm_provider="anthropic")
        result = asyncio.run(assistant.send_message("hi"))
        assert result.error == "Please configure your ANTHROPIC API key in Settings."

    def test_unknown_provider_asks_for_key(self):
        assistant = make_assistant(llm_provider="mistral")
        result = asyncio.run(assistant.send_message("hi"))
        assert result.error == "Please configure your MISTRAL API key in Settings."

    def test_ollama_needs_no_key(self):
        def handler(request):
            return httpx.Response(200, json={"message": {"content": "local answer"}})

        assistant = make_assistant(httpx.MockTransport(handler), llm_provider="ollama", openai_key="")
        result = asyncio.run(assistant.send_message("hi"))
        assert result.content == "local answer"

    def test_document_is_injected(self):
        captured = []
        assistant = make_assistant(openai_transport(captured))
        result = asyncio.run(assistant.send_message("Add a table"))

        assert result.ok
        assert result.content == "Sure!"
        messages = captured[0]["messages"]
        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[-1]["content"] == (
            "Current LaTeX document:\n```latex\n\\section{Intro}\n```\n\nUser request: Add a table"
        )

    def test_provider_error_is_returned(self):
        assistant = make_assistant(openai_transport([], status_code=429))
        result = asyncio.run(assistant.send_message("hi"))
        assert result.error == "Rate limited"


class TestHandleSend:

    def test_success_records_both_turns(self):
        assistant = make_assistant(openai_transport([]))
        result = asyncio.run(assistant.handle_send("  hello  "))

        assert result.ok
        history = assistant.workspace.chat_history
        assert [(m.role, m.content) for m in history] == [
            ("user", "hello"),
            ("assistant", "Sure!"),
        ]

    def test_failure_records_only_user(self):
        assistant = make_assistant(openai_key="")
        result = asyncio.run(assistant.handle_send("hello"))

        assert not result.ok
        assert [m.role for m in assistant.workspace.chat_history] == ["user"]

    def test_empty_message(self):
        assistant = make_assistant()
        assert asyncio.run(assistant.handle_send("   ")) is None
        assert assistant.workspace.chat_history == []

    def test_history_precedes_current_message_once(self):
        captured = []
        assistant = make_assistant(openai_transport(captured))
        asyncio.run(assistant.handle_send("first"))
        asyncio.run(assistant.handle_send("second"))

        messages = captured[1]["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[1]["content"] == "first"
        assert messages[3]["content"].endswith("User request: second")
