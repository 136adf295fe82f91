from types import SimpleNamespace

import pytest

from chatbot import ai_client
from chatbot.ai_client import AIServiceError


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_generate_returns_stripped_content(monkeypatch):
    completions = FakeCompletions(content="  您好！ ")
    monkeypatch.setattr(ai_client, "client", _fake_client(completions))

    assert ai_client.generate("prompt") == "您好！"
    assert completions.calls[0]["messages"] == [{"role": "user", "content": "prompt"}]


def test_generate_without_client(monkeypatch):
    monkeypatch.setattr(ai_client, "client", None)
    with pytest.raises(AIServiceError):
        ai_client.generate("prompt")


def test_generate_wraps_client_errors(monkeypatch):
    monkeypatch.setattr(ai_client, "client", _fake_client(FakeCompletions(error=RuntimeError("down"))))
    with pytest.raises(AIServiceError):
        ai_client.generate("prompt")


def test_generate_rejects_empty_content(monkeypatch):
    monkeypatch.setattr(ai_client, "client", _fake_client(FakeCompletions(content="")))
    with pytest.raises(AIServiceError):
        ai_client.generate("prompt")
