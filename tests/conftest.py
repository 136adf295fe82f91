import json

import pytest

from chatbot.dialogue import DialogueRouter
from chatbot.knowledge_store import KnowledgeStore
from chatbot.session import SessionState

SAMPLE_KB = {
    "keyword_groups": [
        {"synonyms": ["退貨"], "response": "退貨政策..."},
        {"synonyms": ["退款", "refund"], "response": "退款將於 7 個工作天內完成。"},
    ],
    "system_prompt": "你是客服人員。",
    "developer_prompt": "You are a developer assistant.",
}


class FakeModel:
    def __init__(self, reply="AI 回覆", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def kb_path(tmp_path):
    path = tmp_path / "knowledge_base.json"
    path.write_text(json.dumps(SAMPLE_KB, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def store(kb_path):
    store = KnowledgeStore(str(kb_path))
    store.load()
    return store


@pytest.fixture
def model():
    return FakeModel()


@pytest.fixture
def logged_messages():
    return []


@pytest.fixture
def router(store, model, logged_messages):
    def sink(message):
        logged_messages.append(message)
        return True

    return DialogueRouter(store, SessionState(), generate=model, message_sink=sink)


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))
