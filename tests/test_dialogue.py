from chatbot.constants import (
    ACTION_DEVELOPER_MODE_OFF,
    ACTION_DEVELOPER_MODE_ON,
    ACTION_MESSAGE_LOGGED,
    AI_ERROR_REPLY,
    DEVELOPER_MODE_FAREWELL,
    DEVELOPER_MODE_OFF_PHRASE,
    DEVELOPER_MODE_ON_PHRASE,
    EMPTY_MESSAGE_REPLY,
    MAX_MESSAGE_LENGTH,
    MESSAGE_LOGGED_REPLY,
    MESSAGE_TOO_LONG_REPLY,
    PERMISSION_DENIED_REPLY,
)
from chatbot.dialogue import DialogueRouter
from chatbot.general_commands import HELP_TEXT
from chatbot.session import SessionState

from conftest import FakeModel, SAMPLE_KB, read_json


def test_exact_keyword_match_replies_from_group(router, model):
    assert router.handle_message("退貨").reply == "退貨政策..."
    assert router.handle_message("  ＲＥＦＵＮＤ ").reply == "退款將於 7 個工作天內完成。"
    assert model.prompts == []


def test_substring_does_not_match_and_falls_back_to_model(router, model):
    result = router.handle_message("我想退貨")

    assert result.reply == "AI 回覆"
    assert model.prompts == ["你是客服人員。\n\n顧客問題：我想退貨"]


def test_commands_rejected_in_normal_mode(router, kb_path):
    result = router.handle_message("/add 安裝 手冊")

    assert result.reply == PERMISSION_DENIED_REPLY
    assert read_json(kb_path) == SAMPLE_KB
    assert router.handle_message("/anything").reply == PERMISSION_DENIED_REPLY


def test_mode_switch_round_trip(router):
    result = router.handle_message(DEVELOPER_MODE_ON_PHRASE)
    assert router.state.developer_mode
    assert result.action == ACTION_DEVELOPER_MODE_ON
    assert HELP_TEXT in result.reply

    assert router.handle_message("/help").reply == HELP_TEXT

    result = router.handle_message(DEVELOPER_MODE_OFF_PHRASE)
    assert not router.state.developer_mode
    assert result.reply == DEVELOPER_MODE_FAREWELL
    assert result.action == ACTION_DEVELOPER_MODE_OFF

    assert router.handle_message("/help").reply == PERMISSION_DENIED_REPLY


def test_developer_mode_commands_change_answers(router):
    router.handle_message(DEVELOPER_MODE_ON_PHRASE)
    router.handle_message("/add 安裝 請參考安裝手冊")

    assert router.handle_message("安裝").reply == "請參考安裝手冊"


def test_developer_mode_uses_developer_prompt(router, model):
    router.handle_message(DEVELOPER_MODE_ON_PHRASE)
    router.handle_message("How do I deploy?")

    assert model.prompts[-1].startswith("You are a developer assistant.")
    assert model.prompts[-1].endswith("How do I deploy?")


def test_model_failure_returns_generic_reply(store):
    router = DialogueRouter(
        store, SessionState(), generate=FakeModel(error=RuntimeError("boom")), message_sink=lambda m: True
    )
    result = router.handle_message("random question")
    assert result.reply == AI_ERROR_REPLY
    assert "boom" not in result.reply


def test_leave_message_is_logged(router, model, logged_messages):
    result = router.handle_message("請幫我留言給店長")

    assert result.reply == MESSAGE_LOGGED_REPLY
    assert result.action == ACTION_MESSAGE_LOGGED
    assert logged_messages == ["請幫我留言給店長"]
    assert model.prompts == []


def test_leave_message_sink_failure(store):
    router = DialogueRouter(store, SessionState(), generate=FakeModel(), message_sink=lambda m: False)
    assert router.handle_message("我要找專人").reply == AI_ERROR_REPLY


def test_blank_and_long_messages(router, model):
    assert router.handle_message("   ").reply == EMPTY_MESSAGE_REPLY
    assert router.handle_message("x" * (MAX_MESSAGE_LENGTH + 1)).reply == MESSAGE_TOO_LONG_REPLY
    assert model.prompts == []


def test_prompt_label_follows_mode(router, model):
    router.handle_message("營業時間？")
    assert "顧客問題：營業時間？" in model.prompts[-1]

    router.handle_message(DEVELOPER_MODE_ON_PHRASE)
    router.handle_message("deploy?")
    assert "開發者問題：deploy?" in model.prompts[-1]
    assert "顧客問題" not in model.prompts[-1]
