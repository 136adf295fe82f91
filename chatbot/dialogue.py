"""
Top-level message handling.

Order of checks for every incoming message:
  1. developer mode on/off phrases
  2. commands (developer mode only)
  3. "leave a message" requests
  4. exact keyword group match
  5. language model fallback
"""
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from chatbot import ai_client
from chatbot.constants import (
    ACTION_DEVELOPER_MODE_OFF,
    ACTION_DEVELOPER_MODE_ON,
    ACTION_MESSAGE_LOGGED,
    AI_ERROR_REPLY,
    CUSTOMER_MESSAGES_LOG,
    CUSTOMER_PROMPT_TEMPLATE,
    DEVELOPER_MODE_FAREWELL,
    DEVELOPER_MODE_GREETING,
    DEVELOPER_MODE_OFF_PHRASE,
    DEVELOPER_MODE_ON_PHRASE,
    DEVELOPER_PROMPT_TEMPLATE,
    EMPTY_MESSAGE_REPLY,
    LEAVE_MESSAGE_KEYWORDS,
    MAX_MESSAGE_LENGTH,
    MESSAGE_LOGGED_REPLY,
    MESSAGE_TOO_LONG_REPLY,
    PERMISSION_DENIED_REPLY,
)
from chatbot.general_commands import get_help
from chatbot.kb_commands import execute_command
from chatbot.knowledge_store import KnowledgeStore
from chatbot.logger import logger
from chatbot.message_log import append_customer_message
from chatbot.session import SessionState
from chatbot.utils import contains, normalize

COMMAND_PREFIX = "/"


@dataclass
class ChatReply:
    reply: str
    action: Optional[str] = None


class DialogueRouter:
    def __init__(
        self,
        store: KnowledgeStore,
        state: SessionState,
        generate: Callable[[str], str] = ai_client.generate,
        message_sink: Optional[Callable[[str], bool]] = None,
    ):
        self.store = store
        self.state = state
        self.generate = generate
        self.message_sink = message_sink or partial(append_customer_message, CUSTOMER_MESSAGES_LOG)

    def handle_message(self, message: str) -> ChatReply:
        text = normalize(message).strip()

        if not text:
            return ChatReply(EMPTY_MESSAGE_REPLY)

        if len(message) > MAX_MESSAGE_LENGTH:
            logger.warning("Message too long (len=%s)", len(message))
            return ChatReply(MESSAGE_TOO_LONG_REPLY)

        if text == normalize(DEVELOPER_MODE_ON_PHRASE):
            self.state.developer_mode = True
            logger.info("Developer mode enabled")
            return ChatReply(f"{DEVELOPER_MODE_GREETING}\n\n{get_help()}", ACTION_DEVELOPER_MODE_ON)

        if text == normalize(DEVELOPER_MODE_OFF_PHRASE):
            self.state.developer_mode = False
            logger.info("Developer mode disabled")
            return ChatReply(DEVELOPER_MODE_FAREWELL, ACTION_DEVELOPER_MODE_OFF)

        if text.startswith(COMMAND_PREFIX):
            if not self.state.developer_mode:
                logger.warning("Command rejected outside developer mode: %s", text.split()[0])
                return ChatReply(PERMISSION_DENIED_REPLY)
            return ChatReply(execute_command(message, self.store))

        if contains(text, LEAVE_MESSAGE_KEYWORDS):
            if not self.message_sink(message):
                return ChatReply(AI_ERROR_REPLY)
            return ChatReply(MESSAGE_LOGGED_REPLY, ACTION_MESSAGE_LOGGED)

        match = self.store.find_keyword(text)
        if match:
            logger.info("Responding with knowledge base rule: %s", match.group.synonyms[0])
            return ChatReply(match.group.response)

        return ChatReply(self._ask_model(message))

    def _ask_model(self, message: str) -> str:
        with self.store.lock:
            kb = self.store.kb
            if self.state.developer_mode:
                base_prompt, template = kb.developer_prompt, DEVELOPER_PROMPT_TEMPLATE
            else:
                base_prompt, template = kb.system_prompt, CUSTOMER_PROMPT_TEMPLATE

        prompt = template.format(base_prompt=base_prompt, message=message)
        logger.debug("No keyword rule matched, sending to the language model")
        try:
            return self.generate(prompt)
        except Exception:  # noqa: BLE001 - never leak model errors to the customer
            logger.exception("Language model fallback failed")
            return AI_ERROR_REPLY
