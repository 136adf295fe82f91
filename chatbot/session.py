"""Conversation state shared by every request handled by this process."""

from dataclasses import dataclass


@dataclass
class SessionState:
    developer_mode: bool = False


# Single process-wide session; the router receives it explicitly
_SESSION = SessionState()


def get_state() -> SessionState:
    return _SESSION
