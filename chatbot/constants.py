"""
Settings and fixed reply strings shared across the bot.
"""
import os

# Storage
KNOWLEDGE_BASE_PATH = os.getenv("KNOWLEDGE_BASE_PATH", "knowledge_base.json")
CUSTOMER_MESSAGES_LOG = os.getenv("CUSTOMER_MESSAGES_LOG", "customer_messages.log")

# OpenAI
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_API_TIMEOUT_SECONDS = float(os.getenv("OPENAI_API_TIMEOUT_SECONDS", "30"))
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.3"))

# Incoming messages
MAX_MESSAGE_LENGTH = 1000

# Mode switch phrases (compared after normalization)
DEVELOPER_MODE_ON_PHRASE = "進入開發者模式"
DEVELOPER_MODE_OFF_PHRASE = "離開開發者模式"

# Action hints returned alongside a reply
ACTION_DEVELOPER_MODE_ON = "developer_mode_on"
ACTION_DEVELOPER_MODE_OFF = "developer_mode_off"
ACTION_MESSAGE_LOGGED = "message_logged"

LEAVE_MESSAGE_KEYWORDS = ["留言", "轉告", "專人"]

DEFAULT_DEVELOPER_PROMPT = (
    "You are a helpful assistant for the developers who maintain this "
    "customer service bot. Answer technical questions clearly and concisely."
)

CUSTOMER_PROMPT_TEMPLATE = "{base_prompt}\n\n顧客問題：{message}"
DEVELOPER_PROMPT_TEMPLATE = "{base_prompt}\n\n開發者問題：{message}"

# Replies
DEVELOPER_MODE_GREETING = "已進入開發者模式。"
DEVELOPER_MODE_FAREWELL = "已離開開發者模式，回到一般客服模式。"
PERMISSION_DENIED_REPLY = "權限不足：指令僅能在開發者模式下使用。"
MESSAGE_LOGGED_REPLY = "好的，您的留言我們已經記錄下來，客服人員將會盡快為您處理。"
AI_ERROR_REPLY = "與 AI 客服通訊時發生錯誤。請稍後再試。"
EMPTY_MESSAGE_REPLY = "請輸入您的問題。"
MESSAGE_TOO_LONG_REPLY = (
    f"您的訊息太長了，請縮短至 {MAX_MESSAGE_LENGTH} 個字以內。"
)
