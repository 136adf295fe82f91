"""
Append-only log of customer "leave a message" requests.
"""
from datetime import datetime, timezone

from chatbot.logger import logger


def append_customer_message(path: str, message: str) -> bool:
    """
    Append a timestamped entry to the log file at `path`.
    Returns False if the file could not be written.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    entry = f'[{timestamp}] Customer Message: "{message}"\n'
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(entry)
    except OSError as e:
        logger.error("Failed to write customer message to %s: %s", path, e)
        return False

    logger.info("Message logged to %s", path)
    return True
