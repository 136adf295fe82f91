"""
General utility commands like help.
"""
from chatbot.logger import logger

HELP_TEXT = """可用指令：
/help - 顯示這份指令說明
/list - 列出所有關鍵字群組與回覆
/add <關鍵字> <回覆內容> - 新增關鍵字與回覆
/delete <關鍵字> - 刪除關鍵字（群組沒有其他關鍵字時一併刪除）
/replace <關鍵字> <新回覆內容> - 更換關鍵字所屬群組的回覆
/alias <關鍵字> += <同義詞1>,<同義詞2> - 為關鍵字所屬群組新增同義詞"""


def get_help() -> str:
    logger.debug("Help")
    return HELP_TEXT
