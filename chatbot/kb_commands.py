"""
Knowledge base commands available in developer mode.

Every handler takes the parsed command and the store and returns the reply
text. Handlers never raise for bad input; they return an error message.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from chatbot.general_commands import get_help
from chatbot.knowledge_store import KeywordGroup, KnowledgeStore, find_keyword
from chatbot.logger import logger
from chatbot.utils import join_tail, normalize, split_synonyms, split_tokens

ALIAS_OPERATOR = "+="

SAVE_FAILED_REPLY = "變更未能寫入知識庫檔案，請稍後再試。目前內容維持不變。"


class Command(str, Enum):
    HELP = "/help"
    ADD = "/add"
    DELETE = "/delete"
    REPLACE = "/replace"
    ALIAS = "/alias"
    LIST = "/list"


@dataclass
class ParsedCommand:
    name: str
    # Normalized arguments, for matching
    args: list[str]
    # Original message text, for response bodies that keep their casing
    raw: str

    def raw_tail(self, arg_position: int) -> str:
        """Original text from argument `arg_position` onward, single-spaced."""
        return join_tail(self.raw, arg_position + 1)


def parse_command(message: str) -> ParsedCommand:
    # Normalize token by token: NFKC can add spaces (e.g. "´" -> " ́"),
    # and args must stay aligned with the raw tokens used by raw_tail
    tokens = [normalize(token).strip() for token in split_tokens(message)]
    name = tokens[0] if tokens else ""
    return ParsedCommand(name=name, args=tokens[1:], raw=message)


def add_keyword(command: ParsedCommand, store: KnowledgeStore) -> str:
    if len(command.args) < 2:
        return "格式錯誤，請使用：/add <關鍵字> <回覆內容>"

    keyword = command.args[0]
    response = command.raw_tail(1)

    with store.lock:
        staged = store.snapshot()
        if find_keyword(staged, keyword):
            return f"新增失敗：關鍵字「{keyword}」已存在。"

        staged.keyword_groups.append(KeywordGroup(synonyms=[keyword], response=response))
        if not store.commit(staged):
            return SAVE_FAILED_REPLY

    logger.info("Added keyword group %r", keyword)
    return f"已新增關鍵字「{keyword}」，回覆：{response}"


def delete_keyword(command: ParsedCommand, store: KnowledgeStore) -> str:
    if len(command.args) != 1:
        return "格式錯誤，請使用：/delete <關鍵字>"

    keyword = command.args[0]

    with store.lock:
        staged = store.snapshot()
        match = find_keyword(staged, keyword)
        if not match:
            return f"刪除失敗：找不到關鍵字「{keyword}」。"

        del match.group.synonyms[match.synonym_index]
        group_removed = not match.group.synonyms
        if group_removed:
            del staged.keyword_groups[match.group_index]

        if not store.commit(staged):
            return SAVE_FAILED_REPLY

    logger.info("Deleted keyword %r (group removed: %s)", keyword, group_removed)
    if group_removed:
        return f"已刪除關鍵字「{keyword}」，該群組已無其他關鍵字，整個群組已移除。"
    return f"已刪除關鍵字「{keyword}」。"


def replace_response(command: ParsedCommand, store: KnowledgeStore) -> str:
    if len(command.args) < 2:
        return "格式錯誤，請使用：/replace <關鍵字> <新回覆內容>"

    keyword = command.args[0]
    response = command.raw_tail(1)

    with store.lock:
        staged = store.snapshot()
        match = find_keyword(staged, keyword)
        if not match:
            return f"更換失敗：找不到關鍵字「{keyword}」。"

        match.group.response = response
        if not store.commit(staged):
            return SAVE_FAILED_REPLY

    logger.info("Replaced response of group %s via keyword %r", match.group_index + 1, keyword)
    synonyms = ", ".join(match.group.synonyms)
    return f"已更新群組（{synonyms}）的回覆：{response}"


def add_aliases(command: ParsedCommand, store: KnowledgeStore) -> str:
    usage = "格式錯誤，請使用：/alias <關鍵字> += <同義詞1>,<同義詞2>"
    if ALIAS_OPERATOR not in command.args:
        return usage

    operator_position = command.args.index(ALIAS_OPERATOR)
    if operator_position != 1:
        return usage

    keyword = command.args[0]
    candidates = split_synonyms(" ".join(command.args[operator_position + 1:]))
    if not candidates:
        return "新增失敗：請提供至少一個同義詞。"

    with store.lock:
        staged = store.snapshot()
        match = find_keyword(staged, keyword)
        if not match:
            return f"新增失敗：找不到關鍵字「{keyword}」。"

        added, skipped = [], []
        for synonym in candidates:
            if find_keyword(staged, synonym):
                skipped.append(synonym)
            else:
                match.group.synonyms.append(synonym)
                added.append(synonym)

        if added and not store.commit(staged):
            return SAVE_FAILED_REPLY

    logger.info("Aliases for %r: added=%s skipped=%s", keyword, added, skipped)
    lines = []
    if added:
        lines.append(f"已為「{keyword}」新增同義詞：{', '.join(added)}")
    else:
        lines.append(f"沒有為「{keyword}」新增任何同義詞。")
    if skipped:
        lines.append(f"已略過（已存在）：{', '.join(skipped)}")
    return "\n".join(lines)


def list_groups(command: ParsedCommand, store: KnowledgeStore) -> str:
    with store.lock:
        groups = [(list(g.synonyms), g.response) for g in store.kb.keyword_groups]

    if not groups:
        return "知識庫目前沒有任何關鍵字群組。"

    lines = [f"共 {len(groups)} 個關鍵字群組："]
    for index, (synonyms, response) in enumerate(groups, start=1):
        lines.append(f"{index}. 關鍵字：{', '.join(synonyms)}")
        lines.append(f"   回覆：{response}")
    return "\n".join(lines)


def show_help(command: ParsedCommand, store: KnowledgeStore) -> str:
    return get_help()


COMMAND_HANDLERS: dict[Command, Callable[[ParsedCommand, KnowledgeStore], str]] = {
    Command.HELP: show_help,
    Command.ADD: add_keyword,
    Command.DELETE: delete_keyword,
    Command.REPLACE: replace_response,
    Command.ALIAS: add_aliases,
    Command.LIST: list_groups,
}


def execute_command(message: str, store: KnowledgeStore) -> str:
    """Parse one operator message and run it against the store."""
    command = parse_command(message)
    logger.debug("Executing command %r with %s argument(s)", command.name, len(command.args))

    try:
        handler = COMMAND_HANDLERS[Command(command.name)]
    except ValueError:
        logger.warning("Unknown command: %s", command.name)
        return f"未知的指令：{command.name}。輸入 /help 查看可用指令。"

    return handler(command, store)
