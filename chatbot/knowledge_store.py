"""
In-memory knowledge base backed by a single JSON file.

The whole document is read once at startup and rewritten after every
successful mutation. Mutations are staged on a copy and only become live
once the copy has been written to disk.
"""
import copy
import json
import os
import sys
import tempfile
import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from chatbot.constants import DEFAULT_DEVELOPER_PROMPT
from chatbot.logger import logger
from chatbot.utils import normalize


@dataclass
class KeywordGroup:
    synonyms: list[str]
    response: str

    def to_dict(self) -> dict:
        return {"synonyms": list(self.synonyms), "response": self.response}


@dataclass
class KnowledgeBase:
    keyword_groups: list[KeywordGroup] = field(default_factory=list)
    system_prompt: str = ""
    developer_prompt: str = DEFAULT_DEVELOPER_PROMPT
    # Top-level keys we don't know about, written back untouched
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "KnowledgeBase":
        if not isinstance(data, dict):
            raise ValueError(f"knowledge base must be a JSON object, got {type(data).__name__}")

        groups = []
        for raw_group in data.get("keyword_groups") or []:
            raw_synonyms = raw_group.get("synonyms") or []
            if not isinstance(raw_synonyms, list):
                raise ValueError(
                    f"synonyms must be a list, got {type(raw_synonyms).__name__}: {raw_synonyms!r}"
                )
            synonyms = []
            for synonym in raw_synonyms:
                synonym = normalize(synonym).strip()
                if synonym and synonym not in synonyms:
                    synonyms.append(synonym)
            if not synonyms:
                logger.warning("Skipping keyword group without synonyms: %r", raw_group)
                continue
            groups.append(KeywordGroup(synonyms=synonyms, response=str(raw_group.get("response", ""))))

        extra = {
            key: value
            for key, value in data.items()
            if key not in ("keyword_groups", "system_prompt", "developer_prompt")
        }
        return cls(
            keyword_groups=groups,
            system_prompt=str(data.get("system_prompt", "")),
            developer_prompt=str(data.get("developer_prompt") or DEFAULT_DEVELOPER_PROMPT),
            extra=extra,
        )

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data["keyword_groups"] = [group.to_dict() for group in self.keyword_groups]
        data["system_prompt"] = self.system_prompt
        data["developer_prompt"] = self.developer_prompt
        return data


@dataclass
class KeywordMatch:
    group: KeywordGroup
    group_index: int
    synonym_index: int


def find_keyword(kb: KnowledgeBase, phrase: str) -> Optional[KeywordMatch]:
    """Return the first group whose synonyms contain the normalized phrase."""
    needle = normalize(phrase)
    for group_index, group in enumerate(kb.keyword_groups):
        for synonym_index, synonym in enumerate(group.synonyms):
            if synonym == needle:
                return KeywordMatch(group, group_index, synonym_index)
    return None


class KnowledgeStore:
    """
    Owns the live KnowledgeBase and its JSON file.

    `lock` serializes readers and writers; hold it across a
    snapshot/commit pair so no other mutation lands in between.
    """

    def __init__(self, path: str):
        self.path = path
        self.kb = KnowledgeBase()
        self.lock = threading.RLock()

    def load(self) -> KnowledgeBase:
        """
        Read the knowledge base from disk.
        Exits the process if the file can't be read or parsed, the bot
        can't answer anything without it.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            kb = KnowledgeBase.from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            error_message = f"Failed to load knowledge base from {self.path}: {e}"
            logger.critical(error_message)
            print(error_message, file=sys.stderr)
            sys.exit(1)

        _warn_on_shared_synonyms(kb)
        with self.lock:
            self.kb = kb
        logger.info(
            "Knowledge base loaded successfully from %s (%s keyword groups)",
            self.path,
            len(kb.keyword_groups),
        )
        return kb

    def save(self, kb: KnowledgeBase) -> bool:
        """
        Overwrite the JSON file with `kb`.
        Returns False instead of raising when the write fails.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
            ) as f:
                tmp_path = f.name
                json.dump(kb.to_dict(), f, ensure_ascii=False, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save knowledge base to %s: %s", self.path, e)
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_path)
            return False

    def snapshot(self) -> KnowledgeBase:
        """Deep copy of the live knowledge base, for staging a mutation."""
        with self.lock:
            return copy.deepcopy(self.kb)

    def commit(self, staged: KnowledgeBase) -> bool:
        """Persist `staged` and make it live. On a failed save the live copy is kept."""
        with self.lock:
            if not self.save(staged):
                return False
            self.kb = staged
            return True

    def find_keyword(self, phrase: str) -> Optional[KeywordMatch]:
        with self.lock:
            return find_keyword(self.kb, phrase)


def _warn_on_shared_synonyms(kb: KnowledgeBase) -> None:
    seen = {}
    for index, group in enumerate(kb.keyword_groups):
        for synonym in group.synonyms:
            if synonym in seen:
                logger.warning(
                    "Synonym %r appears in groups %s and %s; the first one wins",
                    synonym,
                    seen[synonym] + 1,
                    index + 1,
                )
            else:
                seen[synonym] = index
