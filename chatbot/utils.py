import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_SYNONYM_SEPARATOR_RE = re.compile(r"[,，]")


def normalize(text) -> str:
    """
    Canonicalize text for matching.

    Applies NFKC so full-width and compatibility variants compare equal to
    their plain forms, then lower-cases. Anything that is not a string
    becomes "".
    """
    if not isinstance(text, str):
        return ""
    return unicodedata.normalize("NFKC", unicodedata.normalize("NFKC", text).lower())


def contains(text: str, keywords: list[str]) -> bool:
    return any(k in text for k in keywords)


def split_tokens(text: str) -> list[str]:
    """Split on runs of whitespace, ignoring leading and trailing whitespace."""
    return _WHITESPACE_RE.split(text.strip()) if text and text.strip() else []


def join_tail(text: str, start: int) -> str:
    """
    Re-join the whitespace-separated tokens of `text` from position `start`
    onward with single spaces. Used to recover free text in its original casing.
    """
    return " ".join(split_tokens(text)[start:])


def split_synonyms(text: str) -> list[str]:
    """
    Split a comma list (ASCII or full-width commas) into normalized,
    non-empty entries, keeping the first occurrence of each.
    """
    result = []
    for part in _SYNONYM_SEPARATOR_RE.split(text or ""):
        synonym = normalize(part).strip()
        if synonym and synonym not in result:
            result.append(synonym)
    return result
