"""Small text helpers shared by routing predicates and classification.

Matching is done on whole words (or word prefixes for stems) so that, for
example, "hi" does not match inside "this".
"""

import re
from collections.abc import Iterable
from functools import lru_cache

_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(r"[a-z0-9][a-z0-9'\-]*")


def normalize(text: str) -> str:
    """Lowercase, trim and collapse whitespace."""
    return _WHITESPACE.sub(" ", text.strip().lower())


def word_count(text: str) -> int:
    """Number of whitespace-separated words."""
    stripped = text.strip()
    return len(stripped.split()) if stripped else 0


@lru_cache(maxsize=1024)
def _phrase_pattern(phrase: str, prefix: bool) -> re.Pattern[str]:
    body = r"\s+".join(re.escape(part) for part in phrase.lower().split())
    tail = "" if prefix else r"\b"
    return re.compile(rf"\b{body}{tail}")


def contains_phrase(text: str, phrase: str, prefix: bool = False) -> bool:
    """Check for a whole-word phrase in already-normalized text.

    Args:
        text: Normalized text to search.
        phrase: Word or multi-word phrase.
        prefix: Match the last word as a stem ("invest" matches "investor").
    """
    return _phrase_pattern(phrase, prefix).search(text) is not None


def contains_any(text: str, phrases: Iterable[str], prefix: bool = False) -> bool:
    """True when any phrase occurs in the normalized text."""
    return any(contains_phrase(text, phrase, prefix) for phrase in phrases)


def slugify(text: str) -> str:
    """Turn a label into an action id (lowercase words joined by '_')."""
    return "_".join(_WORD.findall(text.lower()))[:48].strip("_")
