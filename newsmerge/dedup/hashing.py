"""Text normalization, content fingerprints and title similarity."""

import hashlib
import re
import unicodedata
from typing import FrozenSet

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lower-case, strip diacritics and punctuation, collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    stripped = _NON_ALNUM.sub("", stripped)
    return _WHITESPACE.sub(" ", stripped).strip()


def content_hash(title: str, content: str, prefix_chars: int = 200) -> str:
    """MD5 of the normalized title plus the start of the content.

    Used as an equality fingerprint only.
    """
    normalized = normalize_text(f"{title} {(content or '')[:prefix_chars]}")
    return hashlib.md5(normalized.encode("utf-8")).hexdigest()


def title_tokens(title: str, min_length: int = 4) -> FrozenSet[str]:
    """Distinct normalized title words of at least ``min_length`` characters."""
    return frozenset(w for w in normalize_text(title).split() if len(w) >= min_length)


def jaccard(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    """Jaccard index of two token sets, 0 when either is empty."""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def title_similarity(title_a: str, title_b: str) -> float:
    """Jaccard similarity of two titles over their long words."""
    return jaccard(title_tokens(title_a), title_tokens(title_b))
