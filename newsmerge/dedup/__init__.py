"""Duplicate detection."""

from .detector import DuplicateDetector
from .hashing import content_hash, jaccard, normalize_text, title_similarity, title_tokens
from .models import DuplicateVerdict, TitleCandidate

__all__ = [
    "DuplicateDetector",
    "DuplicateVerdict",
    "TitleCandidate",
    "content_hash",
    "jaccard",
    "normalize_text",
    "title_similarity",
    "title_tokens",
]
