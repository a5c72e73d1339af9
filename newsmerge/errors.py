"""Exception types shared across the pipeline."""

from typing import Optional


class NewsmergeError(Exception):
    """Base class for all newsmerge errors."""


class NotFoundError(NewsmergeError):
    """A referenced raw article or cluster does not exist."""


class CapabilityError(NewsmergeError):
    """An external capability call failed, timed out, or returned unusable output."""

    def __init__(self, task: str, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{task}: {message}")
        self.task = task
        self.cause = cause


class PersistenceError(NewsmergeError):
    """A read or write against the content store failed."""


class IngestionError(NewsmergeError):
    """A source feed could not be fetched or parsed."""
