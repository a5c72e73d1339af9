"""Multi-source news deduplication, clustering and synthesis pipeline."""

__version__ = "0.1.0"
