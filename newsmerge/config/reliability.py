"""Immutable source reliability lookup."""

from types import MappingProxyType
from typing import Iterable, Mapping

from ..models.taxonomy import ReliabilityTier
from .models import SourceConfig


class ReliabilityTable:
    """Read-only mapping of source name to reliability tier.

    Built once from the sources file and handed to the components that rank
    or annotate sources. Unknown sources are treated as low reliability.
    """

    def __init__(self, tiers: Mapping[str, ReliabilityTier]) -> None:
        self._tiers = MappingProxyType(dict(tiers))

    @classmethod
    def from_sources(cls, sources: Iterable[SourceConfig]) -> "ReliabilityTable":
        """Build the table from source configuration."""
        return cls({s.name: s.reliability for s in sources})

    @property
    def tiers(self) -> Mapping[str, ReliabilityTier]:
        """Underlying read-only mapping."""
        return self._tiers

    def tier_for(self, source_name: str) -> ReliabilityTier:
        """Tier for a source, low when unknown."""
        return self._tiers.get(source_name, ReliabilityTier.LOW)

    def __len__(self) -> int:
        return len(self._tiers)
