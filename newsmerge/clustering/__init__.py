"""Article clustering and synthesis."""

from .manager import ClusterManager
from .synthesizer import MIN_SYNTHESIS_MEMBERS, Synthesizer

__all__ = ["ClusterManager", "MIN_SYNTHESIS_MEMBERS", "Synthesizer"]
