"""Summary statistics over a scan's result pairs."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..scanner.models import PlagiarismResult, RiskLevel
from ..utils.logging import get_logger

logger = get_logger(__name__)


def _empty_risk_levels() -> dict[str, int]:
    return {level.value: 0 for level in RiskLevel}


@dataclass(frozen=True)
class PlagiarismStats:
    """Counts and similarity metrics for the results summary.

    Instances are shared between sessions with equal results, so
    ``risk_levels`` is a read-only view.
    """

    total_pairs: int = 0
    risk_levels: Mapping[str, int] = field(default_factory=lambda: MappingProxyType(_empty_risk_levels()))
    average_similarity: float = 0
    max_similarity: float = 0

    @property
    def high_risk_pairs(self) -> int:
        """Pairs rated VERY_HIGH or HIGH."""
        return self.risk_levels[RiskLevel.VERY_HIGH.value] + self.risk_levels[RiskLevel.HIGH.value]

    def to_dict(self) -> dict[str, Any]:
        """Summary record in the camelCase shape used by the class view."""
        return {
            "totalPairs": self.total_pairs,
            "riskLevels": dict(self.risk_levels),
            "averageSimilarity": self.average_similarity,
            "maxSimilarity": self.max_similarity,
        }


def compute_stats(results: Sequence[PlagiarismResult]) -> PlagiarismStats:
    """Reduce result pairs into the summary shown above the results list.

    A pair without a risk level is counted as LOW. A pair whose risk level is
    not one of the four known levels is left out of the per-level counts but
    still counts towards ``total_pairs``. Missing similarities count as 0.

    Args:
        results: Result pairs from the latest successful scan

    Returns:
        PlagiarismStats, all zeros for an empty collection
    """
    if not results:
        return PlagiarismStats()

    risk_levels = _empty_risk_levels()
    total_similarity = 0.0
    max_similarity = 0.0

    for result in results:
        risk = result.risk_level or RiskLevel.LOW.value
        if risk in risk_levels:
            risk_levels[risk] += 1
        else:
            logger.debug(f"Unrecognized risk level {risk!r} left out of per-level counts")

        similarity = result.similarity
        total_similarity += similarity
        max_similarity = max(max_similarity, similarity)

    return PlagiarismStats(
        total_pairs=len(results),
        risk_levels=MappingProxyType(risk_levels),
        average_similarity=round(total_similarity / len(results), 1),
        max_similarity=round(float(max_similarity), 1),
    )
