"""Plagiarism scan data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


def _as_percentage(value: Any) -> float | None:
    """Read a wire similarity as a float; None when missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_label(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return str(value)


class RiskLevel(str, Enum):
    """Coarse risk bucket assigned by the scanning service to each pair."""

    VERY_HIGH = "VERY_HIGH"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def high_risk(cls) -> frozenset[str]:
        """Risk levels that count as a potential plagiarism warning."""
        return frozenset({cls.VERY_HIGH.value, cls.HIGH.value})


@dataclass(frozen=True)
class PlagiarismResult:
    """One compared submission pair returned by a class scan.

    Either ``similarity_percentage`` or ``risk_level`` may be missing. A
    similarity that is not a number is read as missing, and ``risk_level``
    may hold a value outside :class:`RiskLevel`.
    """

    student1_id: Any
    student2_id: Any
    similarity_percentage: float | None = None
    risk_level: str | None = None
    student1_name: str | None = None
    student2_name: str | None = None
    assignment1_title: str | None = None
    assignment2_title: str | None = None
    detection_method: str | None = None

    @property
    def similarity(self) -> float:
        """Similarity with a missing or non-numeric value read as 0."""
        return _as_percentage(self.similarity_percentage) or 0.0

    def involves(self, user_id: Any) -> bool:
        """Check whether ``user_id`` is one side of this pair."""
        return self.student1_id == user_id or self.student2_id == user_id

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "PlagiarismResult":
        """Create a PlagiarismResult from a scan response item."""
        return cls(
            student1_id=data.get("student1_id"),
            student2_id=data.get("student2_id"),
            similarity_percentage=_as_percentage(data.get("similarity_percentage")),
            risk_level=_as_label(data.get("risk_level")),
            student1_name=data.get("student1_name"),
            student2_name=data.get("student2_name"),
            assignment1_title=data.get("assignment1_title"),
            assignment2_title=data.get("assignment2_title"),
            detection_method=data.get("detection_method"),
        )
