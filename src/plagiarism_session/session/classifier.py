"""Per-viewer risk classification of scan results."""

from dataclasses import dataclass, field
from enum import Enum

from ..scanner.models import PlagiarismResult, RiskLevel
from .models import ScanSession, Viewer

CLEAR_MESSAGE = "No plagiarism concerns detected in your submissions."


class Verdict(str, Enum):
    """Summarized outcome for one student across all their pairs."""

    CLEAR = "CLEAR"
    MINOR = "MINOR"
    WARNING = "WARNING"


# Status card title and accent color per verdict
VERDICT_STYLES: dict[Verdict, tuple[str, str]] = {
    Verdict.CLEAR: ("Original Work", "#10b981"),
    Verdict.MINOR: ("Minor Similarity", "#3b82f6"),
    Verdict.WARNING: ("Similarity Detected", "#f59e0b"),
}


@dataclass(frozen=True)
class ViewerStatus:
    """Risk verdict shown to a student."""

    status: Verdict
    message: str
    max_similarity: float | None = None
    details: tuple[PlagiarismResult, ...] = field(default_factory=tuple)

    @property
    def title(self) -> str:
        return VERDICT_STYLES[self.status][0]

    @property
    def color(self) -> str:
        return VERDICT_STYLES[self.status][1]


def format_percentage(value: float) -> str:
    """Render a percentage without a trailing ``.0`` (92 -> "92", 92.5 -> "92.5")."""
    return f"{value:g}"


def get_viewer_status(viewer: Viewer | None, session: ScanSession) -> ViewerStatus | None:
    """Classify the scan results for a single student.

    Returns None unless the viewer is a student and the lecturer has enabled
    the student view, whatever the results hold.

    Args:
        viewer: The person looking at the class view
        session: Scan session holding the current results

    Returns:
        The viewer's verdict, or None when classification is not shown
    """
    if viewer is None or not viewer.is_student or not session.student_view_enabled:
        return None

    my_pairs = tuple(r for r in session.results if r.involves(viewer.user_id))

    if not my_pairs:
        return ViewerStatus(status=Verdict.CLEAR, message=CLEAR_MESSAGE)

    high_risk = tuple(r for r in my_pairs if r.risk_level in RiskLevel.high_risk())

    if high_risk:
        max_similarity = max(r.similarity for r in high_risk)
        return ViewerStatus(
            status=Verdict.WARNING,
            message=(
                f"Potential plagiarism detected ({format_percentage(max_similarity)}% similarity). "
                "Please review your work."
            ),
            max_similarity=max_similarity,
            details=high_risk,
        )

    max_similarity = max(r.similarity for r in my_pairs)
    return ViewerStatus(
        status=Verdict.MINOR,
        message=(
            f"Minor similarity detected ({format_percentage(max_similarity)}% similarity). "
            "This is within acceptable limits."
        ),
        max_similarity=max_similarity,
        details=my_pairs,
    )
