"""Terminal rendering of scan results with rich."""

from collections.abc import Sequence

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..scanner.models import PlagiarismResult, RiskLevel
from ..session.classifier import ViewerStatus, format_percentage
from ..session.stats import PlagiarismStats

# How many affected pairs the status card lists before summarizing the rest
MAX_STATUS_DETAILS = 3

RISK_COLORS = {
    RiskLevel.VERY_HIGH.value: "#7f1d1d",
    RiskLevel.HIGH.value: "#dc2626",
    RiskLevel.MEDIUM.value: "#f59e0b",
    RiskLevel.LOW.value: "#059669",
}
UNKNOWN_RISK_COLOR = "#6b7280"


def risk_label(risk_level: str | None) -> str:
    """Human label for a risk level ("VERY_HIGH" -> "VERY HIGH")."""
    if not risk_level:
        return "UNKNOWN"
    return risk_level.replace("_", " ")


def student_label(student_id, name: str | None) -> str:
    return name or f"Student {student_id}"


def render_stats(stats: PlagiarismStats) -> Table:
    """Summary table: pair count, similarity metrics and risk distribution."""
    table = Table(title="Summary", show_header=False, title_justify="left")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total Pairs", str(stats.total_pairs))
    table.add_row("High Risk", Text(str(stats.high_risk_pairs), style="#dc2626"))
    table.add_row("Avg Similarity", f"{stats.average_similarity}%")
    table.add_row("Max Similarity", f"{stats.max_similarity}%")

    for level in RiskLevel:
        table.add_row(
            Text(risk_label(level.value).title(), style=RISK_COLORS[level.value]),
            str(stats.risk_levels[level.value]),
        )

    return table


def render_results(results: Sequence[PlagiarismResult]) -> RenderableType:
    """Table of suspicious pairs, or a notice when the scan found none."""
    if not results:
        return Panel(
            "All assignments appear to be original work.",
            title="No Plagiarism Detected",
            border_style="#059669",
        )

    table = Table(title="Detailed Suspicious Pairs", title_justify="left")
    table.add_column("Students")
    table.add_column("Assignments")
    table.add_column("Detection")
    table.add_column("Similarity", justify="right")
    table.add_column("Risk", justify="center")

    for result in results:
        students = (
            f"{student_label(result.student1_id, result.student1_name)} <-> "
            f"{student_label(result.student2_id, result.student2_name)}"
        )
        assignments = ""
        if result.assignment1_title or result.assignment2_title:
            assignments = f"{result.assignment1_title or '-'} vs {result.assignment2_title or '-'}"
        similarity = (
            f"{format_percentage(result.similarity)}%"
            if result.similarity_percentage is not None
            else "-"
        )
        color = RISK_COLORS.get(result.risk_level or "", UNKNOWN_RISK_COLOR)

        table.add_row(
            students,
            assignments,
            result.detection_method or "",
            similarity,
            Text(risk_label(result.risk_level), style=f"bold {color}"),
        )

    return table


def render_viewer_status(status: ViewerStatus | None) -> Panel:
    """Originality status card for a student."""
    if status is None:
        return Panel(
            "Your plagiarism status will be available after the lecturer "
            "runs the detection analysis.",
            title="Status Check Pending",
            border_style="#6b7280",
        )

    lines: list[RenderableType] = [Text(status.message)]

    if status.details:
        lines.append(Text("\nAffected Submissions:", style="bold"))
        for detail in status.details[:MAX_STATUS_DETAILS]:
            lines.append(
                Text(f"  Similarity: {format_percentage(detail.similarity)}% with another submission")
            )
        remaining = len(status.details) - MAX_STATUS_DETAILS
        if remaining > 0:
            lines.append(Text(f"  ... and {remaining} more similarities", style="dim"))

    return Panel(Group(*lines), title=status.title, border_style=status.color)
