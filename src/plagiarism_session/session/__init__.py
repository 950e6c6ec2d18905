"""
Plagiarism session module.

The scan lifecycle of one class view, per-viewer risk classification and
the results summary.
"""

from .classifier import CLEAR_MESSAGE, Verdict, ViewerStatus, get_viewer_status
from .controller import (
    MIN_ASSIGNMENTS,
    ConsoleNotifier,
    Notifier,
    PlagiarismSessionController,
)
from .models import Role, ScanPhase, ScanSession, Viewer
from .stats import PlagiarismStats, compute_stats

__all__ = [
    # Controller
    "PlagiarismSessionController",
    "Notifier",
    "ConsoleNotifier",
    "MIN_ASSIGNMENTS",
    # State
    "Role",
    "ScanPhase",
    "ScanSession",
    "Viewer",
    # Derivations
    "Verdict",
    "ViewerStatus",
    "CLEAR_MESSAGE",
    "get_viewer_status",
    "PlagiarismStats",
    "compute_stats",
]
