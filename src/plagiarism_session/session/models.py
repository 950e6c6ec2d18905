"""Session state models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..scanner.models import PlagiarismResult


class Role(str, Enum):
    """Role of the person looking at the class view."""

    LECTURER = "lecturer"
    STUDENT = "student"


class ScanPhase(str, Enum):
    """Lifecycle of the scan request."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Viewer:
    """Identity and role supplied by the auth/session layer."""

    user_id: Any
    role: Role | str

    @property
    def is_lecturer(self) -> bool:
        return self.role == Role.LECTURER

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT


@dataclass
class ScanSession:
    """Scan state for one class view.

    ``results`` is replaced wholesale by a successful scan and never edited
    in place. ``modal_visible`` is independent of ``phase``: dismissing the
    results modal keeps the results.
    """

    results: tuple[PlagiarismResult, ...] = ()
    phase: ScanPhase = ScanPhase.IDLE
    modal_visible: bool = False
    student_view_enabled: bool = False

    @property
    def has_results(self) -> bool:
        return len(self.results) > 0
