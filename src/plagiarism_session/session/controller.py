"""
Plagiarism session controller.

Owns the scan session of one class view: starts the scan, keeps the returned
pairs, and exposes the per-viewer verdict and the results summary as values
derived from the current pairs.
"""

from functools import lru_cache
from typing import Any, Protocol

from rich.console import Console

from ..config.models import ServiceSettings
from ..scanner.auth import EnvTokenProvider, TokenProvider
from ..scanner.client import PlagiarismScanClient, ScanRequestError, ScanTransportError
from ..scanner.models import PlagiarismResult
from ..utils.logging import get_logger
from .classifier import ViewerStatus, get_viewer_status
from .models import ScanPhase, ScanSession, Viewer
from .stats import PlagiarismStats, compute_stats

logger = get_logger(__name__)

# Minimum number of assignments a pairwise scan can compare
MIN_ASSIGNMENTS = 2

TRANSPORT_FAILURE_MESSAGE = "Failed to check plagiarism. Please try again."


class Notifier(Protocol):
    """One-shot user-visible notification channel."""

    def notify(self, message: str) -> None: ...


class ConsoleNotifier:
    """Prints notifications to the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def notify(self, message: str) -> None:
        self.console.print(message, style="bold red", markup=False)


@lru_cache(maxsize=32)
def _stats_for(results: tuple[PlagiarismResult, ...]) -> PlagiarismStats:
    return compute_stats(results)


@lru_cache(maxsize=32)
def _status_for(
    viewer: Viewer,
    student_view_enabled: bool,
    results: tuple[PlagiarismResult, ...],
) -> ViewerStatus | None:
    session = ScanSession(results=results, student_view_enabled=student_view_enabled)
    return get_viewer_status(viewer, session)


class PlagiarismSessionController:
    """
    Scan session controller for a single class.

    Usage:
        async with PlagiarismSessionController(
            class_id=7,
            viewer=Viewer(user_id=1, role=Role.LECTURER),
            assignment_count=len(assignments),
        ) as controller:
            if controller.can_check_plagiarism:
                await controller.start_scan()
            print(controller.stats.to_dict())
    """

    def __init__(
        self,
        class_id: Any,
        viewer: Viewer | None,
        assignment_count: int,
        scan_client: PlagiarismScanClient | None = None,
        token_provider: TokenProvider | None = None,
        notifier: Notifier | None = None,
        settings: ServiceSettings | None = None,
    ):
        """
        Initialize the controller.

        Args:
            class_id: Class whose submissions are scanned
            viewer: Person looking at the class view (None when signed out)
            assignment_count: Number of assignments currently in the class
            scan_client: Client for the scanning service. Built from
                ``settings`` when omitted and closed by :meth:`aclose`
            token_provider: Callable returning the bearer token. Defaults to
                reading ``settings.token_env_var``
            notifier: Receives failure messages. Defaults to the console
            settings: Service settings used for the default client and token
        """
        settings = settings or ServiceSettings()

        self.class_id = class_id
        self.viewer = viewer
        self.assignment_count = assignment_count

        self._owns_client = scan_client is None
        self.scan_client = scan_client or PlagiarismScanClient(
            base_url=settings.api_base,
            timeout=settings.timeout,
            verify_ssl=settings.verify_ssl,
        )
        self.token_provider = token_provider or EnvTokenProvider(settings.token_env_var)
        self.notifier = notifier or ConsoleNotifier()

        self._session: ScanSession | None = ScanSession()

    async def __aenter__(self) -> "PlagiarismSessionController":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Discard the session and close the scan client if this controller built it."""
        if self._owns_client:
            await self.scan_client.aclose()
        self._session = None

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    @property
    def session(self) -> ScanSession:
        if self._session is None:
            raise RuntimeError(f"Plagiarism session for class {self.class_id} is closed")
        return self._session

    @property
    def assignment_count(self) -> int:
        return self._assignment_count

    @assignment_count.setter
    def assignment_count(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"assignment_count must be >= 0, got {value}")
        self._assignment_count = value

    @property
    def results(self) -> tuple[PlagiarismResult, ...]:
        return self.session.results

    @property
    def phase(self) -> ScanPhase:
        return self.session.phase

    @property
    def is_checking(self) -> bool:
        """Busy indicator for the scan button."""
        return self.session.phase is ScanPhase.RUNNING

    @property
    def modal_visible(self) -> bool:
        return self.session.modal_visible

    @property
    def student_view_enabled(self) -> bool:
        return self.session.student_view_enabled

    def show_results(self) -> None:
        """Open the results modal again after it was dismissed."""
        self.session.modal_visible = True

    def dismiss_results(self) -> None:
        """Close the results modal. The results themselves are kept."""
        self.session.modal_visible = False

    def set_student_view(self, enabled: bool) -> None:
        self.session.student_view_enabled = enabled
        logger.info(
            f"Student view {'enabled' if enabled else 'disabled'} for class {self.class_id}"
        )

    def toggle_student_view(self) -> bool:
        self.set_student_view(not self.session.student_view_enabled)
        return self.session.student_view_enabled

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def can_check_plagiarism(self) -> bool:
        """Whether the scan button is available to this viewer."""
        return (
            self.viewer is not None
            and self.viewer.is_lecturer
            and self.assignment_count >= MIN_ASSIGNMENTS
        )

    @property
    def stats(self) -> PlagiarismStats:
        """Summary of the current results."""
        return _stats_for(self.session.results)

    def viewer_status(self) -> ViewerStatus | None:
        """Verdict for the current viewer, or None when it is not shown to them."""
        if self.viewer is None:
            return None
        session = self.session
        return _status_for(self.viewer, session.student_view_enabled, session.results)

    # -------------------------------------------------------------------------
    # Scan trigger
    # -------------------------------------------------------------------------

    async def start_scan(self) -> None:
        """
        Run the plagiarism scan for the class.

        Does nothing unless the viewer is a lecturer, and ignores the call
        while a scan is already running. A successful scan replaces the
        results and opens the results modal. A failed scan keeps the previous
        results and modal state and sends one notification.
        """
        session = self.session

        if self.viewer is None or not self.viewer.is_lecturer:
            logger.debug(f"Ignoring plagiarism check for class {self.class_id}: viewer is not a lecturer")
            return

        if session.phase is ScanPhase.RUNNING:
            logger.warning(f"Plagiarism check for class {self.class_id} already running, ignoring trigger")
            return

        session.phase = ScanPhase.RUNNING
        logger.info(f"Starting plagiarism check for class {self.class_id}")

        try:
            results = await self.scan_client.check_class(self.class_id, self._fetch_token())
        except ScanRequestError as e:
            self._fail(session, f"Plagiarism check failed: {e.detail or 'Unknown error'}", e)
        except ScanTransportError as e:
            self._fail(session, TRANSPORT_FAILURE_MESSAGE, e)
        else:
            session.results = tuple(results)
            session.phase = ScanPhase.SUCCEEDED
            session.modal_visible = True
            logger.info(f"Plagiarism check completed for class {self.class_id}: {len(results)} pairs")
        finally:
            # RUNNING must never outlive the call, even when it is cancelled
            if session.phase is ScanPhase.RUNNING:
                logger.error(f"Plagiarism check for class {self.class_id} was interrupted")
                session.phase = ScanPhase.FAILED

    def _fetch_token(self) -> str | None:
        """Ask the credential provider for a token, reporting its failures as transport errors."""
        try:
            return self.token_provider()
        except Exception as e:
            raise ScanTransportError(f"Could not obtain access token: {e}") from e

    def _fail(self, session: ScanSession, message: str, error: Exception) -> None:
        """Move to FAILED and tell the viewer, leaving results and modal as they were."""
        logger.error(f"Plagiarism check error for class {self.class_id}: {error}")
        session.phase = ScanPhase.FAILED
        self.notifier.notify(message)
