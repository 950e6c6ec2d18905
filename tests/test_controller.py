"""Tests for plagiarism_session/session/controller.py - scan session lifecycle."""

import asyncio

import httpx
import pytest

from plagiarism_session.scanner import PlagiarismScanClient, StaticTokenProvider
from plagiarism_session.session import (
    PlagiarismSessionController,
    Role,
    ScanPhase,
    Verdict,
    Viewer,
)

from conftest import API_BASE, FakeScanService, error_body, pair, results_body

HIGH_PAIR = {"student1_id": "A", "student2_id": "B", "similarity_percentage": 92, "risk_level": "HIGH"}
LOW_PAIR = {"student1_id": "A", "student2_id": "C", "similarity_percentage": 15, "risk_level": "LOW"}


def make_controller(service, viewer, notifier, assignment_count=3, token="tok"):
    return PlagiarismSessionController(
        class_id=42,
        viewer=viewer,
        assignment_count=assignment_count,
        scan_client=service.client(),
        token_provider=StaticTokenProvider(token),
        notifier=notifier,
    )


class TestAvailability:
    @pytest.mark.parametrize(
        "count, expected",
        [(0, False), (1, False), (2, True), (10, True)],
    )
    def test_lecturer_needs_two_assignments(self, lecturer, notifier, count, expected):
        controller = make_controller(FakeScanService(), lecturer, notifier, assignment_count=count)

        assert controller.can_check_plagiarism is expected

    def test_student_can_never_check(self, student_a, notifier):
        controller = make_controller(FakeScanService(), student_a, notifier, assignment_count=5)

        assert controller.can_check_plagiarism is False

    def test_signed_out_viewer_cannot_check(self, notifier):
        controller = make_controller(FakeScanService(), None, notifier)

        assert controller.can_check_plagiarism is False
        assert controller.viewer_status() is None

    def test_recomputed_when_assignments_change(self, lecturer, notifier):
        controller = make_controller(FakeScanService(), lecturer, notifier, assignment_count=1)
        assert controller.can_check_plagiarism is False

        controller.assignment_count = 2

        assert controller.can_check_plagiarism is True

    def test_negative_assignment_count_rejected(self, lecturer, notifier):
        with pytest.raises(ValueError):
            make_controller(FakeScanService(), lecturer, notifier, assignment_count=-1)


class TestInitialState:
    def test_new_session_is_idle_and_empty(self, lecturer, notifier):
        controller = make_controller(FakeScanService(), lecturer, notifier)

        assert controller.phase is ScanPhase.IDLE
        assert controller.results == ()
        assert controller.is_checking is False
        assert controller.modal_visible is False
        assert controller.student_view_enabled is False
        assert controller.stats.total_pairs == 0


class TestStartScan:
    @pytest.mark.asyncio
    async def test_success_replaces_results_and_opens_modal(self, lecturer, notifier):
        service = FakeScanService(results_body(HIGH_PAIR, LOW_PAIR))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()

        assert controller.phase is ScanPhase.SUCCEEDED
        assert controller.modal_visible is True
        assert controller.is_checking is False
        assert [r.student2_id for r in controller.results] == ["B", "C"]
        assert notifier.messages == []
        assert service.requests[0].headers["Authorization"] == "Bearer tok"
        assert str(service.requests[0].url) == f"{API_BASE}/class/42/check-plagiarism"

    @pytest.mark.asyncio
    async def test_success_with_no_results(self, lecturer, notifier):
        service = FakeScanService(httpx.Response(200, json={}))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()

        assert controller.phase is ScanPhase.SUCCEEDED
        assert controller.results == ()
        assert controller.modal_visible is True

    @pytest.mark.asyncio
    async def test_student_trigger_is_silent_noop(self, student_a, notifier):
        service = FakeScanService(results_body(HIGH_PAIR))
        controller = make_controller(service, student_a, notifier)

        await controller.start_scan()

        assert service.requests == []
        assert controller.phase is ScanPhase.IDLE
        assert controller.modal_visible is False
        assert notifier.messages == []

    @pytest.mark.asyncio
    async def test_token_requested_per_scan(self, lecturer, notifier):
        tokens = iter(["first", "second"])
        service = FakeScanService(results_body(), results_body())
        controller = PlagiarismSessionController(
            class_id=42,
            viewer=lecturer,
            assignment_count=2,
            scan_client=service.client(),
            token_provider=lambda: next(tokens),
            notifier=notifier,
        )

        await controller.start_scan()
        await controller.start_scan()

        assert [r.headers["Authorization"] for r in service.requests] == ["Bearer first", "Bearer second"]

    @pytest.mark.asyncio
    async def test_rescan_replaces_results_wholesale(self, lecturer, notifier):
        service = FakeScanService(results_body(HIGH_PAIR, LOW_PAIR), results_body(LOW_PAIR))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()
        controller.dismiss_results()
        await controller.start_scan()

        assert len(controller.results) == 1
        assert controller.results[0].risk_level == "LOW"
        assert controller.modal_visible is True


class TestScanFailures:
    @pytest.mark.asyncio
    async def test_request_error_notifies_detail(self, lecturer, notifier):
        service = FakeScanService(error_body(403, "Only lecturers can run this check"))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()

        assert controller.phase is ScanPhase.FAILED
        assert notifier.messages == ["Plagiarism check failed: Only lecturers can run this check"]
        assert controller.modal_visible is False
        assert controller.is_checking is False

    @pytest.mark.asyncio
    async def test_request_error_without_detail(self, lecturer, notifier):
        service = FakeScanService(error_body(500))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()

        assert notifier.messages == ["Plagiarism check failed: Unknown error"]

    @pytest.mark.asyncio
    async def test_transport_error_notifies_generic_message(self, lecturer, notifier):
        service = FakeScanService(httpx.ConnectError("connection refused"))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()

        assert controller.phase is ScanPhase.FAILED
        assert notifier.messages == ["Failed to check plagiarism. Please try again."]

    @pytest.mark.asyncio
    async def test_failed_rescan_keeps_results_and_modal(self, lecturer, notifier):
        service = FakeScanService(results_body(HIGH_PAIR), error_body(502, "Scanner unavailable"))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()
        controller.dismiss_results()
        previous = controller.results

        await controller.start_scan()

        assert controller.phase is ScanPhase.FAILED
        assert controller.results == previous
        assert controller.modal_visible is False

    @pytest.mark.asyncio
    async def test_failed_rescan_keeps_open_modal(self, lecturer, notifier):
        service = FakeScanService(results_body(HIGH_PAIR), httpx.ReadTimeout("timed out"))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()
        await controller.start_scan()

        assert controller.modal_visible is True
        assert len(controller.results) == 1

    @pytest.mark.asyncio
    async def test_usable_after_failure(self, lecturer, notifier):
        service = FakeScanService(error_body(500, "boom"), results_body(LOW_PAIR))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()
        await controller.start_scan()

        assert controller.phase is ScanPhase.SUCCEEDED
        assert len(controller.results) == 1


class TestRunningState:
    @pytest.mark.asyncio
    async def test_busy_while_running_and_overlapping_trigger_ignored(self, lecturer, notifier):
        release = asyncio.Event()
        requests = []

        async def slow_service(request):
            requests.append(request)
            await release.wait()
            return results_body(HIGH_PAIR)

        client = PlagiarismScanClient(API_BASE, transport=httpx.MockTransport(slow_service))
        controller = PlagiarismSessionController(
            class_id=42,
            viewer=lecturer,
            assignment_count=2,
            scan_client=client,
            token_provider=StaticTokenProvider("tok"),
            notifier=notifier,
        )

        first = asyncio.create_task(controller.start_scan())
        await asyncio.sleep(0)
        while not requests:
            await asyncio.sleep(0)

        assert controller.phase is ScanPhase.RUNNING
        assert controller.is_checking is True
        assert controller.stats.total_pairs == 0

        await controller.start_scan()
        assert len(requests) == 1

        release.set()
        await first

        assert controller.phase is ScanPhase.SUCCEEDED
        assert controller.is_checking is False
        assert len(requests) == 1
        await client.aclose()


class TestDerivedValues:
    @pytest.mark.asyncio
    async def test_stats_follow_results(self, lecturer, notifier):
        service = FakeScanService(results_body(HIGH_PAIR, LOW_PAIR))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()

        assert controller.stats.to_dict() == {
            "totalPairs": 2,
            "riskLevels": {"VERY_HIGH": 0, "HIGH": 1, "MEDIUM": 0, "LOW": 1},
            "averageSimilarity": 53.5,
            "maxSimilarity": 92.0,
        }

    def test_viewer_status_follows_toggle(self, notifier):
        viewer = Viewer(user_id="A", role=Role.STUDENT)
        controller = make_controller(FakeScanService(), viewer, notifier)
        controller.session.results = (pair("A", "B", 92, "HIGH"),)

        assert controller.viewer_status() is None

        assert controller.toggle_student_view() is True
        status = controller.viewer_status()
        assert status.status is Verdict.WARNING
        assert status.max_similarity == 92

        controller.set_student_view(False)
        assert controller.viewer_status() is None

    def test_viewer_status_none_for_lecturer(self, lecturer, notifier):
        controller = make_controller(FakeScanService(), lecturer, notifier)
        controller.set_student_view(True)

        assert controller.viewer_status() is None

    def test_modal_toggles_keep_results(self, lecturer, notifier):
        controller = make_controller(FakeScanService(), lecturer, notifier)
        controller.session.results = (pair("A", "B", 92, "HIGH"),)

        controller.show_results()
        assert controller.modal_visible is True

        controller.dismiss_results()
        assert controller.modal_visible is False
        assert len(controller.results) == 1
        assert controller.phase is ScanPhase.IDLE


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_discards_session(self, lecturer, notifier):
        controller = make_controller(FakeScanService(), lecturer, notifier)

        async with controller:
            pass

        with pytest.raises(RuntimeError):
            controller.results

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self, lecturer, notifier):
        service = FakeScanService(results_body(), results_body())
        client = service.client()
        controller = PlagiarismSessionController(
            class_id=42,
            viewer=lecturer,
            assignment_count=2,
            scan_client=client,
            token_provider=StaticTokenProvider("tok"),
            notifier=notifier,
        )
        await controller.start_scan()

        await controller.aclose()

        assert client._client is not None
        await client.check_class(42, "tok")
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_built_from_settings(self, lecturer, notifier):
        from plagiarism_session.config import ServiceSettings

        controller = PlagiarismSessionController(
            class_id=42,
            viewer=lecturer,
            assignment_count=2,
            token_provider=StaticTokenProvider("tok"),
            notifier=notifier,
            settings=ServiceSettings(api_base="http://example.test/", timeout=5),
        )

        assert controller.scan_client.base_url == "http://example.test"
        assert controller.scan_client.timeout == 5

        await controller.aclose()


class TestRecovery:
    @pytest.mark.asyncio
    async def test_malformed_success_body_fails_and_stays_usable(self, lecturer, notifier):
        service = FakeScanService(results_body(None), results_body(LOW_PAIR))
        controller = make_controller(service, lecturer, notifier)

        await controller.start_scan()

        assert controller.phase is ScanPhase.FAILED
        assert controller.is_checking is False
        assert notifier.messages == ["Failed to check plagiarism. Please try again."]

        await controller.start_scan()

        assert len(service.requests) == 2
        assert controller.phase is ScanPhase.SUCCEEDED
        assert len(controller.results) == 1

    @pytest.mark.asyncio
    async def test_cancelled_scan_leaves_running_state(self, lecturer, notifier):
        release = asyncio.Event()
        requests = []

        async def service(request):
            requests.append(request)
            if len(requests) == 1:
                await release.wait()
            return results_body(HIGH_PAIR)

        client = PlagiarismScanClient(API_BASE, transport=httpx.MockTransport(service))
        controller = PlagiarismSessionController(
            class_id=42,
            viewer=lecturer,
            assignment_count=2,
            scan_client=client,
            token_provider=StaticTokenProvider("tok"),
            notifier=notifier,
        )

        task = asyncio.create_task(controller.start_scan())
        while not requests:
            await asyncio.sleep(0)
        assert controller.is_checking is True

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert controller.phase is ScanPhase.FAILED
        assert controller.is_checking is False
        assert controller.results == ()

        await controller.start_scan()

        assert len(requests) == 2
        assert controller.phase is ScanPhase.SUCCEEDED
        await client.aclose()

    @pytest.mark.asyncio
    async def test_token_provider_failure_is_reported(self, lecturer, notifier):
        calls = []

        def flaky_provider():
            calls.append(1)
            if len(calls) == 1:
                raise OSError("keyring locked")
            return "tok"

        service = FakeScanService(results_body(HIGH_PAIR))
        controller = PlagiarismSessionController(
            class_id=42,
            viewer=lecturer,
            assignment_count=2,
            scan_client=service.client(),
            token_provider=flaky_provider,
            notifier=notifier,
        )

        await controller.start_scan()

        assert service.requests == []
        assert controller.phase is ScanPhase.FAILED
        assert controller.is_checking is False
        assert notifier.messages == ["Failed to check plagiarism. Please try again."]

        await controller.start_scan()

        assert len(service.requests) == 1
        assert controller.phase is ScanPhase.SUCCEEDED

    @pytest.mark.asyncio
    async def test_stats_risk_levels_are_read_only(self, lecturer, notifier):
        service = FakeScanService(results_body(HIGH_PAIR))
        controller = make_controller(service, lecturer, notifier)
        await controller.start_scan()

        with pytest.raises(TypeError):
            controller.stats.risk_levels["HIGH"] = 99

        assert controller.stats.risk_levels["HIGH"] == 1
