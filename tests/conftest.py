"""Shared fixtures for the plagiarism session tests."""

import json

import httpx
import pytest

from plagiarism_session.scanner import PlagiarismResult, PlagiarismScanClient
from plagiarism_session.session import Role, Viewer

API_BASE = "http://scanner.test"


class RecordingNotifier:
    """Notifier that keeps every message it was asked to show."""

    def __init__(self):
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


class FakeScanService:
    """Scripted stand-in for the scanning service behind an httpx.MockTransport."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if self.responses else httpx.Response(200, json={})
        if isinstance(response, Exception):
            raise response
        return response

    def client(self) -> PlagiarismScanClient:
        return PlagiarismScanClient(API_BASE, transport=httpx.MockTransport(self))


def pair(s1, s2, similarity=None, risk=None, **extra) -> PlagiarismResult:
    return PlagiarismResult(
        student1_id=s1,
        student2_id=s2,
        similarity_percentage=similarity,
        risk_level=risk,
        **extra,
    )


def results_body(*items: dict) -> httpx.Response:
    return httpx.Response(200, json={"plagiarism_results": list(items)})


def error_body(status_code: int, detail: str | None = None) -> httpx.Response:
    payload = {"detail": detail} if detail is not None else {}
    return httpx.Response(status_code, content=json.dumps(payload).encode())


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def lecturer() -> Viewer:
    return Viewer(user_id=1, role=Role.LECTURER)


@pytest.fixture
def student_a() -> Viewer:
    return Viewer(user_id="A", role=Role.STUDENT)
