"""
Plagiarism scanning service client.

Issues the class-wide pairwise similarity scan and turns the response into
:class:`PlagiarismResult` objects. The similarity computation itself happens
on the service side.

Endpoint:
    POST {base_url}/class/{class_id}/check-plagiarism
"""

from typing import Any

import httpx

from ..utils.logging import get_logger
from .models import PlagiarismResult

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class ScanError(Exception):
    """Base exception for plagiarism scan errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ScanRequestError(ScanError):
    """The service answered with a non-success response."""

    def __init__(self, message: str, status_code: int, detail: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ScanTransportError(ScanError):
    """The request could not be completed or the response was unreadable."""

    pass


# -----------------------------------------------------------------------------
# API Client
# -----------------------------------------------------------------------------


class PlagiarismScanClient:
    """
    Async client for the plagiarism scanning service.

    Usage:
        async with PlagiarismScanClient("http://127.0.0.1:8000") as client:
            results = await client.check_class(class_id=7, token="...")
    """

    # Request timeout in seconds
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the scan client.

        Args:
            base_url: Base URL of the scanning service (e.g., http://127.0.0.1:8000)
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            transport: Optional httpx transport (used to stub the service)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify_ssl,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "PlagiarismScanClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    def scan_url(self, class_id: Any) -> str:
        """Build the scan endpoint for a class."""
        return f"{self.base_url}/class/{class_id}/check-plagiarism"

    async def check_class(self, class_id: Any, token: str | None) -> list[PlagiarismResult]:
        """
        Run a pairwise similarity scan over a class's submissions.

        Args:
            class_id: Class identifier
            token: Bearer token attached to the request as-is

        Returns:
            Result pairs in the order the service returned them

        Raises:
            ScanRequestError: If the service returns a non-success status
            ScanTransportError: If the request fails or the body is not JSON
        """
        url = self.scan_url(class_id)
        headers = {"Content-Type": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"POST {url}")

        try:
            response = await self.client.post(url, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Request error checking plagiarism for class {class_id}: {e}")
            raise ScanTransportError(f"Request failed: {e}") from e

        if not response.is_success:
            detail = self._error_detail(response)
            logger.error(
                f"Plagiarism check for class {class_id} failed with HTTP {response.status_code}: {detail}"
            )
            raise ScanRequestError(
                f"HTTP {response.status_code}: {detail or response.text}",
                status_code=response.status_code,
                detail=detail,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ScanTransportError(f"Invalid JSON in scan response: {e}") from e

        if not isinstance(data, dict):
            raise ScanTransportError(f"Unexpected scan response: {type(data).__name__}")

        items = data.get("plagiarism_results") or []
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ScanTransportError("Malformed plagiarism_results in scan response: expected a list of objects")

        return [PlagiarismResult.from_api_response(item) for item in items]

    def _error_detail(self, response: httpx.Response) -> str | None:
        """
        Extract the ``detail`` message from an error response.

        Args:
            response: Non-success HTTP response

        Returns:
            The detail string, or None when the body carries none
        """
        try:
            data = response.json()
        except ValueError:
            return None

        if isinstance(data, dict) and data.get("detail"):
            return str(data["detail"])
        return None
