"""
Plagiarism scanner integration module.

Handles the request to the plagiarism scanning service, the credentials
attached to it, and the result pairs it returns.
"""

from .auth import (
    DEFAULT_TOKEN_ENV_VAR,
    EnvTokenProvider,
    StaticTokenProvider,
    TokenProvider,
)
from .client import (
    PlagiarismScanClient,
    ScanError,
    ScanRequestError,
    ScanTransportError,
)
from .models import PlagiarismResult, RiskLevel

__all__ = [
    # API client
    "PlagiarismScanClient",
    # Exceptions
    "ScanError",
    "ScanRequestError",
    "ScanTransportError",
    # Credentials
    "TokenProvider",
    "StaticTokenProvider",
    "EnvTokenProvider",
    "DEFAULT_TOKEN_ENV_VAR",
    # Models
    "PlagiarismResult",
    "RiskLevel",
]
