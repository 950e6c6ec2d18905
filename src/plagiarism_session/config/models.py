"""Configuration data models."""

from dataclasses import dataclass
from typing import Any

from ..scanner.auth import DEFAULT_TOKEN_ENV_VAR

DEFAULT_API_BASE = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT = 30.0


@dataclass
class ServiceSettings:
    """Plagiarism scanning service connection settings."""

    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    token_env_var: str = DEFAULT_TOKEN_ENV_VAR

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceSettings":
        return cls(
            api_base=data.get("api_base", DEFAULT_API_BASE),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
            verify_ssl=data.get("verify_ssl", True),
            token_env_var=data.get("token_env_var", DEFAULT_TOKEN_ENV_VAR),
        )
