"""Credential providers for the plagiarism scanning service.

The controller never reads credentials from ambient storage; it is handed a
provider and asks it for a token right before each scan request.
"""

import os
from typing import Callable

from dotenv import load_dotenv

DEFAULT_TOKEN_ENV_VAR = "PLAGIARISM_API_TOKEN"

TokenProvider = Callable[[], "str | None"]


class StaticTokenProvider:
    """Provider that always returns the same token."""

    def __init__(self, token: str | None):
        self.token = token

    def __call__(self) -> str | None:
        return self.token


class EnvTokenProvider:
    """Provider that reads the token from an environment variable.

    The variable is looked up on every call so a refreshed token is picked up
    without rebuilding the controller.
    """

    def __init__(self, env_var: str = DEFAULT_TOKEN_ENV_VAR, use_dotenv: bool = True):
        """Initialize the provider.

        Args:
            env_var: Environment variable holding the access token
            use_dotenv: Load a ``.env`` file into the environment first
        """
        self.env_var = env_var
        if use_dotenv:
            load_dotenv()

    def __call__(self) -> str | None:
        return os.environ.get(self.env_var)
