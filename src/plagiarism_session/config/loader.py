"""Configuration loader for the scanning service settings."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models import ServiceSettings

API_BASE_ENV_VAR = "PLAGIARISM_API_BASE"
TIMEOUT_ENV_VAR = "PLAGIARISM_API_TIMEOUT"


class ConfigLoader:
    """Loads service settings from YAML and the environment."""

    def __init__(self, config_dir: Path | None = None, use_dotenv: bool = True):
        """Initialize the config loader.

        Args:
            config_dir: Directory relative config paths resolve against.
                Defaults to the current working directory
            use_dotenv: Load a ``.env`` file into the environment first
        """
        self.config_dir = config_dir or Path.cwd()
        if use_dotenv:
            load_dotenv()

    def load_settings(self, config_file: str | Path | None = None) -> ServiceSettings:
        """Load service settings.

        Values from the YAML file (under a ``service`` key, or at the top
        level) are overridden by ``PLAGIARISM_API_BASE`` and
        ``PLAGIARISM_API_TIMEOUT`` when those are set.

        Args:
            config_file: Optional path to a YAML settings file

        Returns:
            Parsed ServiceSettings object

        Raises:
            FileNotFoundError: If config_file is given but does not exist
        """
        data: dict[str, Any] = {}
        if config_file is not None:
            raw = self._load_yaml(self._resolve_path(config_file))
            data = dict(raw.get("service") or raw)

        if os.environ.get(API_BASE_ENV_VAR):
            data["api_base"] = os.environ[API_BASE_ENV_VAR]
        if os.environ.get(TIMEOUT_ENV_VAR):
            data["timeout"] = os.environ[TIMEOUT_ENV_VAR]

        return ServiceSettings.from_dict(data)

    def _resolve_path(self, file_path: str | Path) -> Path:
        """Resolve a config file path."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.config_dir / path
        return path

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load and parse a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
