"""
Configuration module.

Handles loading of the scanning service settings from YAML files and
environment variables.
"""

from .loader import ConfigLoader
from .models import ServiceSettings

__all__ = ["ConfigLoader", "ServiceSettings"]
