"""
Configuration module.

Handles loading and saving of the local configuration file.
"""

from .loader import ConfigLoader, DEFAULT_CONFIG_PATH
from .models import ArtemisConfig, PollSettings

__all__ = ["ConfigLoader", "DEFAULT_CONFIG_PATH", "ArtemisConfig", "PollSettings"]
