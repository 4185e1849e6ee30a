"""
Application configuration using Pydantic settings.

Configuration comes from environment variables and command-line flags.
Supports a mock storage mode for local development.
"""

from .settings import ConfigError, Settings, get_settings

__all__ = ["ConfigError", "Settings", "get_settings"]
