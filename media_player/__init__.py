"""
Media Player - a small web backend for a browser-based media player.

This package contains the complete application:
- core: Framework-agnostic playlist and playback logic
- infrastructure: Object storage integration
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
