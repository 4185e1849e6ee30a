"""
Core playback logic for the media player.

This module is framework-agnostic - it doesn't import FastAPI or boto3.
Storage is reached through the StorageClient protocol, so the playlist
and playback rules can be tested with in-memory fakes.
"""
