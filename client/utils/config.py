"""
Client configuration module.

This module handles client-side configuration settings.
"""

from common.constants import DEFAULT_HOST, DEFAULT_PORT, MAX_SERVER_FRAME_SIZE


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, username: str = None):
        self.host = host
        self.port = port
        self.username = username

        # Connection settings
        self.open_timeout = 10  # seconds
        self.max_frame_size = MAX_SERVER_FRAME_SIZE  # history replays can be large

    def get_uri(self) -> str:
        """WebSocket URI of the chat server."""
        return f"ws://{self.host}:{self.port}"
