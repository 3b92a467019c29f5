"""
Server configuration module.

This module handles server-side configuration settings.
"""

from typing import Iterable

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_CHAT_HISTORY, COLOR_PALETTE,
    SEND_TIMEOUT, SEND_QUEUE_SIZE, MAX_FRAME_SIZE, LOG_DIR
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 history_size: int = MAX_CHAT_HISTORY, palette: Iterable[str] = COLOR_PALETTE,
                 send_timeout: float = SEND_TIMEOUT, send_queue_size: int = SEND_QUEUE_SIZE,
                 logs_dir: str = LOG_DIR):
        self.host = host
        self.port = port

        # Chat settings
        self.history_size = history_size
        self.palette = tuple(palette)

        # Per-session delivery settings
        self.send_timeout = send_timeout
        self.send_queue_size = send_queue_size
        self.max_frame_size = MAX_FRAME_SIZE

        # Logging configuration
        self.logs_dir = logs_dir

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }

    def get_session_settings(self):
        """Get per-session delivery settings."""
        return {
            'send_timeout': self.send_timeout,
            'send_queue_size': self.send_queue_size
        }

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir
        }
