"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path

from common.constants import LOG_DIR, CHAT_LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('chat_server')
        self.configure(logs_dir, log_level)

    def configure(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        """(Re)build handlers and file paths."""
        self.logs_dir = Path(logs_dir)
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        self.chat_log_path = self.logs_dir / CHAT_LOG_FILE

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_listening(self, host: str, port: int):
        self.info(f"Server is listening on {host}:{port}")

    def log_connection(self, origin: str, sid: str):
        """Log accepted connection."""
        self.info(f"Connection from origin {origin}, session {sid} accepted")

    def log_named(self, name: str, color: str, sid: str):
        """Log session naming."""
        self.info(f"User is known as: {name} with {color} color (session {sid})")

    def log_disconnect(self, name: str, sid: str, peer: str):
        """Log session disconnect."""
        self.info(f"Peer {peer} disconnected (user={name}, session {sid})")

    def log_chat(self, name: str, sid: str, message: str):
        """Log chat message."""
        self.info(f"Received message from {name} (session {sid}): {message}")
        self._write_to_file(self.chat_log_path, f"{datetime.now().isoformat()} | {name} ({sid}) | {message}")

    def log_send_failure(self, sid: str, error: Exception):
        """Log a failed write to a session transport."""
        self.warning(f"Send to session {sid} failed: {error!r}")

    def log_pool_exhausted(self, name: str, sid: str):
        self.warning(f"No free color for '{name}' (session {sid}), rejecting session")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger()
