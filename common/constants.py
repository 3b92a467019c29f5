"""
Shared constants for the WebSocket broadcast chat.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 1337

# Frame limits
MAX_FRAME_SIZE = 64 * 1024  # bytes per inbound frame

# Outbound delivery
SEND_TIMEOUT = 5.0  # seconds allowed for a single frame write
SEND_QUEUE_SIZE = 256  # frames buffered per session before it is dropped

# Chat History
MAX_CHAT_HISTORY = 100

# Largest frame the server can emit: a full history replay. Escaping grows a
# stored field to at most 6x its inbound size, and author and text are both bounded.
MAX_SERVER_FRAME_SIZE = MAX_CHAT_HISTORY * (2 * 6 * MAX_FRAME_SIZE + 256) + 1024

# Display colors handed out to named sessions
COLOR_PALETTE = ('red', 'green', 'blue', 'magenta', 'purple', 'plum', 'orange')

# Logging
LOG_DIR = 'logs'
CHAT_LOG_FILE = 'chat_history.log'

# Client status
CONNECTION_ERROR_TEXT = 'Unable to communicate with the WebSocket server.'


# Message Types (server to client)
class MessageTypes:
    COLOR = 'color'
    HISTORY = 'history'
    MESSAGE = 'message'
    ERROR = 'error'

    ALL = (COLOR, HISTORY, MESSAGE, ERROR)
