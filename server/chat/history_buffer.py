"""
History buffer module.

Bounded log of the most recent chat messages, replayed to joining sessions.
"""

from collections import deque
from typing import List

from common.constants import MAX_CHAT_HISTORY
from common.protocol_definitions import ChatMessage


class HistoryBuffer:
    """FIFO buffer of recent messages."""

    def __init__(self, capacity: int = MAX_CHAT_HISTORY):
        if capacity <= 0:
            raise ValueError("History capacity must be positive")
        self.capacity = capacity
        self._messages = deque(maxlen=capacity)  # oldest entry dropped on overflow

    def append(self, message: ChatMessage):
        self._messages.append(message)

    def snapshot(self) -> List[ChatMessage]:
        """Point-in-time copy of the buffer in insertion order."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)
