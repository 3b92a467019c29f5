"""
Chat hub module.

This module owns the shared chat state (session registry, history buffer and
identity pool) and fans events out to the registered sessions.
"""

import asyncio
from typing import Dict, Iterable, List, Set

from common.constants import MAX_CHAT_HISTORY, COLOR_PALETTE
from common.protocol_definitions import (
    ChatMessage, encode_frame, create_color_message, create_history_message,
    create_chat_message, create_error_message
)
from server.chat.history_buffer import HistoryBuffer
from server.chat.identity_pool import IdentityPool, IdentityPoolExhausted
from server.chat.session import Session
from server.utils.logger import logger


class ChatHub:
    """Central coordinator for chat state and broadcast."""

    def __init__(self, history_size: int = MAX_CHAT_HISTORY, palette: Iterable[str] = COLOR_PALETTE,
                 identity_pool: IdentityPool = None):
        self.sessions: Dict[str, Session] = {}  # session id -> session, in join order
        self.history = HistoryBuffer(history_size)
        self.identity_pool = identity_pool or IdentityPool(palette)
        self.lock = asyncio.Lock()  # Serializes every state change below
        self._cleanup_tasks: Set[asyncio.Task] = set()

    async def register(self, session: Session):
        """Add a session and replay the current history to it."""
        async with self.lock:
            self.sessions[session.id] = session
            history = self.history.snapshot()
            if history:
                session.enqueue(encode_frame(create_history_message(history)))

    async def deregister(self, session: Session):
        """Remove a session and free its color. No-op if already gone."""
        async with self.lock:
            removed = self.sessions.pop(session.id, None)
            if removed is not None:
                self.identity_pool.release(session.color)

        if removed is not None:
            logger.log_disconnect(session.display_name, session.id, session.peer)

    async def on_named(self, session: Session, display_name: str) -> bool:
        """
        Give a session its display name and a color.

        If every color is taken the session is rejected: it receives an
        error event and its connection is closed.
        """
        async with self.lock:
            if session.id not in self.sessions:
                # Already torn down while waiting for the lock
                return False
            try:
                color = self.identity_pool.acquire()
            except IdentityPoolExhausted:
                color = None
                session.enqueue(encode_frame(create_error_message(
                    "Chat is full: no display color is available, try again later"
                )))
            else:
                session.activate(display_name, color)
                session.enqueue(encode_frame(create_color_message(color)))

        if color is None:
            logger.log_pool_exhausted(display_name, session.id)
            await session.disconnect(drain=True)
            return False

        logger.log_named(display_name, color, session.id)
        return True

    async def on_message(self, session: Session, message: ChatMessage):
        """Record a message and broadcast it to every registered session."""
        logger.log_chat(message.author, session.id, message.text)

        frame = encode_frame(create_chat_message(message))
        failed: List[Session] = []

        async with self.lock:
            self.history.append(message)
            for target in list(self.sessions.values()):
                if not target.enqueue(frame):
                    failed.append(target)

        for target in failed:
            self._schedule_disconnect(target)

    def _schedule_disconnect(self, session: Session):
        task = asyncio.create_task(session.disconnect())
        self._cleanup_tasks.add(task)

        def callback(done):
            self._cleanup_tasks.discard(done)
            if not done.cancelled() and done.exception():
                logger.error(f"Disconnect of session {session.id} failed: {done.exception()}")

        task.add_done_callback(callback)

    async def wait_for_cleanup(self):
        """Wait for scheduled disconnects to finish."""
        while self._cleanup_tasks:
            await asyncio.gather(*list(self._cleanup_tasks), return_exceptions=True)

    async def shutdown(self):
        """Disconnect every registered session."""
        async with self.lock:
            sessions = list(self.sessions.values())
        for session in sessions:
            await session.disconnect()
        await self.wait_for_cleanup()

    def history_snapshot(self) -> List[ChatMessage]:
        return self.history.snapshot()

    def session_count(self) -> int:
        """Get the number of registered sessions."""
        return len(self.sessions)
