"""
Chat session module.

Server-side state for one client connection: the naming handshake, the
assigned identity and an isolated outbound delivery path.
"""

import asyncio
import uuid
from enum import Enum
from typing import Optional, TYPE_CHECKING

from websockets.exceptions import ConnectionClosed

from common.constants import SEND_TIMEOUT, SEND_QUEUE_SIZE
from common.protocol_definitions import ChatMessage, sanitize, now_ms
from server.utils.logger import logger

if TYPE_CHECKING:
    from server.chat.chat_hub import ChatHub


class SessionState(Enum):
    AWAITING_NAME = 'awaiting_name'
    ACTIVE = 'active'
    CLOSED = 'closed'


class Session:
    """
    Per-connection state machine: AWAITING_NAME -> ACTIVE -> CLOSED.

    The first text frame received names the session, every later text frame
    is a chat message. Outbound frames go through a bounded queue drained by
    a dedicated sender task, so a slow peer only ever delays itself.
    """

    def __init__(self, hub: 'ChatHub', transport, send_timeout: float = SEND_TIMEOUT,
                 send_queue_size: int = SEND_QUEUE_SIZE):
        self.id = uuid.uuid4().hex
        self.hub = hub
        self.transport = transport
        self.state = SessionState.AWAITING_NAME
        self.display_name: Optional[str] = None
        self.color: Optional[str] = None

        self.send_timeout = send_timeout
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=send_queue_size)
        self._sender_task: Optional[asyncio.Task] = None
        self._closing = False

    @property
    def peer(self) -> str:
        """Remote address of the transport, for logging."""
        return str(getattr(self.transport, 'remote_address', None))

    @property
    def is_closing(self) -> bool:
        return self._closing

    def start(self):
        """Start the outbound sender task."""
        if self._sender_task is None:
            self._sender_task = asyncio.create_task(self._send_loop())

    def activate(self, display_name: str, color: str):
        """Transition AWAITING_NAME -> ACTIVE with the assigned identity."""
        if self.state is not SessionState.AWAITING_NAME:
            raise RuntimeError(f"Session {self.id} cannot be named in state {self.state.value}")
        self.display_name = display_name
        self.color = color
        self.state = SessionState.ACTIVE

    def enqueue(self, frame: str) -> bool:
        """
        Queue an encoded frame for delivery without blocking.

        Returns False if the session is closing or its queue is full; the
        caller treats that as a transport failure.
        """
        if self._closing:
            return False
        try:
            self.outbox.put_nowait(frame)
        except asyncio.QueueFull:
            logger.warning(f"Outbound queue full for session {self.id} ({self.outbox.qsize()} frames)")
            return False
        return True

    async def _send_loop(self):
        while True:
            frame = await self.outbox.get()
            try:
                await asyncio.wait_for(self.transport.send(frame), self.send_timeout)
            except (ConnectionClosed, OSError, asyncio.TimeoutError) as e:
                # No retry: a failed write is this session's disconnect
                self.outbox.task_done()
                logger.log_send_failure(self.id, e)
                await self.disconnect()
                return
            self.outbox.task_done()

    async def handle_frame(self, frame):
        """Process one inbound frame from the transport."""
        if self._closing:
            return

        # Binary frames are ignored
        if not isinstance(frame, str):
            logger.debug(f"Ignoring non-text frame from session {self.id}")
            return

        if self.state is SessionState.AWAITING_NAME:
            await self.hub.on_named(self, sanitize(frame))
        elif self.state is SessionState.ACTIVE:
            message = ChatMessage(
                time=now_ms(),
                text=sanitize(frame),
                author=self.display_name,
                color=self.color
            )
            await self.hub.on_message(self, message)

    async def disconnect(self, drain: bool = False):
        """
        Tear the session down. Runs at most once.

        With ``drain`` the frames already queued get up to ``send_timeout``
        to go out before the transport is closed.
        """
        if self._closing:
            return
        self._closing = True

        await self.hub.deregister(self)
        self.state = SessionState.CLOSED

        current = asyncio.current_task()
        if self._sender_task is not None and self._sender_task is not current:
            if drain and not self._sender_task.done():
                try:
                    await asyncio.wait_for(self.outbox.join(), self.send_timeout)
                except asyncio.TimeoutError:
                    logger.warning(f"Dropping {self.outbox.qsize()} unsent frames for session {self.id}")
            self._sender_task.cancel()
            try:
                await self._sender_task
            except asyncio.CancelledError:
                pass

        try:
            await self.transport.close()
        except (ConnectionClosed, OSError) as e:
            logger.debug(f"Error closing transport for session {self.id}: {e}")
