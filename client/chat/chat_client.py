"""
Chat client module.

This module handles client-side chat messaging: it opens the WebSocket
connection, sends the user's name and messages as plain text frames and
renders the events the server pushes back.
"""

import asyncio
import html
import sys
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import MessageTypes, CONNECTION_ERROR_TEXT
from common.protocol_definitions import ChatMessage, DecodeError, parse_server_frame


def format_message(author: str, text: str, color: str, time_ms: int) -> str:
    """Render one chat line as ``author [color] @ HH:MM: text``."""
    stamp = datetime.fromtimestamp(time_ms / 1000).strftime('%H:%M')
    return f"{html.unescape(author)} [{color}] @ {stamp}: {html.unescape(text)}"


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, config: Optional[ClientConfig] = None, output: Callable[[str], Any] = print):
        self.config = config or ClientConfig()
        self.output = output
        self.websocket: Optional[ClientConnection] = None
        self.username: Optional[str] = None
        self.color: Optional[str] = None
        self.error_state = False

    async def connect(self) -> bool:
        """Open the connection. Failure puts the client in a persistent error state."""
        uri = self.config.get_uri()
        try:
            self.websocket = await connect(
                uri,
                open_timeout=self.config.open_timeout,
                max_size=self.config.max_frame_size
            )
        except (OSError, InvalidHandshake, InvalidURI, asyncio.TimeoutError) as e:
            logger.log_connection(uri, False)
            self._enter_error_state(e)
            return False

        logger.log_connection(uri, True)
        return True

    async def send_text(self, text: str) -> bool:
        """Send a line of text. The first line sent is the user's name."""
        text = text.rstrip('\r\n')
        if not text:
            return False

        if self.websocket is None or self.error_state:
            logger.error("[ERROR] Not connected to server")
            return False

        try:
            await self.websocket.send(text)
        except ConnectionClosed as e:
            self._enter_error_state(e)
            return False

        if self.username is None:
            self.username = text
        return True

    def handle_frame(self, raw) -> Optional[Dict[str, Any]]:
        """Handle one frame from the server. Undecodable frames are dropped."""
        try:
            event = parse_server_frame(raw)
        except DecodeError as e:
            logger.log_decode_error(e)
            return None

        msg_type = event['type']
        data = event['data']

        if msg_type not in MessageTypes.ALL:
            logger.warning(f"Hmm..., I've never seen a frame like this: {event!r}")
        elif msg_type == MessageTypes.COLOR:
            self.color = data
            logger.log_color(self.username, data)
        elif msg_type == MessageTypes.HISTORY:
            for message in data:
                self._show(message)
        elif msg_type == MessageTypes.MESSAGE:
            self._show(data)
        elif msg_type == MessageTypes.ERROR:
            self.output(f"[SERVER] {data}")

        return event

    def _show(self, message: ChatMessage):
        self.output(format_message(message.author, message.text, message.color, message.time))

    def _enter_error_state(self, error: Exception = None):
        # Sticky: the client never reconnects on its own
        if self.error_state:
            return
        self.error_state = True
        logger.log_connection_lost(error)
        self.output(f"ERROR: {CONNECTION_ERROR_TEXT}")

    async def listen_for_messages(self):
        """Render server frames until the connection goes away."""
        try:
            async for raw in self.websocket:
                self.handle_frame(raw)
        except ConnectionClosed as e:
            self._enter_error_state(e)
            return
        self._enter_error_state()

    async def close(self):
        if self.websocket is not None:
            await self.websocket.close()
            self.websocket = None

    async def interactive_mode(self):
        """Run client with interactive chat input."""
        if not await self.connect():
            return

        listener_task = asyncio.create_task(self.listen_for_messages())

        if self.config.username:
            await self.send_text(self.config.username)
        else:
            logger.show_interactive_mode_info()

        try:
            while not self.error_state:
                user_input = await asyncio.get_running_loop().run_in_executor(
                    None, sys.stdin.readline
                )
                if not user_input:
                    break
                await self.send_text(user_input)
        except asyncio.CancelledError:
            pass
        finally:
            listener_task.cancel()
            try:
                await listener_task
            except asyncio.CancelledError:
                pass

            await self.close()
            logger.info("[INFO] Disconnected from server")
