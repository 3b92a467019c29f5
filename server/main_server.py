#!/usr/bin/env python3
"""
WebSocket Chat Server - Connection Listener

Accepts WebSocket connections, creates a Session for each one and wires its
inbound frames and close event into the chat hub.
"""

import asyncio
from typing import Optional

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from server.chat.chat_hub import ChatHub
from server.chat.session import Session
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ChatWebSocketServer:
    """Main server class: binds the listener and owns the hub."""

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.hub = ChatHub(self.config.history_size, self.config.palette)
        self._server: Optional[Server] = None

    async def handle_connection(self, websocket: ServerConnection):
        """Handle individual client connection."""
        # NOTE: origin is logged but not validated
        origin = None
        if websocket.request is not None:
            origin = websocket.request.headers.get('Origin')

        session = Session(self.hub, websocket, **self.config.get_session_settings())
        logger.log_connection(origin, session.id)

        try:
            session.start()
            await self.hub.register(session)

            async for frame in websocket:
                await session.handle_frame(frame)
        except ConnectionClosed as e:
            logger.debug(f"Connection closed for session {session.id}: {e}")
        except asyncio.CancelledError:
            logger.info(f"Connection cancelled for session {session.id}")
            raise
        except Exception as e:
            logger.log_error(f"session {session.id}", e)
        finally:
            await session.disconnect()

    async def start_listening(self) -> Server:
        """Bind the WebSocket endpoint. Bind errors propagate to the caller."""
        self._server = await serve(
            self.handle_connection,
            max_size=self.config.max_frame_size,
            **self.config.get_connection_info()
        )
        logger.log_listening(self.config.host, self.bound_port)
        return self._server

    @property
    def bound_port(self) -> Optional[int]:
        """Actual port of the listening socket (useful when binding port 0)."""
        if self._server is None:
            return None
        for sock in self._server.sockets:
            return sock.getsockname()[1]
        return None

    async def start(self):
        """Start the server and serve until cancelled."""
        server = await self.start_listening()
        try:
            await server.serve_forever()
        finally:
            await self.stop()

    async def stop(self):
        """Close the listener and every open session."""
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        await self.hub.shutdown()
