#!/usr/bin/env python3
"""
WebSocket Chat Server - Main Entry Point

Starts the broadcast chat server: clients connect over WebSocket, send their
name as the first frame and chat messages afterwards.

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           WebSocket port (default: 1337)
    --history-size N      Messages replayed to new sessions (default: 100)
    --send-timeout SECS   Per-frame write timeout (default: 5)
    --log-dir DIR         Directory for the chat log (default: logs)
    --log-level LEVEL     Console log level (default: INFO)
"""

import argparse
import asyncio
import logging
import sys

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_CHAT_HISTORY, SEND_TIMEOUT, LOG_DIR
)
from server.main_server import ChatWebSocketServer
from server.utils.config import ServerConfig
from server.utils.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='WebSocket Chat Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'WebSocket port (default: {DEFAULT_PORT})')
    parser.add_argument('--history-size', type=int, default=MAX_CHAT_HISTORY,
                        help=f'Messages replayed to new sessions (default: {MAX_CHAT_HISTORY})')
    parser.add_argument('--send-timeout', type=float, default=SEND_TIMEOUT,
                        help=f'Seconds allowed per outbound frame (default: {SEND_TIMEOUT})')
    parser.add_argument('--log-dir', type=str, default=LOG_DIR,
                        help=f'Directory for the chat log (default: {LOG_DIR})')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Console log level (default: INFO)')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        history_size=args.history_size,
        send_timeout=args.send_timeout,
        logs_dir=args.log_dir
    )
    logger.configure(log_level=getattr(logging, args.log_level), **config.get_log_settings())

    server = ChatWebSocketServer(config)
    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        # Bind failures are fatal
        logger.error(f"Server failed to start on {args.host}:{args.port}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
