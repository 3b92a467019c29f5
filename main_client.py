#!/usr/bin/env python3
"""
WebSocket Chat Client - Main Entry Point

Console client for the broadcast chat server.

Usage:
    python main_client.py [--username NAME] [--server-ip HOST] [--port PORT]
"""

import argparse
import asyncio
import sys

from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import DEFAULT_HOST, DEFAULT_PORT


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description='WebSocket Chat Client')
    parser.add_argument('--username', type=str, default=None,
                        help='Name to join with (default: first line typed)')
    parser.add_argument('--server-ip', type=str, default=DEFAULT_HOST,
                        help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')

    args = parser.parse_args(argv)

    config = ClientConfig(args.server_ip, args.port, args.username)
    client = ChatClient(config)

    try:
        asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
    except Exception as e:
        logger.log_error("client", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
