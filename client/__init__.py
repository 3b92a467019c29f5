"""
Client package for the WebSocket broadcast chat.

This package contains the console client used to talk to the chat server.
"""
