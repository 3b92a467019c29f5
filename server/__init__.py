"""
Server package for the WebSocket broadcast chat.

This package contains all server-side functionality including:
- Connection listening and session wiring
- Chat broadcast, history replay and color assignment
- Configuration and utilities
"""
