"""
Chat module for server-side messaging functionality.

Handles:
- Session naming and lifecycle
- Message broadcasting
- Message history management
- Display color assignment
"""
