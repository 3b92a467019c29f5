"""
Chat module for client-side messaging functionality.

Handles:
- Sending the user name and chat messages
- Rendering history and broadcast messages
- Dropping undecodable server frames
"""
