"""Minecraft status client, server configuration, terrain generation and chunk scheduling."""

__version__ = "0.1.0"