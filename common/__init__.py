"""Shared project plumbing (websocket authentication middleware)."""
