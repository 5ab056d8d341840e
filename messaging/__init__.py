"""Messaging app initialization.

The messaging app owns the live side of direct messaging: the
connection registry, presence transitions, message dispatch and the
typing-indicator relay, plus the conversation history endpoint.
"""
