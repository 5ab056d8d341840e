"""
Package initializer for the realtime chat backend.

The project wires a Django REST API (token issuance, user directory,
conversation history) and a Channels websocket endpoint for live
messaging, presence and typing indicators.
"""
