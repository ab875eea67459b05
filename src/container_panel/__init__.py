"""
Container Panel - read/control panel for a local container engine

Lists containers, images and volumes and starts/stops containers by relaying
calls to the engine API over its Unix socket, normalizing the engine's
payloads into stable records for a browser UI.
"""

__version__ = "0.1.0"
