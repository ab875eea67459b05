"""Outbound adapters for the container panel.

Provides the httpx-based gateway to the container engine's Unix socket.
"""

from container_panel.adapters.outbound.engine_gateway import DockerEngineGateway

__all__ = ["DockerEngineGateway"]
