"""Inbound ports - API contracts for the container panel.

Inbound ports define the interface the HTTP layer uses to list engine
resources and control containers.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol

from container_panel.domain.entities.resources import Container, Image, Volume


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a container control request."""

    success: bool
    message: str


class PanelServicePort(Protocol):
    """Protocol for panel operations.

    Each call recomputes its result from the engine; nothing is cached
    between calls.

    Raises (all methods):
        EngineError: Any engine or payload failure, unrecovered.

    Example:
        containers = await service.list_containers()
        await service.stop_container(containers[0].id)
    """

    @abstractmethod
    async def list_containers(self) -> list[Container]:
        """List all containers."""
        ...

    @abstractmethod
    async def start_container(self, container_id: str) -> ActionResult:
        """Request a container start.

        Args:
            container_id: Container to start.
        """
        ...

    @abstractmethod
    async def stop_container(self, container_id: str) -> ActionResult:
        """Request a container stop.

        Args:
            container_id: Container to stop.
        """
        ...

    @abstractmethod
    async def list_images(self) -> list[Image]:
        """List all local images."""
        ...

    @abstractmethod
    async def list_volumes(self) -> list[Volume]:
        """List all volumes with their users."""
        ...


__all__ = ["ActionResult", "PanelServicePort"]
