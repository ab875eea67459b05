"""Panel service.

Runs one request pipeline per call: fetch raw records from the engine
gateway, then normalize them. Volumes need the container list as well,
so both collections are fetched concurrently and joined before
normalizing. Errors propagate unchanged; there is no partial result.
"""

from __future__ import annotations

import asyncio

from container_panel.domain.entities.resources import Container, Image, Volume
from container_panel.domain.services.normalizer import Normalizer
from container_panel.infrastructure.logging import get_logger
from container_panel.ports.inbound import ActionResult
from container_panel.ports.outbound import EngineGatewayPort

logger = get_logger(__name__)


class PanelService:
    """Lists engine resources and relays container control requests."""

    def __init__(self, gateway: EngineGatewayPort, normalizer: Normalizer | None = None) -> None:
        """Initialize the service.

        Args:
            gateway: Engine gateway, shared for the process lifetime.
            normalizer: Normalizer; a default one is built when omitted.
        """
        self._gateway = gateway
        self._normalizer = normalizer or Normalizer()

    @property
    def gateway(self) -> EngineGatewayPort:
        return self._gateway

    async def list_containers(self) -> list[Container]:
        raw = await self._gateway.list_containers_raw()
        containers = [self._normalizer.normalize_container(c) for c in raw]
        logger.debug("containers_listed", count=len(containers))
        return containers

    async def start_container(self, container_id: str) -> ActionResult:
        await self._gateway.start_container(container_id)
        return ActionResult(success=True, message="Container started successfully")

    async def stop_container(self, container_id: str) -> ActionResult:
        await self._gateway.stop_container(container_id)
        return ActionResult(success=True, message="Container stopped successfully")

    async def list_images(self) -> list[Image]:
        raw = await self._gateway.list_images_raw()
        images = [self._normalizer.normalize_image(i) for i in raw]
        logger.debug("images_listed", count=len(images))
        return images

    async def list_volumes(self) -> list[Volume]:
        raw_volumes, raw_containers = await asyncio.gather(
            self._gateway.list_volumes_raw(),
            self._gateway.list_containers_raw(),
        )
        volumes = [self._normalizer.normalize_volume(v, raw_containers) for v in raw_volumes]
        logger.debug("volumes_listed", count=len(volumes), containers=len(raw_containers))
        return volumes
