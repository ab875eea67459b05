"""Normalizer service.

Turns raw engine records into the public container, image and volume
records. Every method is pure; output depends only on the arguments.
"""

from __future__ import annotations

from typing import Iterable

from container_panel.domain.entities.resources import (
    Container,
    ContainerStatus,
    Image,
    Volume,
    VolumeUser,
)
from container_panel.domain.value_objects.formatting import (
    NOT_AVAILABLE,
    epoch_to_iso,
    format_bytes,
    format_port,
)
from container_panel.domain.value_objects.identifiers import (
    display_name,
    split_repo_tag,
    strip_digest_prefix,
)
from container_panel.ports.outbound import (
    MalformedUpstreamData,
    RawContainer,
    RawImage,
    RawVolume,
)


class Normalizer:
    """Maps engine payloads onto stable, UI-friendly records.

    Handles:
    - Name stripping and status mapping for containers
    - Digest stripping and repo/tag splitting for images
    - Size formatting and the volume used-by join
    """

    def normalize_container(self, raw: RawContainer) -> Container:
        """Normalize a container summary.

        Args:
            raw: Raw container record.

        Returns:
            Container.

        Raises:
            MalformedUpstreamData: If the record has no names.
        """
        return Container(
            id=raw.id,
            name=self._container_name(raw),
            image=raw.image,
            status=ContainerStatus.from_engine_state(raw.state),
            ports=[
                format_port(p.private_port, p.type, public_port=p.public_port, ip=p.ip)
                for p in raw.ports
            ],
            created=self._timestamp(raw.created, raw.id),
            labels=dict(raw.labels),
        )

    def normalize_image(self, raw: RawImage) -> Image:
        """Normalize an image summary.

        Args:
            raw: Raw image record.

        Returns:
            Image.
        """
        repository, tag = split_repo_tag(raw.repo_tags)
        return Image(
            id=strip_digest_prefix(raw.id),
            repository=repository,
            tag=tag,
            size=self._size(raw.size, raw.id),
            created=self._timestamp(raw.created, raw.id),
            labels=dict(raw.labels),
        )

    def normalize_volume(self, raw: RawVolume, containers: Iterable[RawContainer]) -> Volume:
        """Normalize a volume and resolve which containers use it.

        Args:
            raw: Raw volume record.
            containers: Every container known to the engine.

        Returns:
            Volume.
        """
        size = NOT_AVAILABLE
        # The engine reports -1 when usage was not computed.
        if raw.usage_data is not None and raw.usage_data.size >= 0:
            size = self._size(raw.usage_data.size, raw.name)

        return Volume(
            id=raw.name,
            name=raw.name,
            driver=raw.driver,
            mountpoint=raw.mountpoint,
            used_by=self.used_by(raw, containers),
            size=size,
            created_at=raw.created_at or NOT_AVAILABLE,
            labels=dict(raw.labels),
        )

    def used_by(self, volume: RawVolume, containers: Iterable[RawContainer]) -> list[VolumeUser]:
        """Find containers that mount a volume.

        A container uses the volume when any of its mounts names the
        volume or has the volume's mountpoint as its source. Each
        container is listed once, in engine order.

        Args:
            volume: Raw volume record.
            containers: Raw container records.

        Returns:
            Users of the volume.
        """
        users = []
        for container in containers:
            if any(
                mount.name == volume.name or mount.source == volume.mountpoint
                for mount in container.mounts
            ):
                users.append(
                    VolumeUser(
                        id=container.id,
                        name=self._container_name(container),
                        state=ContainerStatus.from_engine_state(container.state),
                    )
                )
        return users

    @staticmethod
    def _container_name(raw: RawContainer) -> str:
        if not raw.names:
            raise MalformedUpstreamData(f"container {raw.id} has no names")
        return display_name(raw.names[0])

    @staticmethod
    def _timestamp(epoch_seconds: int, record_id: str) -> str:
        try:
            return epoch_to_iso(epoch_seconds)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise MalformedUpstreamData(
                f"{record_id}: bad creation time {epoch_seconds!r}"
            ) from e

    @staticmethod
    def _size(size: int, record_id: str) -> str:
        try:
            return format_bytes(size)
        except (TypeError, ValueError) as e:
            raise MalformedUpstreamData(f"{record_id}: bad size {size!r}") from e
