"""Domain entities."""

from container_panel.domain.entities.resources import (
    Container,
    ContainerStatus,
    Image,
    Volume,
    VolumeUser,
)

__all__ = [
    "Container",
    "ContainerStatus",
    "Image",
    "Volume",
    "VolumeUser",
]
