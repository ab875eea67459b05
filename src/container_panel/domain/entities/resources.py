"""Normalized container, image and volume records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from container_panel.domain.value_objects.formatting import NOT_AVAILABLE


class ContainerStatus(Enum):
    """Container lifecycle status exposed to clients."""
    RUNNING = "running"
    STOPPED = "stopped"
    EXITED = "exited"
    CREATED = "created"
    PAUSED = "paused"
    RESTARTING = "restarting"

    @classmethod
    def from_engine_state(cls, state: str) -> ContainerStatus:
        """Map a raw engine state string onto a status.

        Matching is case-insensitive but otherwise exact; anything else,
        including "dead", "removing" and padded strings, is STOPPED.

        Args:
            state: Engine ``State`` value.

        Returns:
            Normalized status.
        """
        lowered = state.lower()
        if lowered in _ENGINE_STATES:
            return cls(lowered)
        return cls.STOPPED


_ENGINE_STATES = frozenset({"running", "exited", "created", "paused", "restarting"})


@dataclass(frozen=True)
class VolumeUser:
    """A container that mounts a given volume."""
    id: str
    name: str
    state: ContainerStatus


@dataclass
class Container:
    """Container entity."""
    id: str
    name: str
    image: str
    status: ContainerStatus
    ports: list[str] = field(default_factory=list)
    created: str = ""  # ISO-8601
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class Image:
    """Image entity."""
    id: str
    repository: str
    tag: str
    size: str  # Human-readable
    created: str  # ISO-8601
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class Volume:
    """Volume entity."""
    id: str
    name: str
    driver: str
    mountpoint: str
    used_by: list[VolumeUser] = field(default_factory=list)
    size: str = NOT_AVAILABLE
    created_at: str = NOT_AVAILABLE
    labels: dict[str, str] = field(default_factory=dict)
