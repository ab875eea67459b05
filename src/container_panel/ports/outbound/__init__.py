"""Outbound ports - Container engine interface for the panel.

Outbound ports define the records the container engine hands back, the
protocol the engine gateway implements, and the error kinds it raises.
Raw records mirror the engine's JSON; field names are translated but no
values are derived here.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol


# =============================================================================
# Errors
# =============================================================================


class EngineError(Exception):
    """Base class for failures talking to the container engine."""

    pass


class UpstreamUnavailable(EngineError):
    """Raised when the engine socket cannot be reached."""

    def __init__(self, socket_path: str, reason: str) -> None:
        self.socket_path = socket_path
        self.reason = reason
        super().__init__(f"Container engine unavailable at {socket_path}: {reason}")


class UpstreamError(EngineError):
    """Raised when the engine answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, container_id: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.container_id = container_id
        prefix = f"container {container_id}: " if container_id else ""
        super().__init__(f"{prefix}engine returned {status_code}: {message}")


class UpstreamTimeout(EngineError):
    """Raised when an engine request exceeds the configured timeout."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{operation} timed out after {timeout_seconds}s")


class MalformedUpstreamData(EngineError):
    """Raised when an engine payload does not have the expected shape."""

    pass


# =============================================================================
# Raw engine records
# =============================================================================


def _require(payload: Any, key: str, kind: str, expected: type | None = None) -> Any:
    if not isinstance(payload, dict):
        raise MalformedUpstreamData(f"{kind} record is not an object: {payload!r}")
    try:
        value = payload[key]
    except KeyError:
        raise MalformedUpstreamData(f"{kind} record missing {key!r}") from None
    if expected is not None and not isinstance(value, expected):
        raise MalformedUpstreamData(
            f"{kind} field {key!r} is {type(value).__name__}, expected {expected.__name__}"
        )
    return value


def _optional_list(payload: dict[str, Any], key: str, kind: str) -> list[Any]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedUpstreamData(f"{kind} field {key!r} is not a list")
    return value


def _strings(values: list[Any], key: str, kind: str) -> list[str]:
    if not all(isinstance(v, str) for v in values):
        raise MalformedUpstreamData(f"{kind} field {key!r} holds non-string entries")
    return values


def _optional_map(payload: dict[str, Any], key: str, kind: str) -> dict[str, str]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedUpstreamData(f"{kind} field {key!r} is not an object")
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        raise MalformedUpstreamData(f"{kind} field {key!r} holds non-string values")
    return dict(value)


@dataclass
class RawPort:
    """Port binding as reported in a container summary."""
    private_port: int
    type: str
    public_port: Optional[int] = None
    ip: Optional[str] = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RawPort:
        return cls(
            private_port=_require(payload, "PrivatePort", "port", int),
            type=_require(payload, "Type", "port", str),
            public_port=payload.get("PublicPort"),
            ip=payload.get("IP"),
        )


@dataclass
class RawMount:
    """Mount point as reported in a container summary."""
    type: str = ""
    name: Optional[str] = None  # Only set for named volumes
    source: Optional[str] = None
    destination: str = ""

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RawMount:
        if not isinstance(payload, dict):
            raise MalformedUpstreamData(f"mount record is not an object: {payload!r}")
        return cls(
            type=payload.get("Type", ""),
            name=payload.get("Name"),
            source=payload.get("Source"),
            destination=payload.get("Destination", ""),
        )


@dataclass
class RawContainer:
    """Container summary from ``GET /containers/json``."""
    id: str
    names: list[str]
    image: str
    state: str
    created: int  # Epoch seconds
    ports: list[RawPort] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    mounts: list[RawMount] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RawContainer:
        names = _require(payload, "Names", "container", list)
        return cls(
            id=_require(payload, "Id", "container", str),
            names=_strings(names, "Names", "container"),
            image=_require(payload, "Image", "container", str),
            state=_require(payload, "State", "container", str),
            created=_require(payload, "Created", "container", int),
            ports=[RawPort.from_api(p) for p in _optional_list(payload, "Ports", "container")],
            labels=_optional_map(payload, "Labels", "container"),
            mounts=[RawMount.from_api(m) for m in _optional_list(payload, "Mounts", "container")],
        )


@dataclass
class RawImage:
    """Image summary from ``GET /images/json``."""
    id: str  # Content-addressed, e.g. "sha256:..."
    size: int  # Bytes
    created: int  # Epoch seconds
    repo_tags: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RawImage:
        return cls(
            id=_require(payload, "Id", "image", str),
            size=_require(payload, "Size", "image", int),
            created=_require(payload, "Created", "image", int),
            repo_tags=_strings(_optional_list(payload, "RepoTags", "image"), "RepoTags", "image"),
            labels=_optional_map(payload, "Labels", "image"),
        )


@dataclass
class RawUsageData:
    """Volume usage block; only present when the engine computed it."""
    size: int  # Bytes, -1 when not computed
    ref_count: int

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RawUsageData:
        return cls(
            size=_require(payload, "Size", "usage data", int),
            ref_count=_require(payload, "RefCount", "usage data", int),
        )


@dataclass
class RawVolume:
    """Volume record from ``GET /volumes``."""
    name: str
    driver: str
    mountpoint: str
    usage_data: Optional[RawUsageData] = None
    created_at: Optional[str] = None
    labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RawVolume:
        name = _require(payload, "Name", "volume", str)
        usage = payload.get("UsageData")
        created_at = payload.get("CreatedAt")
        if created_at is not None and not isinstance(created_at, str):
            raise MalformedUpstreamData(f"volume {name}: 'CreatedAt' is not a string")
        return cls(
            name=name,
            driver=_require(payload, "Driver", "volume", str),
            mountpoint=_require(payload, "Mountpoint", "volume", str),
            usage_data=RawUsageData.from_api(usage) if usage is not None else None,
            created_at=created_at or None,
            labels=_optional_map(payload, "Labels", "volume"),
        )


# =============================================================================
# Engine Gateway Port
# =============================================================================


class EngineGatewayPort(Protocol):
    """Protocol for the container engine's local HTTP API.

    Every call is an independent exchange over a pooled client; no
    call is retried.

    Concurrency:
        Implementations must allow concurrent in-flight calls.

    Raises (all methods):
        UpstreamUnavailable: If the engine socket cannot be reached.
        UpstreamError: If the engine responds with a non-2xx status.
        UpstreamTimeout: If a request exceeds the configured timeout.
        MalformedUpstreamData: If a response body has an unexpected shape.
    """

    @abstractmethod
    async def list_containers_raw(self) -> list[RawContainer]:
        """List all containers, running or not."""
        ...

    @abstractmethod
    async def list_images_raw(self) -> list[RawImage]:
        """List all images present locally."""
        ...

    @abstractmethod
    async def list_volumes_raw(self) -> list[RawVolume]:
        """List all volumes, ignoring engine warnings."""
        ...

    @abstractmethod
    async def start_container(self, container_id: str) -> None:
        """Ask the engine to start a container.

        Returns once the engine accepts the request; the container may
        not be running yet.
        """
        ...

    @abstractmethod
    async def stop_container(self, container_id: str) -> None:
        """Ask the engine to stop a container.

        Returns once the engine accepts the request.
        """
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release the pooled connection."""
        ...


__all__ = [
    # Errors
    "EngineError",
    "UpstreamUnavailable",
    "UpstreamError",
    "UpstreamTimeout",
    "MalformedUpstreamData",
    # Raw records
    "RawPort",
    "RawMount",
    "RawContainer",
    "RawImage",
    "RawUsageData",
    "RawVolume",
    # Port
    "EngineGatewayPort",
]
