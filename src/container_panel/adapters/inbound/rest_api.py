"""FastAPI REST adapter for the Container Panel.

Serves the panel's public HTTP surface under ``/api``. Every failure on a
resource endpoint collapses to HTTP 500 with a fixed message for that
endpoint; the underlying cause is only logged.

Endpoints:
    GET  /api/containers             - List containers
    POST /api/containers/{id}/start  - Request a container start
    POST /api/containers/{id}/stop   - Request a container stop
    GET  /api/images                 - List images
    GET  /api/volumes                - List volumes with their users
    GET  /health                     - Health check

Usage:
    from container_panel.adapters.inbound.rest_api import create_app

    app = create_app()
    # Run with: uvicorn module:app --host 0.0.0.0 --port 3001
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import APIRouter, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from container_panel import __version__
from container_panel.application.panel_service import PanelService
from container_panel.bootstrap import build_container
from container_panel.domain.entities.resources import Container, Image, Volume
from container_panel.infrastructure.config import Config, get_config
from container_panel.infrastructure.logging import get_logger, setup_logging
from container_panel.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from container_panel.infrastructure.tracing import setup_tracing
from container_panel.ports.inbound import PanelServicePort
from container_panel.ports.outbound import EngineError

logger = get_logger(__name__)


# Pydantic models for response serialization


class ContainerResponse(BaseModel):
    """Container record."""

    id: str
    name: str
    image: str
    status: str
    ports: list[str]
    created: str
    labels: dict[str, str]


class ImageResponse(BaseModel):
    """Image record."""

    id: str
    repository: str
    tag: str
    size: str
    created: str
    labels: dict[str, str]


class VolumeUserResponse(BaseModel):
    """Container using a volume."""

    id: str
    name: str
    state: str


class VolumeResponse(BaseModel):
    """Volume record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    driver: str
    mountpoint: str
    used_by: list[VolumeUserResponse] = Field(alias="usedBy")
    size: str
    created_at: str = Field(alias="createdAt")
    labels: dict[str, str]


class ActionResponse(BaseModel):
    """Container control result."""

    success: bool
    message: str


class ErrorResponse(BaseModel):
    """Collapsed error body."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = __version__


_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _container_response(container: Container) -> ContainerResponse:
    return ContainerResponse(
        id=container.id,
        name=container.name,
        image=container.image,
        status=container.status.value,
        ports=container.ports,
        created=container.created,
        labels=container.labels,
    )


def _image_response(image: Image) -> ImageResponse:
    return ImageResponse(
        id=image.id,
        repository=image.repository,
        tag=image.tag,
        size=image.size,
        created=image.created,
        labels=image.labels,
    )


def _volume_response(volume: Volume) -> VolumeResponse:
    return VolumeResponse(
        id=volume.id,
        name=volume.name,
        driver=volume.driver,
        mountpoint=volume.mountpoint,
        used_by=[
            VolumeUserResponse(id=user.id, name=user.name, state=user.state.value)
            for user in volume.used_by
        ],
        size=volume.size,
        created_at=volume.created_at,
        labels=volume.labels,
    )


def create_app(
    service: PanelServicePort | None = None,
    config: Config | None = None,
    metrics: MetricsRegistry | None = None,
) -> FastAPI:
    """Create FastAPI application with Container Panel endpoints.

    Args:
        service: Panel service. When omitted one is built from config and
            its engine client is closed on application shutdown.
        config: Configuration; loaded from the environment when omitted.
        metrics: Metrics registry; defaults to the process registry.

    Returns:
        Configured FastAPI application.
    """
    config = config or get_config()
    metrics = metrics or get_metrics()

    owned: PanelService | None = None
    if service is None:
        owned = build_container(config, metrics=metrics).resolve(PanelService)
        service = owned
    panel = service

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "panel_started",
            socket_path=config.engine.socket_path,
            api_version=config.engine.api_version,
        )
        try:
            yield
        finally:
            if owned is not None:
                await owned.gateway.aclose()
            logger.info("panel_stopped")

    app = FastAPI(
        title="Container Panel API",
        description="Read/control panel relaying to the local container engine",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def failure(endpoint: str, message: str, error: Exception, **context: Any) -> JSONResponse:
        metrics.api_errors_total.labels(endpoint=endpoint).inc()
        logger.error(
            "request_failed",
            endpoint=endpoint,
            error=str(error),
            error_kind=type(error).__name__,
            exc_info=not isinstance(error, EngineError),
            **context,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=message).model_dump(),
        )

    # Health endpoints
    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check panel health status."""
        return HealthResponse(status="healthy")

    router = APIRouter(prefix="/api")

    # Container endpoints
    @router.get(
        "/containers",
        response_model=list[ContainerResponse],
        responses=_ERROR_RESPONSES,
        tags=["Containers"],
    )
    async def list_containers():
        """List all containers."""
        try:
            containers = await panel.list_containers()
            body = [_container_response(c) for c in containers]
        except Exception as e:
            return failure("list_containers", "Failed to list containers", e)
        metrics.resources_listed.labels(kind="containers").observe(len(body))
        return body

    @router.post(
        "/containers/{container_id}/start",
        response_model=ActionResponse,
        responses=_ERROR_RESPONSES,
        tags=["Containers"],
    )
    async def start_container(container_id: str):
        """Request a container start."""
        try:
            result = await panel.start_container(container_id)
            body = ActionResponse(success=result.success, message=result.message)
        except Exception as e:
            return failure("start_container", "Failed to start container", e, container_id=container_id)
        return body

    @router.post(
        "/containers/{container_id}/stop",
        response_model=ActionResponse,
        responses=_ERROR_RESPONSES,
        tags=["Containers"],
    )
    async def stop_container(container_id: str):
        """Request a container stop."""
        try:
            result = await panel.stop_container(container_id)
            body = ActionResponse(success=result.success, message=result.message)
        except Exception as e:
            return failure("stop_container", "Failed to stop container", e, container_id=container_id)
        return body

    # Image endpoints
    @router.get(
        "/images",
        response_model=list[ImageResponse],
        responses=_ERROR_RESPONSES,
        tags=["Images"],
    )
    async def list_images():
        """List all local images."""
        try:
            images = await panel.list_images()
            body = [_image_response(i) for i in images]
        except Exception as e:
            return failure("list_images", "Failed to list images", e)
        metrics.resources_listed.labels(kind="images").observe(len(body))
        return body

    # Volume endpoints
    @router.get(
        "/volumes",
        response_model=list[VolumeResponse],
        responses=_ERROR_RESPONSES,
        tags=["Volumes"],
    )
    async def list_volumes():
        """List all volumes and the containers using them."""
        try:
            volumes = await panel.list_volumes()
            body = [_volume_response(v) for v in volumes]
        except Exception as e:
            return failure("list_volumes", "Failed to list volumes", e)
        metrics.resources_listed.labels(kind="volumes").observe(len(body))
        return body

    app.include_router(router)
    return app


def run_server(config: Config | None = None) -> None:
    """Run the REST API server.

    Sets up logging, tracing and metrics from config, then serves the
    app with uvicorn.

    Args:
        config: Configuration; loaded from the environment when omitted.
    """
    import uvicorn

    config = config or get_config()
    observability = config.observability
    setup_logging(observability.log_level, observability.log_format)
    if observability.otel_endpoint:
        setup_tracing(observability.otel_service_name, observability.otel_endpoint)
    metrics = setup_metrics(config.server.metrics_port) if observability.metrics_enabled else None

    app = create_app(config=config, metrics=metrics)
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


def main() -> None:
    """Console entry point."""
    run_server()


if __name__ == "__main__":
    main()
