"""Configuration management for the container panel."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """Container engine connection configuration."""

    socket_path: str = Field(default="/var/run/docker.sock", description="Engine Unix socket path")
    api_version: str = Field(default="v1.41", description="Engine API version prefix")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Per-request timeout")

    @property
    def base_url(self) -> str:
        """Base URL used for requests routed over the socket."""
        return f"http://localhost/{self.api_version}"


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, ge=1, le=65535, description="HTTP API port")
    metrics_port: int = Field(default=9102, ge=1, le=65535, description="Prometheus metrics port")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    metrics_enabled: bool = Field(default=False)
    otel_endpoint: str | None = Field(default=None)
    otel_service_name: str = Field(default="container_panel")


class Config(BaseSettings):
    """Main configuration for the container panel."""

    model_config = SettingsConfigDict(
        env_prefix="CONTAINER_PANEL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Load configuration from the environment once per process."""
    return Config()
