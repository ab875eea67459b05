"""Application layer - request pipelines over the engine gateway."""

from container_panel.application.panel_service import PanelService

__all__ = ["PanelService"]
