"""Domain services."""

from container_panel.domain.services.normalizer import Normalizer

__all__ = ["Normalizer"]
