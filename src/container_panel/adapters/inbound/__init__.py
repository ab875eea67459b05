"""Inbound adapters for the container panel.

Provides the REST API adapter serving the ``/api`` surface.
"""

from container_panel.adapters.inbound.rest_api import create_app, run_server

__all__ = ["create_app", "run_server"]
