"""Production client factory for backend dispatch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stageforge.core.events import EventSink
from stageforge.core.production.impl_memory import InMemoryProductionClient
from stageforge.core.production.protocols import ProductionClient

if TYPE_CHECKING:
    from stageforge.core.config.models import AppConfig


def create_production_client(app_config: AppConfig, events: EventSink) -> ProductionClient:
    """Create the configured production client, wired to the event sink."""
    backend = app_config.production.backend

    if backend == "obs":
        from stageforge.core.production.impl_obs import OBSProductionClient

        return OBSProductionClient(events, timeout_s=app_config.production.timeout_s)

    if backend == "memory":
        return InMemoryProductionClient(events)

    raise ValueError(f"Unknown production backend configured: {backend}")
