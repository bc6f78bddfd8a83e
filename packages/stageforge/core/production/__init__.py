"""Remote production service boundary.

The orchestration core only talks to the ProductionClient protocol. The OBS
implementation lives in ``impl_obs`` and is imported on demand by the factory.
"""

from stageforge.core.production.factory import create_production_client
from stageforge.core.production.impl_memory import InMemoryProductionClient
from stageforge.core.production.models import (
    Alignment,
    BindingTransform,
    BoundsMode,
    SourceBinding,
    SourceKind,
)
from stageforge.core.production.protocols import ProductionClient

__all__ = [
    # Protocol
    "ProductionClient",
    # Implementations
    "InMemoryProductionClient",
    "create_production_client",
    # Models
    "Alignment",
    "BindingTransform",
    "BoundsMode",
    "SourceBinding",
    "SourceKind",
]
