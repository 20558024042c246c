"""
Entidades del dominio.
"""
from inventory_sync.domain.entities.sync_models import (
    QueryFilter,
    ReconciliationResult,
    RecordDiff,
    RecordError,
    RemoteRecord,
    Watermark,
)

__all__ = [
    "QueryFilter",
    "ReconciliationResult",
    "RecordDiff",
    "RecordError",
    "RemoteRecord",
    "Watermark",
]
