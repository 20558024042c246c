"""
Casos de uso de la aplicacion.
"""
from .sync_job import ClearAbsent, SyncJob, SyncJobConfig, SyncRunReport
from .unleashed_jobs import (
    JOB_ORDER,
    OrderSyncJob,
    ProductCategorySyncJob,
    ProductSyncJob,
    build_job,
)

__all__ = [
    "ClearAbsent",
    "SyncJob",
    "SyncJobConfig",
    "SyncRunReport",
    "JOB_ORDER",
    "OrderSyncJob",
    "ProductCategorySyncJob",
    "ProductSyncJob",
    "build_job",
]
