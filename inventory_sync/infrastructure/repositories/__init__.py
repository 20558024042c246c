"""
Repositorios de persistencia local.
"""
from inventory_sync.infrastructure.repositories.record_repository import LocalRecordRepository
from inventory_sync.infrastructure.repositories.watermark_repository import (
    WatermarkRepository,
    max_external_last_edited,
)

__all__ = ["LocalRecordRepository", "WatermarkRepository", "max_external_last_edited"]
