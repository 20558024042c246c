"""
Integración con Unleashed Software (inventario).

Este paquete está diseñado para ejecutarse como job (cron / task scheduler).
"""
from inventory_sync.infrastructure.external.unleashed.client import (
    UnleashedClient,
    UnleashedCredentials,
    sign_query,
)
from inventory_sync.infrastructure.external.unleashed.fetcher import PaginatedFetcher

__all__ = ["UnleashedClient", "UnleashedCredentials", "PaginatedFetcher", "sign_query"]
