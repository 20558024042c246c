"""
Excepciones del sincronizador.
"""
from inventory_sync.shared.exceptions.base import AppException
from inventory_sync.shared.exceptions.sync import (
    SyncException,
    SyncConfigError,
    TransportError,
    UnexpectedStatus,
    DuplicateKeyError,
    UnknownStatusCode,
    NotificationError,
)

__all__ = [
    "AppException",
    "SyncException",
    "SyncConfigError",
    "TransportError",
    "UnexpectedStatus",
    "DuplicateKeyError",
    "UnknownStatusCode",
    "NotificationError",
]
