"""
Servicios de aplicacion.

Contiene la logica de sincronizacion reutilizable por todos los jobs.
"""
from inventory_sync.application.services.duplicate_validator import (
    DuplicateCheck,
    check_unique,
    find_duplicates,
)
from inventory_sync.application.services.reconciliation import NaturalKey, ReconciliationEngine
from inventory_sync.application.services.report_formatter import format_report
from inventory_sync.application.services.transforms import (
    UNCHANGED,
    FieldMapping,
    RecordHandle,
    raw2url,
    title_with_url_segment,
    to_float,
)

__all__ = [
    # Validacion
    "DuplicateCheck",
    "check_unique",
    "find_duplicates",
    # Reconciliacion
    "NaturalKey",
    "ReconciliationEngine",
    "format_report",
    # Transforms
    "UNCHANGED",
    "FieldMapping",
    "RecordHandle",
    "raw2url",
    "title_with_url_segment",
    "to_float",
]
