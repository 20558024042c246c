"""
Entidades del dominio de sincronización.

Se mantienen libres de I/O para poder testearlas fácilmente.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

# Registro remoto tal como lo devuelve la API (campo -> valor crudo)
RemoteRecord = Dict[str, Any]


@dataclass(frozen=True)
class Watermark:
    """
    Punto hasta el que un job ya incorporó cambios remotos.

    external_last_edited es aware y está expresado en la zona en que se registró.
    """

    job_name: str
    external_key_name: str
    external_last_edited: datetime


@dataclass(frozen=True)
class QueryFilter:
    """Filtro del fetch. El fetcher lo trata como opaco."""

    modified_since: Optional[str] = None
    source_id: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.modified_since:
            params["modifiedSince"] = self.modified_since
        if self.source_id:
            params["sourceId"] = self.source_id
        return params


@dataclass(frozen=True)
class RecordDiff:
    """
    Cambio (aplicado o previsto) sobre un registro local.

    changes: campo -> (valor anterior, valor nuevo)
    """

    key: str
    action: str  # "created" | "updated" | "cleared"
    changes: Dict[str, Tuple[Any, Any]]


@dataclass(frozen=True)
class RecordError:
    """Registro remoto que no pudo reconciliarse."""

    key: str
    error_code: str
    message: str


@dataclass
class ReconciliationResult:
    """
    Resultado de una pasada de reconciliación.
    Se construye por corrida; lo consumen el log y la notificación.
    """

    created_count: int = 0
    updated_count: int = 0
    cleared_count: int = 0
    skipped_count: int = 0
    diffs: List[RecordDiff] = field(default_factory=list)
    errors: List[RecordError] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Cantidad de registros locales creados, actualizados o limpiados."""
        return self.created_count + self.updated_count + self.cleared_count

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def merge(self, other: "ReconciliationResult") -> "ReconciliationResult":
        """Combina dos resultados (p.ej. clear-absent + update) en uno nuevo."""
        return ReconciliationResult(
            created_count=self.created_count + other.created_count,
            updated_count=self.updated_count + other.updated_count,
            cleared_count=self.cleared_count + other.cleared_count,
            skipped_count=self.skipped_count + other.skipped_count,
            diffs=[*self.diffs, *other.diffs],
            errors=[*self.errors, *other.errors],
        )
