"""
Motor de reconciliación: empareja registros remotos con registros locales.

Diseño (resumen):
- Emparejamiento por clave natural (con etiqueta de respaldo opcional)
- Transforms aplicados sobre un RecordHandle, sin tocar el ORM
- Solo se escribe si algún valor difiere (idempotente)
- dry_run calcula conteos y diffs pero no persiste nada
- clear_absent desvincula (no borra) registros que Unleashed ya no reporta
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from loguru import logger

from inventory_sync.application.services.transforms import UNCHANGED, FieldMapping, RecordHandle
from inventory_sync.domain.entities.sync_models import (
    ReconciliationResult,
    RecordDiff,
    RecordError,
    RemoteRecord,
)
from inventory_sync.infrastructure.repositories.record_repository import LocalRecordRepository
from inventory_sync.shared.exceptions.sync import UnknownStatusCode


@dataclass(frozen=True)
class NaturalKey:
    """
    Clave natural remoto -> local.

    Si el identificador no encuentra registro, se intenta con el par de
    respaldo (p.ej. Guid -> guid, y si no GroupName -> title).
    """

    remote_field: str
    local_field: str
    fallback_remote_field: Optional[str] = None
    fallback_local_field: Optional[str] = None

    def key_of(self, record: RemoteRecord) -> str:
        value = record.get(self.remote_field)
        if value in (None, "") and self.fallback_remote_field:
            value = record.get(self.fallback_remote_field)
        return "" if value is None else str(value)


class MissingRemoteField(Exception):
    """Falta un campo requerido en el registro remoto."""


class ReconciliationEngine:
    """
    Aplica un lote remoto sobre un modelo local.
    No abre transacciones: el caller decide commit/rollback.
    """

    def __init__(self, repository: LocalRecordRepository):
        self.repository = repository

    def _find_local(self, record: RemoteRecord, natural_key: NaturalKey) -> Optional[Any]:
        local = self.repository.find_by(natural_key.local_field, record.get(natural_key.remote_field))
        if local is None and natural_key.fallback_remote_field and natural_key.fallback_local_field:
            local = self.repository.find_by(
                natural_key.fallback_local_field, record.get(natural_key.fallback_remote_field)
            )
        return local

    @staticmethod
    def _stage(record: RemoteRecord, mappings: Sequence[FieldMapping], handle: RecordHandle) -> None:
        for mapping in mappings:
            if mapping.remote_field not in record:
                if mapping.required:
                    raise MissingRemoteField(mapping.remote_field)
                continue
            value = mapping.apply(record[mapping.remote_field], handle)
            if value is UNCHANGED:
                continue
            handle.set(mapping.local_field, value)

    def reconcile(
        self,
        remote_records: Sequence[RemoteRecord],
        natural_key: NaturalKey,
        mappings: Sequence[FieldMapping],
        *,
        allow_create: bool = False,
        dry_run: bool = False,
    ) -> ReconciliationResult:
        """
        Empareja cada registro remoto con 0 o 1 registro local.

        - encontrado: se actualiza solo si algún valor cambia
        - no encontrado y allow_create: se crea
        - no encontrado y no allow_create: se omite (lo provisiona otro proceso)

        UnknownStatusCode y campos requeridos faltantes se registran en
        result.errors y el lote continúa.
        """
        result = ReconciliationResult()
        entity = self.repository.entity_name

        for record in remote_records:
            key = natural_key.key_of(record)
            if not key:
                result.errors.append(
                    RecordError(key="", error_code="MISSING_KEY",
                                message=f"Registro sin '{natural_key.remote_field}'")
                )
                continue

            local = self._find_local(record, natural_key)
            if local is None and not allow_create:
                result.skipped_count += 1
                logger.debug(f"{entity} '{key}' no existe localmente; se omite")
                continue

            handle = RecordHandle(self.repository.snapshot(local) if local is not None else None)
            try:
                self._stage(record, mappings, handle)
            except UnknownStatusCode as e:
                result.errors.append(RecordError(key=key, error_code=e.error_code, message=e.message))
                logger.error(f"{entity} '{key}': {e.message}")
                continue
            except MissingRemoteField as e:
                result.errors.append(
                    RecordError(key=key, error_code="MISSING_FIELD",
                                message=f"Falta el campo requerido '{e}'")
                )
                continue

            if local is None:
                if handle.get(natural_key.local_field) in (None, ""):
                    handle.set(natural_key.local_field, record.get(natural_key.remote_field))
                result.created_count += 1
                result.diffs.append(RecordDiff(key=key, action="created", changes=handle.changes()))
                if not dry_run:
                    self.repository.create(handle.staged)
                continue

            changes = handle.changes()
            if not changes:
                continue
            result.updated_count += 1
            result.diffs.append(RecordDiff(key=key, action="updated", changes=changes))
            if not dry_run:
                self.repository.update(local, {field: new for field, (_, new) in changes.items()})

        logger.info(
            f"Reconciliación {entity}: creados={result.created_count}, "
            f"actualizados={result.updated_count}, omitidos={result.skipped_count}, "
            f"errores={len(result.errors)}{' (dry run)' if dry_run else ''}"
        )
        return result

    def clear_absent(
        self,
        remote_records: Sequence[RemoteRecord],
        key_field: str,
        clear_field: str,
        *,
        dry_run: bool = False,
    ) -> ReconciliationResult:
        """
        Vacía clear_field en los registros locales cuyo valor ya no aparece
        en key_field del lote remoto. Nunca borra registros.

        Requiere el lote remoto completo (no incremental).
        """
        result = ReconciliationResult()
        present = {str(r.get(key_field)) for r in remote_records if r.get(key_field) not in (None, "")}

        for local in self.repository.with_value(clear_field):
            value = getattr(local, clear_field)
            if str(value) in present:
                continue
            result.cleared_count += 1
            result.diffs.append(
                RecordDiff(key=str(value), action="cleared", changes={clear_field: (value, None)})
            )
            if not dry_run:
                self.repository.update(local, {clear_field: None})

        logger.info(
            f"Clear-absent {self.repository.entity_name}.{clear_field}: "
            f"limpiados={result.cleared_count}{' (dry run)' if dry_run else ''}"
        )
        return result
