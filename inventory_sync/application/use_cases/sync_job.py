"""
Orquestador de una corrida de sincronización Unleashed -> tienda.

Diseño (resumen):
- Chequea duplicados en la tienda (clave natural) antes de hacer nada
- Arma el filtro incremental desde el watermark del job
- Trae todas las páginas del recurso remoto
- Chequea duplicados en el lote remoto
- (opcional) clear-absent + reconciliación
- Commit, avance de watermark y notificación del reporte

Ninguna escritura ocurre antes de que todas las validaciones pasen.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from loguru import logger
from sqlalchemy.orm import Session

from inventory_sync.application.services.duplicate_validator import check_unique
from inventory_sync.application.services.reconciliation import NaturalKey, ReconciliationEngine
from inventory_sync.application.services.report_formatter import format_report
from inventory_sync.application.services.transforms import FieldMapping
from inventory_sync.domain.entities.sync_models import (
    QueryFilter,
    ReconciliationResult,
    RemoteRecord,
    Watermark,
)
from inventory_sync.infrastructure.external.unleashed.fetcher import PaginatedFetcher
from inventory_sync.infrastructure.external.notifications import Notifier
from inventory_sync.infrastructure.repositories.record_repository import LocalRecordRepository
from inventory_sync.infrastructure.repositories.watermark_repository import (
    WatermarkRepository,
    max_external_last_edited,
)
from inventory_sync.shared.exceptions.sync import (
    DuplicateKeyError,
    NotificationError,
    SyncConfigError,
)
from inventory_sync.shared.utils.datetime_utils import format_modified_since


@dataclass(frozen=True)
class ClearAbsent:
    """Pasada clear-absent: vacía local_field si remote_key_field ya no lo reporta."""

    remote_key_field: str
    local_field: str


@dataclass(frozen=True)
class SyncJobConfig:
    """
    Config de un job (un recurso Unleashed -> un modelo de la tienda).

    NOTA sobre el watermark:
    - watermark_key=None implica fetch completo en cada corrida.
    - clear_absent solo es válido con fetch completo: con un lote
      incremental desvincularía registros que simplemente no cambiaron.
    """

    job_name: str
    title: str
    resource: str
    model: type
    natural_key: NaturalKey
    field_mappings: Tuple[FieldMapping, ...] = ()
    watermark_key: Optional[str] = "LastModifiedOn"
    normalize_filter_timezone: bool = False
    source_id: Optional[str] = None
    local_unique_fields: Tuple[str, ...] = ()
    remote_unique_fields: Tuple[str, ...] = ()
    clear_absent: Optional[ClearAbsent] = None
    allow_create: bool = False
    email_subject: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.job_name:
            raise SyncConfigError("job_name es obligatorio", field="job_name")
        if self.clear_absent and self.watermark_key:
            raise SyncConfigError(
                f"El job '{self.job_name}' no puede usar clear_absent con fetch incremental",
                field="clear_absent",
            )


@dataclass
class SyncRunReport:
    """Resultado de una corrida completa."""

    job_name: str
    preview: bool
    result: ReconciliationResult
    sections: Sequence[Tuple[str, ReconciliationResult]] = field(default_factory=list)
    query_filter: QueryFilter = field(default_factory=QueryFilter)
    fetched_count: int = 0
    watermark: Optional[Watermark] = None
    watermark_advanced: bool = False
    notified: bool = False
    text: str = ""


class SyncJob:
    """
    Orquestador del pipeline para un recurso.

    Las subclases pueden sobreescribir build_field_mappings() cuando algún
    transform necesita colaboradores (traductor de estados, lookup de categorías).
    """

    def __init__(
        self,
        config: SyncJobConfig,
        *,
        session: Session,
        fetcher: PaginatedFetcher,
        notifier: Optional[Notifier] = None,
        watermark_timezone: str = "UTC",
    ) -> None:
        self.config = config
        self._db = session
        self._fetcher = fetcher
        self._notifier = notifier
        self._records = LocalRecordRepository(session, config.model)
        self._watermarks = WatermarkRepository(session, watermark_timezone)
        self._engine = ReconciliationEngine(self._records)

    def build_field_mappings(self) -> Sequence[FieldMapping]:
        return self.config.field_mappings

    def build_query_filter(self) -> QueryFilter:
        """
        Filtro del fetch: modifiedSince desde el watermark (si existe) y sourceId.
        """
        modified_since = None
        if self.config.watermark_key:
            watermark = self._watermarks.get(self.config.job_name)
            if watermark is not None:
                modified_since = format_modified_since(
                    watermark.external_last_edited,
                    normalize_to_utc=self.config.normalize_filter_timezone,
                )
        return QueryFilter(modified_since=modified_since, source_id=self.config.source_id)

    def _check_local_duplicates(self) -> None:
        for field_name in self.config.local_unique_fields:
            check = check_unique("local", field_name, self._records.column(field_name))
            if not check.ok:
                logger.warning(f"Duplicados de {field_name} en la tienda: {sorted(check.duplicates)}")
                raise DuplicateKeyError("local", field_name, check.duplicates)
            logger.info(f"Sin duplicados de {field_name} en la tienda")

    def _check_remote_duplicates(self, remote_records: Sequence[RemoteRecord]) -> None:
        for field_name in self.config.remote_unique_fields:
            check = check_unique("remote", field_name, (r.get(field_name) for r in remote_records))
            if not check.ok:
                logger.warning(f"Duplicados de {field_name} en Unleashed: {sorted(check.duplicates)}")
                raise DuplicateKeyError("remote", field_name, check.duplicates)
            logger.info(f"Sin duplicados de {field_name} en Unleashed")

    def _notify(self, report: SyncRunReport) -> bool:
        if self._notifier is None or not self.config.email_subject:
            return False
        try:
            self._notifier.send(self.config.email_subject, report.text)
            return True
        except NotificationError as e:
            logger.error(f"Reporte de '{self.config.job_name}' no enviado: {e.message}")
            return False

    def run(self, preview: bool = False) -> SyncRunReport:
        """
        Ejecuta una corrida completa del job.

        Args:
            preview: dry run; no persiste cambios, no avanza watermark, no notifica

        Raises:
            DuplicateKeyError, TransportError, UnexpectedStatus, SyncConfigError
        """
        config = self.config
        logger.info(f"Iniciando {config.title}{' (preview)' if preview else ''}")

        try:
            logger.info("Chequeos preliminares")
            self._check_local_duplicates()

            query_filter = self.build_query_filter()
            remote_records = self._fetcher.fetch(config.resource, query_filter)

            self._check_remote_duplicates(remote_records)
            if config.watermark_key:
                # Valida el campo del watermark antes de escribir nada
                max_external_last_edited(remote_records, config.watermark_key)

            sections = []
            if config.clear_absent:
                cleared = self._engine.clear_absent(
                    remote_records,
                    config.clear_absent.remote_key_field,
                    config.clear_absent.local_field,
                    dry_run=preview,
                )
                sections.append((f"Limpieza de {config.clear_absent.local_field} ausentes", cleared))

            updated = self._engine.reconcile(
                remote_records,
                config.natural_key,
                self.build_field_mappings(),
                allow_create=config.allow_create,
                dry_run=preview,
            )
            sections.append(("Actualización de registros", updated))

            result = ReconciliationResult()
            for _, section in sections:
                result = result.merge(section)

            watermark = None
            watermark_advanced = False
            if preview:
                self._db.rollback()
            else:
                if config.watermark_key and remote_records:
                    if result.has_errors:
                        logger.warning(
                            f"Watermark de '{config.job_name}' no avanzado: "
                            f"{len(result.errors)} registro(s) con error se reintentarán"
                        )
                    else:
                        watermark = self._watermarks.advance(
                            config.job_name, config.watermark_key, remote_records
                        )
                        watermark_advanced = watermark is not None
                self._db.commit()
        except Exception:
            self._db.rollback()
            raise

        report = SyncRunReport(
            job_name=config.job_name,
            preview=preview,
            result=result,
            sections=sections,
            query_filter=query_filter,
            fetched_count=len(remote_records),
            watermark=watermark,
            watermark_advanced=watermark_advanced,
        )
        report.text = format_report(config.title, sections, preview=preview)

        if result.updated_count or result.cleared_count or result.created_count or result.has_errors:
            logger.info("\n" + report.text)

        if not preview and result.total:
            report.notified = self._notify(report)

        logger.success(
            f"{config.title} completado: {len(remote_records)} registros remotos, total={result.total}"
        )
        return report
