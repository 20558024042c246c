"""
Repositorio de watermarks (tabla sync_consumers).

Un watermark por job: el mayor timestamp externo ("LastModifiedOn") ya
incorporado a la tienda. Se usa para armar el modifiedSince del siguiente fetch.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_sync.domain.entities.sync_models import RemoteRecord, Watermark
from inventory_sync.infrastructure.database.models import ConsumerModel
from inventory_sync.shared.exceptions.sync import SyncConfigError
from inventory_sync.shared.utils.datetime_utils import parse_external_timestamp, to_timezone


def max_external_last_edited(records: Sequence[RemoteRecord], key_name: str) -> Optional[datetime]:
    """
    Retorna el máximo timestamp del campo key_name en records (None si no hay records).

    Raises:
        SyncConfigError: si algún record no trae el campo o no es parseable
    """
    latest: Optional[datetime] = None
    for record in records:
        raw = record.get(key_name)
        if raw in (None, ""):
            raise SyncConfigError(
                f"Un registro remoto no contiene el campo '{key_name}' requerido para el watermark",
                field=key_name,
            )
        try:
            value = parse_external_timestamp(raw)
        except ValueError as e:
            raise SyncConfigError(
                f"No se pudo parsear '{key_name}': {raw!r}", field=key_name
            ) from e
        latest = value if latest is None else max(latest, value)
    return latest


class WatermarkRepository:
    """Gestiona la tabla sync_consumers."""

    def __init__(self, db: Session, timezone_name: str = "UTC"):
        self.db = db
        self.timezone_name = timezone_name

    def _get_model(self, job_name: str) -> Optional[ConsumerModel]:
        result = self.db.execute(
            select(ConsumerModel).where(ConsumerModel.title == job_name)
        )
        return result.scalars().first()

    def get(self, job_name: str) -> Optional[Watermark]:
        """
        Obtiene el watermark de un job, o None si el job nunca avanzó.
        """
        consumer = self._get_model(job_name)
        if consumer is None:
            return None
        return Watermark(
            job_name=consumer.title,
            external_key_name=consumer.external_last_edited_key,
            external_last_edited=datetime.fromisoformat(consumer.external_last_edited),
        )

    def advance(
        self,
        job_name: str,
        key_name: str,
        records: Sequence[RemoteRecord],
    ) -> Optional[Watermark]:
        """
        Avanza el watermark al máximo de key_name en records.

        - records vacío: no-op (el watermark no se toca)
        - nunca retrocede: si el valor guardado es mayor, se conserva

        Debe llamarse solo después de una reconciliación exitosa y persistida.
        """
        latest = max_external_last_edited(records, key_name)
        if latest is None:
            logger.debug(f"Watermark '{job_name}': sin registros, no se modifica")
            return None

        latest = to_timezone(latest, self.timezone_name)
        consumer = self._get_model(job_name)

        if consumer is None:
            consumer = ConsumerModel(
                title=job_name,
                external_last_edited_key=key_name,
                external_last_edited=latest.isoformat(),
            )
            self.db.add(consumer)
            logger.info(f"Watermark '{job_name}' creado en {latest.isoformat()}")
        else:
            current = datetime.fromisoformat(consumer.external_last_edited)
            consumer.external_last_edited_key = key_name
            if latest > current:
                consumer.external_last_edited = latest.isoformat()
                logger.info(f"Watermark '{job_name}' avanzado a {latest.isoformat()}")
            else:
                logger.info(f"Watermark '{job_name}' sin cambios ({consumer.external_last_edited})")

        self.db.flush()
        return self.get(job_name)
