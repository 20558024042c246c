"""
Repositorio genérico de registros locales (categorías, productos, órdenes).

Expone solo lo que necesita la reconciliación: búsqueda por clave natural,
proyección de columnas, alta y actualización.
"""
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session


class LocalRecordRepository:
    """Repositorio para un modelo ORM de la tienda."""

    def __init__(self, db: Session, model: type):
        self.db = db
        self.model = model

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def _column(self, field: str):
        try:
            return getattr(self.model, field)
        except AttributeError:
            raise ValueError(f"{self.entity_name} no tiene el campo '{field}'") from None

    def find_by(self, field: str, value: Any) -> Optional[Any]:
        """
        Obtiene el registro cuyo campo field es igual a value.
        """
        if value in (None, ""):
            return None
        result = self.db.execute(
            select(self.model).where(self._column(field) == value)
        )
        return result.scalars().first()

    def column(self, field: str) -> List[Any]:
        """Proyección de una columna sobre toda la tabla (para chequeos de duplicados)."""
        result = self.db.execute(select(self._column(field)))
        return list(result.scalars().all())

    def with_value(self, field: str) -> List[Any]:
        """Registros cuyo campo field no es nulo ni vacío."""
        column = self._column(field)
        result = self.db.execute(
            select(self.model).where(column.is_not(None), column != "")
        )
        return list(result.scalars().all())

    def snapshot(self, record: Any) -> Dict[str, Any]:
        """Valores actuales de todas las columnas del registro."""
        return {
            attr.key: getattr(record, attr.key)
            for attr in inspect(self.model).mapper.column_attrs
        }

    def create(self, values: Mapping[str, Any]) -> Any:
        record = self.model(**dict(values))
        self.db.add(record)
        self.db.flush()
        return record

    def update(self, record: Any, values: Mapping[str, Any]) -> Any:
        for field, value in values.items():
            setattr(record, field, value)
        self.db.flush()
        return record
