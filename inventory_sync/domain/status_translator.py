"""
Traducción de estados de Sales Order (Unleashed) a estados de orden de la tienda.

El mapa es cerrado: un estado nuevo en Unleashed es un hueco de configuración
que debe resolverse actualizando el mapa, nunca con un valor por defecto.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from inventory_sync.shared.constants.order_constants import DEFAULT_ORDER_STATUS_MAP
from inventory_sync.shared.exceptions.sync import SyncConfigError, UnknownStatusCode


class OrderStatusTranslator:
    """Traductor inmutable de estados externos a estados locales."""

    def __init__(self, status_map: Optional[Mapping[str, str]] = None) -> None:
        status_map = DEFAULT_ORDER_STATUS_MAP if status_map is None else status_map
        if not status_map:
            raise SyncConfigError("El mapa de estados de orden no puede estar vacío", field="status_map")
        self._map = MappingProxyType(dict(status_map))

    @property
    def status_map(self) -> Mapping[str, str]:
        return self._map

    def translate(self, external_status: str) -> str:
        """
        Retorna el estado local para external_status.

        Raises:
            UnknownStatusCode: si el estado no está en el mapa
        """
        try:
            return self._map[external_status]
        except (KeyError, TypeError):
            raise UnknownStatusCode(external_status, known=self._map.keys()) from None
