"""
Pipeline de transformaciones de campos.

Cada FieldMapping lleva un campo remoto a una columna local, aplicando
opcionalmente un transform con firma:

    transform(valor_crudo, handle) -> valor_transformado

handle es el registro local en construcción (RecordHandle). Es el único
canal lateral permitido: un transform puede derivar otra columna del mismo
registro (p.ej. url_segment a partir del título). Ningún transform debe
depender de otros registros del lote.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional


class _Unchanged:
    """Sentinel: el transform no tiene valor y la columna no se toca."""

    def __repr__(self) -> str:
        return "UNCHANGED"


UNCHANGED = _Unchanged()


class RecordHandle:
    """
    Registro local en construcción.

    Guarda los valores staged sin tocar el objeto ORM: así el mismo camino
    sirve para dry run y para la escritura real.
    """

    def __init__(self, current: Optional[Mapping[str, Any]] = None) -> None:
        self._current = dict(current or {})
        self._staged: Dict[str, Any] = {}

    def get(self, field: str, default: Any = None) -> Any:
        if field in self._staged:
            return self._staged[field]
        return self._current.get(field, default)

    def set(self, field: str, value: Any) -> None:
        self._staged[field] = value

    __getitem__ = get
    __setitem__ = set

    @property
    def staged(self) -> Dict[str, Any]:
        return dict(self._staged)

    def changes(self) -> Dict[str, tuple]:
        """Columnas cuyo valor staged difiere del actual: campo -> (antes, después)."""
        return {
            field: (self._current.get(field), value)
            for field, value in self._staged.items()
            if self._current.get(field) != value
        }


FieldTransform = Callable[[Any, RecordHandle], Any]


@dataclass(frozen=True)
class FieldMapping:
    """
    Define el mapeo de un campo remoto a una columna local.

    - remote_field: nombre del campo en Unleashed
    - local_field: nombre de la columna en la tienda
    - transform: función opcional (valor, handle) -> valor
    - required: si True, el campo debe venir en el registro remoto
    """

    remote_field: str
    local_field: str
    transform: Optional[FieldTransform] = None
    required: bool = False

    def apply(self, raw: Any, handle: RecordHandle) -> Any:
        return self.transform(raw, handle) if self.transform else raw


def raw2url(title: Any) -> str:
    """
    Convierte un título en un segmento de URL: minúsculas, ASCII, guiones.

    "Café & Té 500g" -> "cafe-te-500g"
    """
    text = unicodedata.normalize("NFKD", str(title or "")).encode("ascii", "ignore").decode("ascii")
    text = text.replace("&", " ").lower()
    return re.sub(r"[^a-z0-9]+", "-", text).strip("-")


def to_float(value: Any, handle: RecordHandle) -> Any:
    if value in (None, ""):
        return None
    return float(value)


def title_with_url_segment(url_field: str = "url_segment") -> FieldTransform:
    """
    Transform para títulos: deja el título tal cual y deriva url_field.
    """

    def transform(value: Any, handle: RecordHandle) -> Any:
        handle.set(url_field, raw2url(value))
        return value

    return transform
