"""
Chequeo de unicidad de claves naturales.

Función pura: devuelve un resultado y es el caller (el job) quien decide
abortar. Se corre contra la tienda y contra el lote remoto antes de escribir.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable


def find_duplicates(values: Iterable[Any]) -> set[str]:
    """
    Retorna los valores que aparecen más de una vez (cada uno una sola vez).

    Los valores vacíos (None / "") se ignoran: no pueden emparejar registros.
    """
    counts = Counter(str(v) for v in values if v is not None and str(v) != "")
    return {value for value, count in counts.items() if count > 1}


@dataclass(frozen=True)
class DuplicateCheck:
    """Resultado de chequear un campo en un origen ('local' o 'remote')."""

    scope: str
    field: str
    duplicates: FrozenSet[str]

    @property
    def ok(self) -> bool:
        return not self.duplicates


def check_unique(scope: str, field: str, values: Iterable[Any]) -> DuplicateCheck:
    return DuplicateCheck(scope=scope, field=field, duplicates=frozenset(find_duplicates(values)))
