"""
Utilidades puras para manejo de fechas del pipeline.

Unleashed devuelve los timestamps en formato "/Date(<ms>)/" (epoch en
milisegundos, UTC); también aceptamos ISO8601 para tolerar otros endpoints.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

_MS_DATE_RE = re.compile(r"^/Date\((-?\d+)([+-]\d{4})?\)/$")
# Fracción de segundos de cualquier largo (.NET manda 7 dígitos)
_ISO_FRACTION_RE = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).
    Un datetime naive se interpreta como UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _fraction_to_micros(match: re.Match) -> str:
    # fromisoformat (3.10) solo acepta 3 o 6 dígitos
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_external_timestamp(value: Any) -> datetime:
    """
    Convierte un timestamp de la API remota a datetime aware.

    Formatos soportados:
    - "/Date(1528755766000)/" (con offset opcional, que se ignora: el epoch ya es UTC)
    - ISO8601, con o sin 'Z'/offset (naive se asume UTC)
    - datetime

    Raises:
        ValueError: si el valor no es un timestamp reconocible
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Timestamp inválido: {value!r}")

    raw = value.strip()
    match = _MS_DATE_RE.match(raw)
    if match:
        millis = int(match.group(1))
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)

    raw = _ISO_FRACTION_RE.sub(_fraction_to_micros, raw.replace("Z", "+00:00"))
    return ensure_utc(datetime.fromisoformat(raw))


def to_timezone(dt: datetime, tz_name: str) -> datetime:
    """Convierte un datetime aware a la zona indicada (nombre IANA)."""
    if tz_name.upper() == "UTC":
        return ensure_utc(dt)
    return ensure_utc(dt).astimezone(ZoneInfo(tz_name))


def format_modified_since(dt: datetime, *, normalize_to_utc: bool = False) -> str:
    """
    Formatea un watermark para el parámetro modifiedSince.

    Precisión de milisegundos, sin zona: "2024-01-31T09:15:00.123".
    Si normalize_to_utc es False se usa la hora de pared tal como fue registrada.
    """
    if normalize_to_utc:
        dt = ensure_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:23]
