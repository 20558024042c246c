"""
Excepciones del pipeline de sincronización Unleashed -> tienda.

Taxonomía:
- TransportError: no se pudo completar un request (red/protocolo). Fatal.
- UnexpectedStatus: una página respondió con status distinto de 200. Fatal.
- DuplicateKeyError: clave natural repetida (local o remota). Fatal, sin escrituras.
- UnknownStatusCode: estado de orden externo sin mapeo. Fatal para ese registro.
- NotificationError: falló el envío del reporte. No fatal.
"""
from typing import Any, Iterable, Optional

from inventory_sync.shared.exceptions.base import AppException


class SyncException(AppException):
    """Excepción base para errores de sincronización."""

    def __init__(self, message: str, error_code: str = "SYNC_ERROR", details=None, exit_code: int = 1):
        super().__init__(
            message=message,
            exit_code=exit_code,
            error_code=error_code,
            details=details
        )


class SyncConfigError(SyncException):
    """Configuración de job inválida o incompleta."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="SYNC_CONFIG_ERROR",
            details=details,
            exit_code=2
        )


class TransportError(SyncException):
    """No se pudo completar la comunicación con la API remota."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            message=f"Error de transporte contra {url}: {reason}",
            error_code="TRANSPORT_ERROR",
            details={"url": url, "reason": reason}
        )
        self.url = url
        self.reason = reason


class UnexpectedStatus(SyncException):
    """Una respuesta de la API remota no tuvo status de éxito."""

    def __init__(self, url: str, status_code: int, body: str = ""):
        super().__init__(
            message=f"Respuesta inesperada {status_code} de {url}",
            error_code="UNEXPECTED_STATUS",
            details={"url": url, "status_code": status_code, "body": body[:500]}
        )
        self.url = url
        self.status_code = status_code


class DuplicateKeyError(SyncException):
    """
    Violación de unicidad en la clave natural.

    scope indica dónde se encontró: 'local' (tienda) o 'remote' (Unleashed).
    """

    def __init__(self, scope: str, field: str, duplicates: Iterable[Any]):
        values = sorted(str(v) for v in duplicates)
        super().__init__(
            message=(
                f"Duplicados de '{field}' en {scope}: {', '.join(values)}. "
                f"Elimina los duplicados antes de volver a ejecutar el job."
            ),
            error_code="DUPLICATE_KEY",
            details={"scope": scope, "field": field, "duplicates": values}
        )
        self.scope = scope
        self.field = field
        self.duplicates = values


class UnknownStatusCode(SyncException):
    """Estado de orden externo que no existe en el mapa de traducción."""

    def __init__(self, status: Any, known: Iterable[str] = ()):
        super().__init__(
            message=f"Estado de orden desconocido: '{status}'",
            error_code="UNKNOWN_STATUS_CODE",
            details={"status": str(status), "known_statuses": sorted(known)}
        )
        self.status = status


class NotificationError(SyncException):
    """Falló el envío del reporte de sincronización."""

    def __init__(self, channel: str, reason: str):
        super().__init__(
            message=f"No se pudo enviar la notificación por {channel}: {reason}",
            error_code="NOTIFICATION_ERROR",
            details={"channel": channel, "reason": reason}
        )
        self.channel = channel
