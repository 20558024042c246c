"""
Excepción base del sincronizador.

Cada excepción lleva el código de salida con el que el CLI termina si la
excepción aborta la corrida.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Excepción base de la aplicación.
    Todas las excepciones personalizadas deben heredar de esta clase.
    """

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: Mensaje de error descriptivo
            exit_code: Código de salida del proceso
            error_code: Código de error estable (para logs y reportes)
            details: Contexto adicional (campo, url, valores duplicados...)
        """
        self.message = message
        self.exit_code = exit_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Representación serializable para logs estructurados."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }
