"""
Cliente mínimo de la REST API de Unleashed (sin SDKs externos).

Requisitos cubiertos:
- requests
- firma HMAC-SHA256 del query string (api-auth-id / api-auth-signature)
- rate-limit/backoff (429, 5xx)
- errores tipados: TransportError / UnexpectedStatus
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlencode

import requests
from loguru import logger

from inventory_sync.shared.exceptions.sync import (
    SyncConfigError,
    TransportError,
    UnexpectedStatus,
)


@dataclass(frozen=True)
class UnleashedCredentials:
    api_id: str
    api_key: str


def sign_query(query_string: str, api_key: str) -> str:
    """
    Firma de Unleashed: base64(HMAC-SHA256(query string sin '?', api key)).
    """
    digest = hmac.new(
        api_key.encode("utf-8"),
        query_string.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


class UnleashedClient:
    """
    Cliente HTTP de Unleashed. Devuelve el JSON de cada respuesta 200.

    Importante:
    - No interpreta la paginación: eso lo hace PaginatedFetcher.
    - No hace cast de tipos de campos: eso se decide en los FieldMapping.
    """

    def __init__(
        self,
        credentials: UnleashedCredentials,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = "https://api.unleashedsoftware.com",
        client_type: str = "inventory-sync",
        timeout_s: int = 30,
        max_retries: int = 4,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._client_type = client_type
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._sleep = sleep
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "UnleashedClient":
        """Construye el cliente leyendo credenciales y tiempos desde Settings."""
        if not settings.UNLEASHED_API_ID or not settings.UNLEASHED_API_KEY:
            raise SyncConfigError(
                "Faltan credenciales de Unleashed (UNLEASHED_API_ID / UNLEASHED_API_KEY)",
                field="UNLEASHED_API_ID",
            )
        return cls(
            UnleashedCredentials(
                api_id=settings.UNLEASHED_API_ID,
                api_key=settings.UNLEASHED_API_KEY,
            ),
            base_url=settings.UNLEASHED_API_URL,
            client_type=settings.UNLEASHED_CLIENT_TYPE,
            timeout_s=settings.UNLEASHED_TIMEOUT_S,
            max_retries=settings.UNLEASHED_MAX_RETRIES,
            min_backoff_s=settings.UNLEASHED_MIN_BACKOFF_S,
            max_backoff_s=settings.UNLEASHED_MAX_BACKOFF_S,
            **kwargs,
        )

    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> tuple[str, str]:
        """
        Retorna (url completa, query string). La firma se calcula sobre
        exactamente el mismo query string que viaja en la URL.
        """
        query_string = urlencode(list((params or {}).items()))
        url = f"{self._base_url}/{path.lstrip('/')}"
        if query_string:
            url = f"{url}?{query_string}"
        return url, query_string

    def get_json(self, path: str, params: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """GET firmado. Ver _request_json para la política de errores."""
        return self._request_json("GET", path, params=params)

    def _backoff(self, attempt: int, retry_after: Optional[str]) -> float:
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                return self._min_backoff_s
        # Exponencial simple + jitter proporcional
        base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
        return base + (0.15 * base)

    def _request_json(
        self, method: str, path: str, *, params: Optional[Mapping[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Request HTTP con backoff para 429/5xx y errores de conexión.

        Estrategia:
        - 200: retorna el JSON decodificado.
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx / error de red: exponencial con jitter.
        - otros status: UnexpectedStatus inmediato (config/auth mal).
        - body no decodificable: TransportError.
        """
        url, query_string = self.build_url(path, params)
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "api-auth-id": self._creds.api_id,
            "api-auth-signature": sign_query(query_string, self._creds.api_key),
            "client-type": self._client_type,
        }

        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.request(
                    method=method,
                    url=url,
                    headers=headers,
                    timeout=self._timeout_s,
                )
            except requests.RequestException as e:
                if attempt >= self._max_retries:
                    raise TransportError(url, str(e)) from e
                sleep_s = self._backoff(attempt, None)
                logger.warning(f"Error de red contra {url} ({e}); reintento en {sleep_s:.1f}s")
                self._sleep(sleep_s)
                continue

            if resp.status_code == 200:
                try:
                    return resp.json()
                except ValueError as e:
                    raise TransportError(url, f"respuesta no es JSON válido: {e}") from e

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise UnexpectedStatus(url, resp.status_code, resp.text)
                sleep_s = self._backoff(attempt, resp.headers.get("Retry-After"))
                logger.warning(
                    f"Unleashed respondió {resp.status_code} en {url}; reintento en {sleep_s:.1f}s"
                )
                self._sleep(sleep_s)
                continue

            # Errores no recuperables
            raise UnexpectedStatus(url, resp.status_code, resp.text)

        raise TransportError(url, "reintentos agotados")
