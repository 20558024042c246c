"""
Fetch paginado de colecciones de Unleashed.

Envelope de cada página:
    {"Items": [...], "Pagination": {"NumberOfItems": n, "PageSize": s,
                                    "PageNumber": p, "NumberOfPages": t}}

La primera página se pide en /<Recurso>; las siguientes en /<Recurso>/<n>,
siempre con el mismo filtro. Las páginas se piden en orden ascendente y
sin solapamiento. Si cualquier página falla, se descarta todo lo acumulado.
"""
from __future__ import annotations

from typing import Any, List, Optional, Protocol

from loguru import logger

from inventory_sync.domain.entities.sync_models import QueryFilter, RemoteRecord
from inventory_sync.shared.exceptions.sync import TransportError


class JsonClient(Protocol):
    def get_json(self, path: str, params: Optional[dict] = None) -> dict[str, Any]: ...


def _page_items(payload: Any, path: str) -> List[RemoteRecord]:
    if not isinstance(payload, dict) or not isinstance(payload.get("Items"), list):
        raise TransportError(path, "la respuesta no contiene una lista 'Items'")
    return payload["Items"]


def _number_of_pages(payload: dict[str, Any], path: str) -> int:
    pagination = payload.get("Pagination")
    if not pagination:
        return 1
    try:
        return int(pagination.get("NumberOfPages", 1))
    except (TypeError, ValueError) as e:
        raise TransportError(path, f"NumberOfPages inválido: {pagination!r}") from e


class PaginatedFetcher:
    """Une todas las páginas de una colección en una sola lista ordenada."""

    def __init__(self, client: JsonClient) -> None:
        self._client = client

    def fetch(self, resource: str, query_filter: Optional[QueryFilter] = None) -> List[RemoteRecord]:
        """
        Retorna todos los items de resource que cumplen query_filter.

        Raises:
            TransportError: si una página no pudo completarse o vino malformada
            UnexpectedStatus: si una página respondió con status distinto de 200
        """
        params = query_filter.to_params() if query_filter else {}
        resource = resource.strip("/")

        first = self._client.get_json(resource, dict(params))
        items = list(_page_items(first, resource))
        total_pages = _number_of_pages(first, resource)
        logger.info(
            f"Fetch {resource}: página 1/{total_pages} ({len(items)} items), filtro={params or 'ninguno'}"
        )

        for page in range(2, total_pages + 1):
            path = f"{resource}/{page}"
            payload = self._client.get_json(path, dict(params))
            page_items = _page_items(payload, path)
            items.extend(page_items)
            logger.info(f"Fetch {resource}: página {page}/{total_pages} ({len(page_items)} items)")

        logger.info(f"Fetch {resource} completado: {len(items)} items")
        return items
