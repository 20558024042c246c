"""
Configuración de fixtures para pytest.
"""
from typing import Any, Dict, Iterator, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from inventory_sync.domain.entities.sync_models import QueryFilter
from inventory_sync.infrastructure.database import models  # noqa: F401  registra modelos
from inventory_sync.infrastructure.database.session import Base


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session() -> Iterator[Session]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    engine = create_engine(TEST_DATABASE_URL, echo=False)
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


class FakeFetcher:
    """Fetcher en memoria: devuelve siempre el mismo lote y registra los filtros."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.records = records or []
        self.error = error
        self.calls: List[tuple] = []

    def fetch(self, resource: str, query_filter: Optional[QueryFilter] = None):
        self.calls.append((resource, query_filter))
        if self.error is not None:
            raise self.error
        return [dict(r) for r in self.records]


class FakeClient:
    """Cliente JSON en memoria: path -> payload (o excepción)."""

    def __init__(self, pages: Dict[str, Any]):
        self.pages = pages
        self.calls: List[tuple] = []

    def get_json(self, path: str, params: Optional[dict] = None):
        self.calls.append((path, dict(params or {})))
        payload = self.pages[path]
        if isinstance(payload, Exception):
            raise payload
        return payload


class RecordingNotifier:
    channel = "memory"

    def __init__(self, error: Optional[Exception] = None):
        self.sent: List[tuple] = []
        self.error = error

    def send(self, subject: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((subject, body))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
