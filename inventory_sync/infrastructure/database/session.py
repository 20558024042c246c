"""
Gestión de sesiones de base de datos.

El sincronizador corre como job (cron / task scheduler), por eso usa el
engine síncrono de SQLAlchemy. El engine se crea bajo demanda para no
requerir el driver de la base al importar el paquete.
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from inventory_sync.core.config import settings


# Base para modelos de SQLAlchemy
Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _create_engine_args(url: str) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": settings.DEBUG,
        "future": True,
    }

    if url.startswith("postgres"):
        args.update({
            "pool_size": 2,
            "max_overflow": 0,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def get_engine(url: Optional[str] = None) -> Engine:
    """
    Retorna el engine (se crea en la primera llamada).

    Args:
        url: URL de conexión; por defecto settings.effective_database_url
    """
    global _engine, _session_factory
    if _engine is None or url is not None:
        url = url or settings.effective_database_url
        _engine = create_engine(url, **_create_engine_args(url))
        _session_factory = None
    return _engine


def get_session_factory() -> sessionmaker:
    """Session factory ligada al engine actual."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            class_=Session,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Provee una sesión transaccional.

    Hace commit al salir sin error y rollback si se propaga una excepción.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Optional[Engine] = None) -> None:
    """Inicializa la base de datos creando todas las tablas."""
    from inventory_sync.infrastructure.database import models  # noqa: F401  registra modelos

    Base.metadata.create_all(engine or get_engine())


def close_db() -> None:
    """Cierra las conexiones de la base de datos."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
