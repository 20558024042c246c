"""
Lock de ejecución por job (pg_try_advisory_lock).

El motor no se protege contra dos corridas simultáneas del mismo job;
esa garantía se toma aquí, en la capa que agenda las corridas.
"""
from contextlib import contextmanager
from typing import Iterator

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine


def stable_lock_key(namespace: str, name: str) -> int:
    """
    Genera un lock key reproducible para pg_advisory_lock.
    """
    # hash() no es estable entre procesos; sumatoria simple de bytes.
    raw = (namespace + ":" + name).encode("utf-8")
    return int(sum(raw) % (2**31 - 1))


@contextmanager
def advisory_lock(engine: Engine, job_name: str, namespace: str = "inventory_sync") -> Iterator[bool]:
    """
    Intenta tomar el lock del job. Produce True si se obtuvo.

    En bases que no son PostgreSQL (p.ej. SQLite en desarrollo) siempre produce True.
    """
    if engine.dialect.name != "postgresql":
        yield True
        return

    key = stable_lock_key(namespace, job_name)
    with engine.connect() as conn:
        locked = bool(conn.execute(text("SELECT pg_try_advisory_lock(:key)"), {"key": key}).scalar())
        if not locked:
            logger.warning(f"Job '{job_name}' ya está corriendo (advisory lock ocupado)")
        try:
            yield locked
        finally:
            if locked:
                conn.execute(text("SELECT pg_advisory_unlock(:key)"), {"key": key})
