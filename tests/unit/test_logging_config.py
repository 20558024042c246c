import sys

from loguru import logger

from inventory_sync.core.logging_config import configure_logging


def test_configure_logging_writes_rotating_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "sync.log"
    try:
        configure_logging("DEBUG", str(log_file))
        logger.debug("Sincronización de prueba")
    finally:
        logger.remove()
        logger.add(sys.stderr)

    assert "Sincronización de prueba" in log_file.read_text(encoding="utf-8")


def test_configure_logging_without_file(tmp_path) -> None:
    try:
        configure_logging("INFO", "")
    finally:
        logger.remove()
        logger.add(sys.stderr)
    assert list(tmp_path.iterdir()) == []
