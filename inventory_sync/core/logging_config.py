"""
Configuracion de logging (loguru).
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from inventory_sync.core.config import settings


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configura los sinks de loguru para una corrida de sincronizacion.

    - stderr con el nivel indicado
    - archivo rotativo (si log_file no es vacio)

    Args:
        level: Nivel minimo (por defecto settings.LOG_LEVEL)
        log_file: Ruta del archivo de log (por defecto settings.LOG_FILE)
    """
    level = level or settings.LOG_LEVEL
    log_file = settings.LOG_FILE if log_file is None else log_file

    logger.remove()
    logger.add(sys.stderr, level=level)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="500 MB",
            retention="10 days",
            level=level,
        )
