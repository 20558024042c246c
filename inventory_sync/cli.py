"""
CLI: Unleashed -> tienda (one-way sync).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer), una instancia por job.

Variables de entorno requeridas:
  - UNLEASHED_API_ID
  - UNLEASHED_API_KEY
  - DATABASE_URL (o DATABASE_HOST/PORT/USER/PASSWORD/NAME)

Ejecución:
  inventory-sync all
  inventory-sync products --preview
  inventory-sync categories --init-db
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from loguru import logger

from inventory_sync.application.use_cases.unleashed_jobs import JOB_ORDER, build_job
from inventory_sync.core.config import Settings, settings as default_settings
from inventory_sync.core.logging_config import configure_logging
from inventory_sync.infrastructure.database.locks import advisory_lock
from inventory_sync.infrastructure.database.session import (
    close_db,
    get_engine,
    init_db,
    session_scope,
)
from inventory_sync.infrastructure.external.notifications import build_notifier
from inventory_sync.infrastructure.external.unleashed import PaginatedFetcher, UnleashedClient
from inventory_sync.shared.exceptions.sync import SyncException


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory-sync",
        description="Sincroniza órdenes, productos y categorías desde Unleashed.",
    )
    parser.add_argument(
        "job",
        choices=[*JOB_ORDER, "all"],
        help="Job a ejecutar ('all' corre categorías, productos y órdenes en ese orden).",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Dry run: muestra los cambios sin persistirlos, sin avanzar watermark ni notificar.",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Crea las tablas si no existen antes de sincronizar.",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Archivo .env alternativo (por defecto ./.env).",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = Settings(_env_file=args.env_file) if args.env_file else default_settings

    configure_logging(cfg.LOG_LEVEL, cfg.LOG_FILE)
    logger.info(f"Iniciando {cfg.APP_NAME} v{cfg.APP_VERSION}")
    logger.info(f"Entorno: {cfg.ENVIRONMENT}")

    jobs = list(JOB_ORDER) if args.job == "all" else [args.job]
    exit_code = 0

    try:
        engine = get_engine(cfg.effective_database_url)
        if args.init_db:
            init_db(engine)
            logger.info("Base de datos inicializada")

        fetcher = PaginatedFetcher(UnleashedClient.from_settings(cfg))
        notifier = build_notifier(cfg)

        for name in jobs:
            with advisory_lock(engine, name) as acquired:
                if not acquired:
                    exit_code = exit_code or 3
                    continue
                try:
                    with session_scope() as session:
                        job = build_job(
                            name,
                            session=session,
                            fetcher=fetcher,
                            notifier=notifier,
                            settings=cfg,
                        )
                        report = job.run(preview=args.preview)
                except SyncException as e:
                    logger.bind(**e.to_dict()).error(f"Job '{name}' abortado {e}")
                    exit_code = e.exit_code
                    continue
            print(report.text)
    except SyncException as e:
        logger.bind(**e.to_dict()).error(str(e))
        return e.exit_code
    finally:
        close_db()

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
