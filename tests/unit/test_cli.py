from __future__ import annotations

import pytest
from loguru import logger

from inventory_sync import cli
from tests.conftest import FakeFetcher


def test_parser_accepts_jobs_and_flags() -> None:
    args = cli.build_parser().parse_args(["products", "--preview", "--init-db"])
    assert args.job == "products"
    assert args.preview
    assert args.init_db
    assert args.env_file is None


def test_parser_rejects_unknown_job() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["invoices"])


def _env_file(tmp_path, *lines: str):
    path = tmp_path / "sync.env"
    path.write_text(
        "\n".join([f"DATABASE_URL=sqlite:///{tmp_path / 'shop.db'}", "LOG_FILE=", *lines]) + "\n",
        encoding="utf-8",
    )
    return str(path)


def test_main_runs_job_against_sqlite(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda *args: None)
    monkeypatch.setattr(cli, "PaginatedFetcher", lambda client: FakeFetcher([]))
    env_file = _env_file(tmp_path, "UNLEASHED_API_ID=id", "UNLEASHED_API_KEY=key")

    exit_code = cli.main(["orders", "--init-db", "--env-file", env_file])

    assert exit_code == 0
    assert "Unleashed: Update Orders" in capsys.readouterr().out


def test_main_without_credentials_exits_with_config_error(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda *args: None)
    exit_code = cli.main(["orders", "--init-db", "--env-file", _env_file(tmp_path)])
    assert exit_code == 2


def test_main_logs_app_name_version_and_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda *args: None)
    monkeypatch.setattr(cli, "PaginatedFetcher", lambda client: FakeFetcher([]))
    env_file = _env_file(
        tmp_path,
        "UNLEASHED_API_ID=id",
        "UNLEASHED_API_KEY=key",
        "APP_NAME=Tienda Sync",
        "APP_VERSION=2.3.0",
        "ENVIRONMENT=staging",
    )
    messages: list = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="INFO")
    try:
        assert cli.main(["categories", "--init-db", "--env-file", env_file]) == 0
    finally:
        logger.remove(handler_id)

    assert "Iniciando Tienda Sync v2.3.0" in messages
    assert "Entorno: staging" in messages
