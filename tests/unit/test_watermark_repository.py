from datetime import datetime, timezone

import pytest

from inventory_sync.infrastructure.repositories.watermark_repository import (
    WatermarkRepository,
    max_external_last_edited,
)
from inventory_sync.shared.exceptions.sync import SyncConfigError

# 2018-06-11T22:22:46Z y 2018-06-11T22:22:47Z
EARLY = "/Date(1528755766000)/"
LATE = "/Date(1528755767000)/"


def test_max_external_last_edited():
    records = [{"LastModifiedOn": EARLY}, {"LastModifiedOn": LATE}, {"LastModifiedOn": EARLY}]
    assert max_external_last_edited(records, "LastModifiedOn") == datetime(
        2018, 6, 11, 22, 22, 47, tzinfo=timezone.utc
    )
    assert max_external_last_edited([], "LastModifiedOn") is None


def test_max_external_last_edited_missing_field():
    with pytest.raises(SyncConfigError):
        max_external_last_edited([{"LastModifiedOn": EARLY}, {"Other": 1}], "LastModifiedOn")


def test_max_external_last_edited_unparseable():
    with pytest.raises(SyncConfigError):
        max_external_last_edited([{"LastModifiedOn": "ayer"}], "LastModifiedOn")


def test_get_unknown_job_returns_none(db_session):
    assert WatermarkRepository(db_session).get("ProductUpdate") is None


def test_advance_creates_watermark_at_batch_max(db_session):
    repo = WatermarkRepository(db_session)

    watermark = repo.advance("ProductUpdate", "LastModifiedOn", [{"LastModifiedOn": EARLY}, {"LastModifiedOn": LATE}])

    assert watermark.job_name == "ProductUpdate"
    assert watermark.external_key_name == "LastModifiedOn"
    assert watermark.external_last_edited == datetime(2018, 6, 11, 22, 22, 47, tzinfo=timezone.utc)
    assert repo.get("ProductUpdate") == watermark


def test_advance_with_empty_batch_is_noop(db_session):
    repo = WatermarkRepository(db_session)
    repo.advance("OrderUpdate", "LastModifiedOn", [{"LastModifiedOn": EARLY}])

    assert repo.advance("OrderUpdate", "LastModifiedOn", []) is None
    assert repo.get("OrderUpdate").external_last_edited == datetime(
        2018, 6, 11, 22, 22, 46, tzinfo=timezone.utc
    )


def test_advance_never_moves_backwards(db_session):
    repo = WatermarkRepository(db_session)
    repo.advance("OrderUpdate", "LastModifiedOn", [{"LastModifiedOn": LATE}])

    watermark = repo.advance("OrderUpdate", "LastModifiedOn", [{"LastModifiedOn": EARLY}])

    assert watermark.external_last_edited == datetime(2018, 6, 11, 22, 22, 47, tzinfo=timezone.utc)


def test_watermarks_are_per_job(db_session):
    repo = WatermarkRepository(db_session)
    repo.advance("OrderUpdate", "LastModifiedOn", [{"LastModifiedOn": LATE}])

    assert repo.get("ProductUpdate") is None
