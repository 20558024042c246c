"""
Tests del motor de reconciliación contra una base sqlite en memoria.
"""
from inventory_sync.application.services.reconciliation import NaturalKey, ReconciliationEngine
from inventory_sync.application.services.transforms import FieldMapping, title_with_url_segment
from inventory_sync.infrastructure.database.models import OrderModel, ProductCategoryModel
from inventory_sync.infrastructure.repositories.record_repository import LocalRecordRepository

CATEGORY_KEY = NaturalKey(
    remote_field="Guid",
    local_field="guid",
    fallback_remote_field="GroupName",
    fallback_local_field="title",
)
CATEGORY_MAPPINGS = (
    FieldMapping("GroupName", "title", transform=title_with_url_segment()),
    FieldMapping("Guid", "guid"),
)


def _seed_categories(db_session):
    widgets = ProductCategoryModel(title="Widgets", url_segment="widgets", guid="G1")
    gadgets = ProductCategoryModel(title="Gadgets", url_segment="gadgets", guid="")
    db_session.add_all([widgets, gadgets])
    db_session.commit()
    return widgets, gadgets


def _engine(db_session, model=ProductCategoryModel):
    return ReconciliationEngine(LocalRecordRepository(db_session, model))


def test_category_update_matched_by_guid(db_session):
    widgets, gadgets = _seed_categories(db_session)
    engine = _engine(db_session)
    remote = [{"Guid": "G1", "GroupName": "Widgets Updated"}]

    cleared = engine.clear_absent(remote, "Guid", "guid")
    updated = engine.reconcile(remote, CATEGORY_KEY, CATEGORY_MAPPINGS)

    assert cleared.cleared_count == 0
    assert updated.updated_count == 1
    assert widgets.title == "Widgets Updated"
    assert widgets.url_segment == "widgets-updated"
    assert gadgets.title == "Gadgets"
    assert updated.diffs[0].changes["title"] == ("Widgets", "Widgets Updated")


def test_category_fallback_by_title_links_guid(db_session):
    _, gadgets = _seed_categories(db_session)
    engine = _engine(db_session)

    result = engine.reconcile([{"Guid": "G2", "GroupName": "Gadgets"}], CATEGORY_KEY, CATEGORY_MAPPINGS)

    assert result.updated_count == 1
    assert gadgets.guid == "G2"
    assert result.diffs[0].changes == {"guid": ("", "G2")}


def test_reconcile_is_idempotent(db_session):
    _seed_categories(db_session)
    engine = _engine(db_session)
    remote = [{"Guid": "G1", "GroupName": "Widgets Updated"}]

    first = engine.reconcile(remote, CATEGORY_KEY, CATEGORY_MAPPINGS)
    second = engine.reconcile(remote, CATEGORY_KEY, CATEGORY_MAPPINGS)

    assert first.updated_count == 1
    assert second.updated_count == 0
    assert second.diffs == []


def test_dry_run_reports_but_does_not_write(db_session):
    widgets, _ = _seed_categories(db_session)
    engine = _engine(db_session)

    result = engine.reconcile(
        [{"Guid": "G1", "GroupName": "Widgets Updated"}], CATEGORY_KEY, CATEGORY_MAPPINGS, dry_run=True
    )

    assert result.updated_count == 1
    assert widgets.title == "Widgets"
    assert widgets.url_segment == "widgets"


def test_unmatched_records_are_skipped_without_allow_create(db_session):
    _seed_categories(db_session)
    engine = _engine(db_session)

    result = engine.reconcile([{"Guid": "G9", "GroupName": "Nueva"}], CATEGORY_KEY, CATEGORY_MAPPINGS)

    assert result.skipped_count == 1
    assert result.total == 0
    assert db_session.query(ProductCategoryModel).count() == 2


def test_allow_create_inserts_new_record(db_session):
    engine = _engine(db_session)

    result = engine.reconcile(
        [{"Guid": "G9", "GroupName": "Nueva Línea"}], CATEGORY_KEY, CATEGORY_MAPPINGS, allow_create=True
    )

    assert result.created_count == 1
    created = db_session.query(ProductCategoryModel).filter_by(guid="G9").one()
    assert created.title == "Nueva Línea"
    assert created.url_segment == "nueva-linea"


def test_record_without_key_is_reported(db_session):
    engine = _engine(db_session)

    result = engine.reconcile([{"Description": "sin clave"}], CATEGORY_KEY, CATEGORY_MAPPINGS)

    assert result.total == 0
    assert [e.error_code for e in result.errors] == ["MISSING_KEY"]


def test_required_field_missing_is_reported(db_session):
    db_session.add(OrderModel(reference="SO-1", status="Unpaid"))
    db_session.commit()
    engine = _engine(db_session, OrderModel)

    result = engine.reconcile(
        [{"OrderNumber": "SO-1"}],
        NaturalKey("OrderNumber", "reference"),
        (FieldMapping("OrderStatus", "status", required=True),),
    )

    assert result.updated_count == 0
    assert result.errors[0].key == "SO-1"
    assert result.errors[0].error_code == "MISSING_FIELD"


def test_clear_absent_unlinks_but_never_deletes(db_session):
    widgets, _ = _seed_categories(db_session)
    engine = _engine(db_session)

    result = engine.clear_absent([{"Guid": "G7", "GroupName": "Otra"}], "Guid", "guid")

    assert result.cleared_count == 1
    assert result.diffs[0].key == "G1"
    assert result.diffs[0].action == "cleared"
    assert widgets.guid is None
    assert db_session.query(ProductCategoryModel).count() == 2


def test_clear_absent_dry_run(db_session):
    widgets, _ = _seed_categories(db_session)
    engine = _engine(db_session)

    result = engine.clear_absent([], "Guid", "guid", dry_run=True)

    assert result.cleared_count == 1
    assert widgets.guid == "G1"
