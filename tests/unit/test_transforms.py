from inventory_sync.application.services.transforms import (
    FieldMapping,
    RecordHandle,
    raw2url,
    title_with_url_segment,
    to_float,
)


def test_raw2url():
    assert raw2url("Widgets Updated") == "widgets-updated"
    assert raw2url("Café & Té 500g") == "cafe-te-500g"
    assert raw2url("  --Hello!!  World-- ") == "hello-world"
    assert raw2url(None) == ""


def test_title_transform_returns_title_and_sets_url_segment():
    handle = RecordHandle({"title": "Old", "url_segment": "old"})
    value = title_with_url_segment()("New Title", handle)
    assert value == "New Title"
    assert handle.get("url_segment") == "new-title"


def test_to_float():
    handle = RecordHandle()
    assert to_float("12.50", handle) == 12.5
    assert to_float(3, handle) == 3.0
    assert to_float(None, handle) is None


def test_handle_changes_only_reports_differences():
    handle = RecordHandle({"title": "Same", "base_price": 10.0})
    handle.set("title", "Same")
    handle["base_price"] = 12.0
    assert handle.changes() == {"base_price": (10.0, 12.0)}
    assert handle.staged == {"title": "Same", "base_price": 12.0}


def test_handle_get_prefers_staged_value():
    handle = RecordHandle({"title": "Before"})
    assert handle["title"] == "Before"
    handle["title"] = "After"
    assert handle["title"] == "After"
    assert handle.get("missing", "default") == "default"


def test_field_mapping_without_transform_passes_raw_value():
    mapping = FieldMapping("Guid", "guid")
    assert mapping.apply("G1", RecordHandle()) == "G1"
