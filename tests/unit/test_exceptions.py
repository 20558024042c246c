from inventory_sync.shared.exceptions import DuplicateKeyError, SyncConfigError, UnexpectedStatus


def test_duplicate_key_error_sorts_values() -> None:
    error = DuplicateKeyError("remote", "ProductCode", {"P2", "P1"})

    assert error.duplicates == ["P1", "P2"]
    assert error.exit_code == 1
    assert str(error).startswith("[DUPLICATE_KEY] Duplicados de 'ProductCode' en remote: P1, P2")
    assert error.to_dict()["details"] == {"scope": "remote", "field": "ProductCode", "duplicates": ["P1", "P2"]}


def test_config_error_exit_code() -> None:
    error = SyncConfigError("Faltan credenciales", field="UNLEASHED_API_ID")

    assert error.exit_code == 2
    assert error.details == {"field": "UNLEASHED_API_ID"}


def test_unexpected_status_truncates_body() -> None:
    error = UnexpectedStatus("https://api.example.test/Products", 502, "x" * 2000)

    assert error.status_code == 502
    assert len(error.details["body"]) == 500
