from inventory_sync.application.services.duplicate_validator import check_unique, find_duplicates


def test_find_duplicates_reports_each_value_once():
    assert find_duplicates(["A", "B", "A", "C", "A", "B"]) == {"A", "B"}


def test_find_duplicates_empty_when_unique():
    assert find_duplicates(["A", "B", "C"]) == set()
    assert find_duplicates([]) == set()


def test_find_duplicates_ignores_blank_values():
    # Productos sin código no pueden emparejar nada: no cuentan como duplicados
    assert find_duplicates([None, None, "", "", "X"]) == set()


def test_find_duplicates_compares_as_strings():
    assert find_duplicates([1, "1", 2]) == {"1"}


def test_check_unique_result():
    check = check_unique("remote", "ProductCode", ["P1", "P2", "P1"])
    assert not check.ok
    assert check.scope == "remote"
    assert check.field == "ProductCode"
    assert check.duplicates == frozenset({"P1"})

    assert check_unique("local", "title", ["Widgets", "Gadgets"]).ok
