# tests/utils/test_k8s_utils.py

from decimal import Decimal

import pytest

from promhpa.utils.k8s_utils import format_label_selector, parse_milli_value, parse_quantity


def test_parse_cpu_units():
    """CPU quantities are normalised to millicores."""
    assert parse_milli_value("1") == 1000  # 1 core
    assert parse_milli_value("500m") == 500
    assert parse_milli_value("0.25") == 250
    assert parse_milli_value("2.5") == 2500
    assert parse_milli_value(3) == 3000


def test_parse_milli_value_rounds_up():
    """Sub-milli quantities round up, as the API server's MilliValue does."""
    assert parse_milli_value("10n") == 1
    assert parse_milli_value("1500u") == 2
    assert parse_milli_value("0") == 0


def test_parse_quantity_suffixes():
    assert parse_quantity("1Ki") == 1024
    assert parse_quantity("1Gi") == 1024**3
    assert parse_quantity("1G") == 1000**3
    assert parse_quantity("1k") == 1000
    assert parse_quantity("250m") == Decimal("0.25")


@pytest.mark.parametrize("bad", ["", "abc", "12x", "NaN", "m"])
def test_parse_quantity_rejects_garbage(bad):
    with pytest.raises(ValueError):
        parse_quantity(bad)


def test_format_label_selector():
    assert format_label_selector("app=web,tier!=db") == "app=web,tier!=db"
    assert format_label_selector({"app": "web", "tier": "frontend"}) == "app=web,tier=frontend"
    assert format_label_selector({}) == ""
    assert format_label_selector(None) == ""
