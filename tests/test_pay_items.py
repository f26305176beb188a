"""
Pay item normalisation and catalog tests.
"""

import pytest

from qto.boq.pay_items import (
    PayItemCatalog,
    base_item_number,
    is_valid_pay_item_format,
    normalize_pay_item_number,
    normalize_unit,
    pay_items_match,
    trade_from_pay_item,
)


@pytest.mark.parametrize("raw, expected", [
    ("900 (1) c", "900 (1)C"),
    ("900 (1)c", "900 (1)C"),
    ("800 (3) a1", "800 (3)A1"),
    ("902 (1) a7", "902 (1)A7"),
    ("  900  (1)   c ", "900 (1)C"),
    ("", ""),
    (None, ""),
])
def test_normalize_pay_item_number(raw, expected):
    assert normalize_pay_item_number(raw) == expected


def test_pay_items_match():
    assert pay_items_match("900 (1) c", "900 (1)c")
    assert pay_items_match("800 (3)a1", "800 (3) A1")
    assert not pay_items_match("900 (1)c", "900 (2)c")
    assert not pay_items_match("800 (1)", "801 (1)")


def test_normalize_unit():
    assert normalize_unit("cu.m") == "Cubic Meter"
    assert normalize_unit("CUBIC METER") == "Cubic Meter"
    assert normalize_unit("kilograms") == "Kilogram"
    assert normalize_unit("Piece") == "Each"
    assert normalize_unit("Tonne") == "Tonne"


def test_base_item_number():
    assert base_item_number("900 (1) c") == "900"
    assert base_item_number("1500 (1)") == "1500"
    assert base_item_number("(1)") == ""


@pytest.mark.parametrize("item, trade", [
    ("900 (1) c", "Concrete"),
    ("901 (1)", "Concrete"),
    ("902 (1) a7", "Rebar"),
    ("903 (1)", "Formwork"),
    ("802 (1)", "Earthwork"),
    ("1050 (1)", "Finishes"),
    ("1100 (1)", "Roofing"),
    ("1500 (1)", "Marine Works"),
    ("9999 (1)", "Other"),
    ("abc", "Other"),
])
def test_trade_from_pay_item(item, trade):
    assert trade_from_pay_item(item) == trade


def test_pay_item_format():
    assert is_valid_pay_item_format("900 (1)")
    assert is_valid_pay_item_format("900 (1) c")
    assert is_valid_pay_item_format("800 (3)a1")
    assert not is_valid_pay_item_format("900")
    assert not is_valid_pay_item_format("(1)")
    assert not is_valid_pay_item_format("invalid")
    assert not is_valid_pay_item_format("")


# ============================================================
# Catalog
# ============================================================

def test_catalog_from_csv(tmp_path):
    path = tmp_path / "items.csv"
    path.write_text(
        "item_number,description,unit,trade\n"
        "900 (1) c,Structural Concrete Class A,cu.m,\n"
        "1018 (1),Ceramic Tile,sq.m,Finishes\n"
        ",skipped row,kg,\n",
        encoding="utf-8",
    )
    catalog = PayItemCatalog.from_csv(path)
    assert len(catalog) == 2
    item = catalog.get("900 (1)C")
    assert item.description == "Structural Concrete Class A"
    assert item.unit == "Cubic Meter"
    assert item.trade == "Concrete"
    assert "1018 (1)" in catalog
    assert catalog.describe("999 (9)") == "999 (9)"


def test_catalog_missing_file_is_empty(tmp_path):
    catalog = PayItemCatalog.from_csv(tmp_path / "missing.csv")
    assert len(catalog) == 0


def test_bundled_catalog_has_default_items():
    catalog = PayItemCatalog.from_csv()
    for number in ("900 (1) c", "903 (1)", "803 (1) a", "804 (1) a", "902 (1) a2"):
        assert number in catalog
