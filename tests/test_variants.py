"""Unit tests for the color x size variant generator."""

from decimal import Decimal

from multistore.services.variants import build_variant_matrix, clean_values

BASE = {
    "sku": "TSHIRT",
    "mrp": Decimal("999"),
    "selling_price": Decimal("799"),
    "purchase_price": Decimal("400"),
    "weight": Decimal("0.2"),
    "length": None,
    "breadth": None,
    "height": None,
}


def test_clean_values_trims_and_dedupes():
    assert clean_values([" Red", "", "red", "Red ", "  ", "Blue"]) == ["Red", "red", "Blue"]
    assert clean_values(None) == []


def test_full_matrix_is_color_major():
    rows = build_variant_matrix(BASE, ["Red", "Blue"], ["s", "m"])

    assert [r["sku"] for r in rows] == [
        "TSHIRT-RED-S", "TSHIRT-RED-M", "TSHIRT-BLUE-S", "TSHIRT-BLUE-M",
    ]
    assert rows[0]["color"] == "Red"
    assert rows[0]["size"] == "s"


def test_rows_inherit_base_pricing():
    row = build_variant_matrix(BASE, ["Red"], ["M"])[0]

    assert row["mrp"] == Decimal("999")
    assert row["selling_price"] == Decimal("799")
    assert row["purchase_price"] == Decimal("400")
    assert row["weight"] == Decimal("0.2")
    assert row["stock"] == 0
    assert row["image_urls"] == []


def test_single_axis():
    assert [r["sku"] for r in build_variant_matrix(BASE, ["Red"], [])] == ["TSHIRT-RED"]
    assert [r["sku"] for r in build_variant_matrix(BASE, [], ["xl"])] == ["TSHIRT-XL"]


def test_no_axes_gives_nothing():
    assert build_variant_matrix(BASE, [" "], []) == []
