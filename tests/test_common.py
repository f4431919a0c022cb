"""Unit tests for id, code and number helpers."""

import re

from multistore.utils.common import generate_invoice_number, generate_order_number, generate_otp


def test_order_number_format():
    assert re.fullmatch(r"ORD\d{12}", generate_order_number())


def test_invoice_number_mirrors_order_number():
    assert generate_invoice_number("ORD250101123456") == "INV250101123456"


def test_otp_is_six_digits():
    assert all(re.fullmatch(r"\d{6}", generate_otp()) for _ in range(50))
