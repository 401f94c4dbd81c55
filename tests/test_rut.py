"""Tests for RUT validation and formatting."""

import pytest

from erpcl.utils.rut import check_digit, clean_rut, format_rut, is_valid_rut


@pytest.mark.parametrize(
    "body, digit",
    [("12345678", "5"), ("9876543", "3"), ("76123456", "0"), ("10000013", "K")],
)
def test_check_digit(body, digit):
    assert check_digit(body) == digit


def test_clean_rut():
    assert clean_rut(" 12.345.678-k ") == "12345678K"
    assert clean_rut(None) == ""


@pytest.mark.parametrize("rut", ["12.345.678-5", "123456785", "10000013-k", "76.123.456-0"])
def test_valid(rut):
    assert is_valid_rut(rut)


@pytest.mark.parametrize("rut", ["12.345.678-9", "", "K", "abc-5", "1234567890-1"])
def test_invalid(rut):
    assert not is_valid_rut(rut)


def test_format_rut():
    assert format_rut("123456785") == "12.345.678-5"
    assert format_rut("9876543-3") == "9.876.543-3"
    assert format_rut("10000013k") == "10.000.013-K"


def test_format_malformed_rut():
    with pytest.raises(ValueError):
        format_rut("not a rut")
