"""Utility functions for erpcl."""

from erpcl.utils.date_parser import parse_date
from erpcl.utils.money import format_pesos, parse_pesos
from erpcl.utils.rut import format_rut, is_valid_rut

__all__ = ["parse_date", "parse_pesos", "format_pesos", "format_rut", "is_valid_rut"]
