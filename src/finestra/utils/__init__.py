"""Utility functions for finestra."""

from finestra.utils.date_parser import parse_date
from finestra.utils.amount_parser import parse_amount, quantize_amount

__all__ = ["parse_date", "parse_amount", "quantize_amount"]
