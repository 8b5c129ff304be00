"""Utility functions for bankledger."""

from bankledger.utils.date_parser import parse_date
from bankledger.utils.amount_parser import normalize_amount, parse_amount

__all__ = ["parse_date", "normalize_amount", "parse_amount"]
