"""Utility functions for kedai."""

from kedai.utils.date_parser import parse_date
from kedai.utils.amount_parser import parse_price, format_price
from kedai.utils.clock import now_ms
from kedai.utils.ids import generate_id

__all__ = ["parse_date", "parse_price", "format_price", "now_ms", "generate_id"]
