"""Utility functions for workshopmgr."""

from workshopmgr.utils.date_parser import parse_date, parse_time
from workshopmgr.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_time", "parse_amount"]
