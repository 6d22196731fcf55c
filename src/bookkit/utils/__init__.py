"""Utility functions for bookkit."""

from bookkit.utils.date_parser import parse_date, parse_month
from bookkit.utils.amount_parser import parse_amount
from bookkit.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_month", "parse_amount", "resolve_account"]
