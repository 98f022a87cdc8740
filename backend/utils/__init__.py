"""Shared utility functions for the eligibility backend."""

from .date_parser import parse_flexible_date
from .money import calculate_remaining, round_currency

__all__ = ["calculate_remaining", "parse_flexible_date", "round_currency"]
