"""Currency helpers for coverage figures."""

from __future__ import annotations


def round_currency(amount: float) -> float:
    """Round a dollar amount to cents."""
    return round(amount, 2)


def calculate_remaining(total: float, used: float) -> float:
    """Return ``total - used`` rounded to cents, never below zero."""
    return max(round_currency(total - used), 0.0)
