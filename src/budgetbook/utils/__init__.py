"""Utility functions for budgetbook."""

from budgetbook.utils.amount_parser import parse_amount
from budgetbook.utils.period_parser import parse_period_input

__all__ = ["parse_amount", "parse_period_input"]
