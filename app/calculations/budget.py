"""
Budget Calculations

Progress of spending against a budget target.
"""

import math
from dataclasses import dataclass


@dataclass
class BudgetProgress:
    """Share of a budget consumed and whether it has been exceeded."""

    percentage: int
    is_over_budget: bool


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going toward +infinity."""
    return math.floor(value + 0.5)


def calculate_budget_progress(current: float, target: float) -> BudgetProgress:
    """
    Calculate how much of a budget has been spent.

    A zero target counts as fully consumed, and over budget only when
    something has been spent against it.

    Args:
        current: Amount spent so far
        target: Budgeted amount

    Returns:
        BudgetProgress with a whole-number percentage (may exceed 100)
    """
    if target == 0:
        return BudgetProgress(percentage=100, is_over_budget=current > 0)

    percentage = round_half_up(current / target * 100)
    return BudgetProgress(percentage=percentage, is_over_budget=percentage > 100)
