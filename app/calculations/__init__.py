"""
Financial Calculation Engine

Pure calculation modules for personal finance: mortgages, pensions and
savings, budgets, salary and transaction categorization.
"""

from app.calculations import (
    budget,
    categorization,
    formatting,
    mortgage,
    pension,
    salary,
)

__all__ = ["budget", "categorization", "formatting", "mortgage", "pension", "salary"]
