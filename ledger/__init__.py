"""
Finance Ledger - Source Package

A terminal personal-finance ledger: income and expense tracking,
category budgets, statistics and transfers between registered users.

DESIGN PRINCIPLES:
1. Validate first, mutate second
2. Warnings never block an operation
3. The balance is authoritative, history is append-only
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Ledger Team"
