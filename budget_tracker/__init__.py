"""
Budget Tracker - Source Package

A personal finance tracker: sign in, record income and expenses,
search the history and see totals and trends.

DESIGN PRINCIPLES:
1. All state lives in a local keyed store, one document per key
2. Form errors are ordinary results, never crashes
3. Aggregation is pure and recomputed on demand
4. The acting user is always passed explicitly
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
