"""
InverTrack - Source Package

A personal portfolio tracker: named cash accounts with an annual yield,
an optional semi-monthly salary and one-off extra incomes, summarized
into portfolio metrics and projected day by day with daily compounding.

DESIGN PRINCIPLES:
1. The projection engine is pure: same inputs, same ledger
2. Derived state is recomputed on demand, never stored
3. Storage and the AI collaborator are swappable
"""

__version__ = "1.0.0"
__author__ = "InverTrack Team"
