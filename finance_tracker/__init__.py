"""
Finance Tracker - Source Package

A personal-finance tracker: transactions, categories and budgets held
in a per-session ledger, and a dashboard derived from it.

PRINCIPLES:
1. The ledger store is the single owner of the data
2. Editors work on drafts, nothing is committed before validation
3. The dashboard is recomputed from a snapshot, never patched
4. Every mutation is auditable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
