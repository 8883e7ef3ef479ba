"""
Expense Ledger - Source Package

A single-user expense tracker: dated, categorized expenses entered
through a web form, kept in one JSON file, totalled by category and
by month for charting.

DESIGN PRINCIPLES:
1. Every request reloads the full collection; no hidden state
2. Validation reports every problem at once and never silently fixes
3. Stored text is raw; escaping happens only when rendering
4. Writes are atomic and serialized per data file
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Ledger Team"
