"""
Personal Ledger - Source Package

Records dated income and expense entries, shows them for the current day
or grouped by month, and keeps them in a local SQLite file.

DESIGN PRINCIPLES:
1. The record store is the only writer
2. Memory first, disk second; failed writes are logged, never fatal
3. Lookups are binary searches over explicitly sorted collections
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
