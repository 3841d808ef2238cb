"""
Bulk ingestion helpers.

Pure parsing functions with no I/O, kept apart from the application
services so they can be tested in isolation.
"""

from .csv_parser import REQUIRED_COLUMNS, parse_transaction_csv

__all__ = [
    "REQUIRED_COLUMNS",
    "parse_transaction_csv",
]
