"""
Account Ledger - Transaction Engine Service

A FastAPI-based service that applies idempotent credit/debit transactions
to investor accounts, supports reversals and CSV bulk ingestion.
"""

__version__ = "0.1.0"
