"""
Customer Rewards Tracker

This module provides:
- Loyalty point balances keyed by 10-digit phone number
- Credit flow: purchase amount rounded to whole points
- Debit flow: redemption rejected when the balance is insufficient
- SQLite-backed ledger store created on first use
"""

from .exceptions import RewardsError, ValidationError, StoreError
from .models import Account
from .service import RewardsService, is_valid_phone
from .store import LedgerStore

__all__ = [
    "RewardsError",
    "ValidationError",
    "StoreError",
    "Account",
    "RewardsService",
    "is_valid_phone",
    "LedgerStore",
]
