"""
Transaction: immutable record of an executed buy or sell.

Appended to the ledger's transaction log; never modified afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TransactionType(Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Transaction:
    """One fill. total is quantity * price at execution."""

    type: TransactionType
    symbol: str
    quantity: int
    price: float
    timestamp: datetime

    @property
    def total(self) -> float:
        return self.quantity * self.price
