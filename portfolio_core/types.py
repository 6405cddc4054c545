"""
Ledger result types: trade status, error kinds, holdings view.

buy/sell return a TradeResult instead of raising, so callers handle
rejection explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from portfolio_core.instrument import Instrument
from portfolio_core.transaction import Transaction


class TradeStatusKind(Enum):
    """Outcome of a buy or sell against the ledger."""

    FILLED = "filled"
    REJECTED = "rejected"


class LedgerErrorKind(Enum):
    """Why a trade was rejected. All are recoverable by the caller."""

    NOT_FOUND = "not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_SHARES = "insufficient_shares"
    INVALID_QUANTITY = "invalid_quantity"


@dataclass(frozen=True)
class TradeResult:
    """Result of a trade. transaction is set when filled, error when rejected."""

    status: TradeStatusKind
    transaction: Transaction | None = None
    error: LedgerErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == TradeStatusKind.FILLED

    @classmethod
    def filled(cls, transaction: Transaction) -> "TradeResult":
        return cls(status=TradeStatusKind.FILLED, transaction=transaction)

    @classmethod
    def rejected(cls, error: LedgerErrorKind, message: str) -> "TradeResult":
        return cls(status=TradeStatusKind.REJECTED, error=error, message=message)


@dataclass(frozen=True)
class Holding:
    """Read-only view of one position: the instrument and the shares held."""

    instrument: Instrument
    quantity: int

    @property
    def symbol(self) -> str:
        return self.instrument.symbol

    @property
    def market_value(self) -> float:
        return self.quantity * self.instrument.current_price
