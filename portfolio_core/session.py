"""
Portfolio session: the explicit owner of one Ledger for a user session.

Translates raw user input into validated (symbol, quantity) pairs, forwards
trades to the ledger, logs fills and rejections, notifies observers, and
records an equity curve on each market tick. One lock per session guards
every ledger access.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from portfolio_core.config import LedgerConfig, build_ledger
from portfolio_core.instrument import Instrument
from portfolio_core.ledger import Ledger
from portfolio_core.transaction import Transaction, TransactionType
from portfolio_core.types import LedgerErrorKind, TradeResult

logger = logging.getLogger(__name__)


class TradeObserver(Protocol):
    """Post-trade callback, called after each fill."""

    def __call__(self, transaction: Transaction, ledger: Ledger) -> None:
        ...


@dataclass(frozen=True)
class RejectedTrade:
    """One entry for a rejected buy or sell, with the raw input that caused it."""

    side: TransactionType
    symbol: str
    quantity: str
    error: LedgerErrorKind
    message: str
    timestamp: datetime


def _normalize_symbol(symbol_text: object) -> str:
    return str(symbol_text or "").strip().upper()


def parse_order(symbol_text: object, quantity_text: str | int) -> tuple[str, int] | TradeResult:
    """
    Normalize raw input: symbol stripped and upper-cased, quantity parsed as int.
    Returns (symbol, quantity), or a rejected TradeResult when the input is unusable.
    Range checks (positive quantity, known symbol) are left to the ledger.
    """
    symbol = _normalize_symbol(symbol_text)
    if not symbol:
        return TradeResult.rejected(LedgerErrorKind.NOT_FOUND, "Symbol is required")
    if isinstance(quantity_text, bool):
        return TradeResult.rejected(LedgerErrorKind.INVALID_QUANTITY, f"Invalid quantity: {quantity_text!r}")
    if isinstance(quantity_text, int):
        return symbol, quantity_text
    try:
        quantity = int(str(quantity_text).strip())
    except ValueError:
        return TradeResult.rejected(LedgerErrorKind.INVALID_QUANTITY, f"Invalid quantity: {quantity_text!r}")
    return symbol, quantity


class PortfolioSession:
    """
    Session-scoped wrapper around a Ledger. Pass it explicitly to whatever
    serves the user; there is no module-level instance.
    """

    def __init__(
        self,
        ledger: Ledger,
        *,
        observers: Sequence[TradeObserver] = (),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.ledger = ledger
        self.observers: list[TradeObserver] = list(observers)
        self._clock = clock
        self._lock = threading.Lock()
        self._rejected_log: list[RejectedTrade] = []
        self._equity_curve: list[tuple[datetime, float]] = [(clock(), ledger.total_value())]

    @classmethod
    def from_config(cls, config: LedgerConfig | None = None, **kwargs) -> "PortfolioSession":
        """New session over a ledger built from config (env defaults when None)."""
        return cls(build_ledger(config or LedgerConfig.from_env()), **kwargs)

    @property
    def equity_curve(self) -> list[tuple[datetime, float]]:
        """(timestamp, total value) at creation and after each tick."""
        with self._lock:
            return list(self._equity_curve)

    def get_rejected_log(self) -> list[RejectedTrade]:
        """Return log of rejected trades for display and debugging."""
        with self._lock:
            return list(self._rejected_log)

    def buy(self, symbol_text: str, quantity_text: str | int) -> TradeResult:
        return self._trade(TransactionType.BUY, symbol_text, quantity_text)

    def sell(self, symbol_text: str, quantity_text: str | int) -> TradeResult:
        return self._trade(TransactionType.SELL, symbol_text, quantity_text)

    def _trade(self, side: TransactionType, symbol_text: str, quantity_text: str | int) -> TradeResult:
        parsed = parse_order(symbol_text, quantity_text)
        with self._lock:
            if isinstance(parsed, TradeResult):
                result = parsed
            else:
                symbol, quantity = parsed
                if side == TransactionType.BUY:
                    result = self.ledger.buy(symbol, quantity)
                else:
                    result = self.ledger.sell(symbol, quantity)

            if not result.ok:
                self._rejected_log.append(
                    RejectedTrade(
                        side=side,
                        symbol=str(symbol_text),
                        quantity=str(quantity_text),
                        error=result.error,
                        message=result.message or "",
                        timestamp=self._clock(),
                    )
                )
                logger.info("Trade rejected (%s %s x %s): %s", side.value, symbol_text, quantity_text, result.message)
                return result

            txn = result.transaction
            logger.info(
                "Trade filled: %s %d %s @ %.2f (total %.2f), cash=%.2f",
                txn.type.value,
                txn.quantity,
                txn.symbol,
                txn.price,
                txn.total,
                self.ledger.cash_balance,
            )

        # Observers run outside the lock so they may call back into the session.
        for obs in self.observers:
            obs(txn, self.ledger)
        return result

    def search(self, symbol_text: str) -> Instrument | None:
        """Look up a catalog instrument from raw input."""
        with self._lock:
            return self.ledger.find_stock(_normalize_symbol(symbol_text))

    def tick(self) -> float:
        """Simulate one market movement; record and return the new total value."""
        with self._lock:
            self.ledger.simulate_market_movement()
            value = self.ledger.total_value()
            self._equity_curve.append((self._clock(), value))
        logger.debug("Market tick: total value %.2f", value)
        return value
