"""
Instrument: one tradable stock and its observed price sequence.

Mutable only through update_price. The ledger shares instances by reference
with its callers; callers treat them as read-only.
"""

from __future__ import annotations

import math

import numpy as np


def checked_price(symbol: str, price: float) -> float:
    """Price as float. Must be finite and positive."""
    price = float(price)
    if not math.isfinite(price) or price <= 0:
        raise ValueError(f"{symbol}: price must be finite and positive, got {price}")
    return price


class Instrument:
    """
    A stock in the catalog. symbol and initial_price never change;
    price_history is append-only and always ends with current_price.
    History is unbounded (session-scoped use).
    """

    def __init__(self, symbol: str, name: str, current_price: float, sector: str = "Technology") -> None:
        self._symbol = symbol
        self.name = name
        self.sector = sector
        self._initial_price = checked_price(symbol, current_price)
        self._current_price = self._initial_price
        self._price_history: list[float] = [self._initial_price]

    def __repr__(self) -> str:
        return (
            f"Instrument(symbol={self._symbol!r}, name={self.name!r}, "
            f"current_price={self._current_price!r}, sector={self.sector!r})"
        )

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def initial_price(self) -> float:
        return self._initial_price

    @property
    def current_price(self) -> float:
        return self._current_price

    @property
    def price_history(self) -> list[float]:
        """Copy of the recorded prices, oldest first."""
        return list(self._price_history)

    def update_price(self, new_price: float) -> None:
        """Record a new observed price. Flooring is the caller's job."""
        price = checked_price(self._symbol, new_price)
        self._price_history.append(price)
        self._current_price = price

    def performance(self) -> float:
        """Percent change of current price vs initial price."""
        return (self._current_price - self._initial_price) / self._initial_price * 100.0

    def average_price(self) -> float:
        return float(np.mean(self._price_history))

    def volatility(self) -> float:
        """Population standard deviation of the price history. 0 if fewer than two prices."""
        if len(self._price_history) < 2:
            return 0.0
        return float(np.std(self._price_history))
