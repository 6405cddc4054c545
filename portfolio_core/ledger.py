"""
Ledger: cash, holdings, catalog, and transaction log for one portfolio.

Enforces the trade invariants: cash never negative, holdings never store a
zero quantity, every holding refers to a catalog instrument. buy/sell are
all-or-nothing and report failure through TradeResult. No logging, no retry.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from types import MappingProxyType

import numpy as np

from portfolio_core.instrument import Instrument, checked_price
from portfolio_core.market import PriceUpdate, SeedEntry, random_walk
from portfolio_core.transaction import Transaction, TransactionType
from portfolio_core.types import Holding, LedgerErrorKind, TradeResult

DEFAULT_INITIAL_CASH = 10_000.0


def _valid_quantity(quantity: object) -> bool:
    """Positive integer. bool is rejected even though it subclasses int."""
    return isinstance(quantity, numbers.Integral) and not isinstance(quantity, bool) and quantity > 0


class Ledger:
    """
    Portfolio ledger. The catalog is fixed at construction; cash and holdings
    change only through buy/sell; prices change only through market movement.
    """

    def __init__(
        self,
        initial_cash: float = DEFAULT_INITIAL_CASH,
        catalog: Iterable[SeedEntry] = (),
        *,
        price_update: PriceUpdate | None = None,
        rng: np.random.Generator | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if not math.isfinite(initial_cash) or initial_cash < 0:
            raise ValueError(f"initial_cash must be finite and non-negative, got {initial_cash}")
        self._initial_cash = float(initial_cash)
        self._cash = float(initial_cash)
        self._catalog: dict[str, Instrument] = {}
        for symbol, name, price, sector in catalog:
            if symbol in self._catalog:
                raise ValueError(f"Duplicate symbol in catalog: {symbol}")
            self._catalog[symbol] = Instrument(symbol=symbol, name=name, current_price=price, sector=sector)
        self._holdings: dict[str, int] = {}
        self._transactions: list[Transaction] = []
        self._price_update = price_update or random_walk()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._clock = clock

    # --- State (read-only views) ---

    @property
    def cash_balance(self) -> float:
        return self._cash

    @property
    def initial_cash(self) -> float:
        return self._initial_cash

    @property
    def catalog(self) -> Mapping[str, Instrument]:
        return MappingProxyType(self._catalog)

    @property
    def holdings(self) -> dict[str, int]:
        """Copy of symbol -> shares held. Absent symbol means zero shares."""
        return dict(self._holdings)

    @property
    def transactions(self) -> list[Transaction]:
        """Copy of the transaction log, oldest first."""
        return list(self._transactions)

    def holding(self, symbol: str) -> int:
        """Shares held in symbol. 0 if not present."""
        return self._holdings.get(symbol, 0)

    def find_stock(self, symbol: str) -> Instrument | None:
        """Catalog lookup. None if the symbol is unknown."""
        return self._catalog.get(symbol)

    # --- Trading ---

    def buy(self, symbol: str, quantity: int) -> TradeResult:
        """Buy at the instrument's current price. No effect unless filled."""
        if not _valid_quantity(quantity):
            return TradeResult.rejected(
                LedgerErrorKind.INVALID_QUANTITY,
                f"Quantity must be a positive integer, got {quantity!r}",
            )
        stock = self.find_stock(symbol)
        if stock is None:
            return TradeResult.rejected(LedgerErrorKind.NOT_FOUND, f"Stock not found: {symbol}")

        price = stock.current_price
        cost = quantity * price
        if cost > self._cash:
            return TradeResult.rejected(
                LedgerErrorKind.INSUFFICIENT_FUNDS,
                f"Insufficient funds: need {cost:.2f}, have {self._cash:.2f}",
            )

        self._cash -= cost
        self._holdings[symbol] = self.holding(symbol) + int(quantity)
        return TradeResult.filled(self._record(TransactionType.BUY, symbol, int(quantity), price))

    def sell(self, symbol: str, quantity: int) -> TradeResult:
        """Sell at the instrument's current price. A position sold down to 0 is removed."""
        if not _valid_quantity(quantity):
            return TradeResult.rejected(
                LedgerErrorKind.INVALID_QUANTITY,
                f"Quantity must be a positive integer, got {quantity!r}",
            )
        stock = self.find_stock(symbol)
        if stock is None:
            return TradeResult.rejected(LedgerErrorKind.NOT_FOUND, f"Stock not found: {symbol}")

        held = self.holding(symbol)
        if held < quantity:
            return TradeResult.rejected(
                LedgerErrorKind.INSUFFICIENT_SHARES,
                f"Insufficient shares: cannot sell {quantity} {symbol}, own {held}",
            )

        price = stock.current_price
        self._cash += quantity * price
        remaining = held - int(quantity)
        if remaining == 0:
            del self._holdings[symbol]
        else:
            self._holdings[symbol] = remaining
        return TradeResult.filled(self._record(TransactionType.SELL, symbol, int(quantity), price))

    def _record(self, kind: TransactionType, symbol: str, quantity: int, price: float) -> Transaction:
        txn = Transaction(type=kind, symbol=symbol, quantity=quantity, price=price, timestamp=self._clock())
        self._transactions.append(txn)
        return txn

    # --- Valuation ---

    def holdings_value(self) -> float:
        """Market value of all holdings at current prices. Unknown symbols are skipped."""
        total = 0.0
        for sym, qty in self._holdings.items():
            stock = self._catalog.get(sym)
            if stock is not None:
                total += qty * stock.current_price
        return total

    def total_value(self) -> float:
        """Cash plus holdings at current prices."""
        return self._cash + self.holdings_value()

    def total_gain_loss(self) -> float:
        """Holdings value minus net amount invested (buys minus sells)."""
        invested = 0.0
        for txn in self._transactions:
            if txn.type == TransactionType.BUY:
                invested += txn.total
            else:
                invested -= txn.total
        return self.holdings_value() - invested

    def performance_percentage(self) -> float:
        """Percent change of total value vs initial cash. 0 when started with no cash."""
        if not self._initial_cash:
            return 0.0
        return (self.total_value() - self._initial_cash) / self._initial_cash * 100.0

    # --- Queries ---

    def _held_instruments(self) -> list[Instrument]:
        return [self._catalog[sym] for sym in self._holdings if sym in self._catalog]

    def top_performers(self, count: int = 5) -> list[Instrument]:
        """Held instruments by performance, best first. Ties: symbol ascending."""
        if count <= 0:
            return []
        ranked = sorted(self._held_instruments(), key=lambda s: (-s.performance(), s.symbol))
        return ranked[:count]

    def worst_performers(self, count: int = 5) -> list[Instrument]:
        """Held instruments by performance, worst first. Ties: symbol ascending."""
        if count <= 0:
            return []
        ranked = sorted(self._held_instruments(), key=lambda s: (s.performance(), s.symbol))
        return ranked[:count]

    def owned_stocks(self) -> list[Holding]:
        """Current positions in the order they were opened."""
        return [
            Holding(instrument=self._catalog[sym], quantity=qty)
            for sym, qty in self._holdings.items()
            if sym in self._catalog
        ]

    def all_stocks(self) -> list[Instrument]:
        """Every catalog instrument, in catalog order."""
        return list(self._catalog.values())

    def stocks_by_sector(self, sector: str) -> list[Instrument]:
        """Held instruments in the given sector."""
        return [s for s in self._held_instruments() if s.sector == sector]

    def sector_allocation(self) -> dict[str, float]:
        """Sector -> percent of holdings value, sorted by sector. Empty when nothing is held."""
        total = self.holdings_value()
        if total <= 0:
            return {}
        allocation: dict[str, float] = {}
        for holding in self.owned_stocks():
            sector = holding.instrument.sector
            allocation[sector] = allocation.get(sector, 0.0) + holding.market_value / total * 100.0
        return dict(sorted(allocation.items()))

    def recent_transactions(self, count: int = 10) -> list[Transaction]:
        """Up to count transactions, most recent first."""
        if count <= 0:
            return []
        return list(reversed(self._transactions))[:count]

    # --- Simulation ---

    def simulate_market_movement(self, update: PriceUpdate | None = None) -> None:
        """
        Apply one price update to every catalog instrument. All new prices are
        computed and checked first, so a bad price leaves every instrument unchanged.
        """
        fn = update or self._price_update
        moves = [(stock, checked_price(stock.symbol, fn(stock, self._rng))) for stock in self._catalog.values()]
        for stock, price in moves:
            stock.update_price(price)

    def simulate_history(self, days: int = 30, update: PriceUpdate | None = None) -> None:
        """Run days rounds of market movement (e.g. to seed price history at startup)."""
        if days < 0:
            raise ValueError(f"days must be non-negative, got {days}")
        for _ in range(days):
            self.simulate_market_movement(update)
