"""
Tabular projections of a ledger for display: holdings, market, transactions, equity.

Each function returns a fresh DataFrame; none of them mutate the ledger.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import pandas as pd

from portfolio_core.ledger import Ledger

HOLDINGS_COLUMNS = ("symbol", "name", "sector", "quantity", "price", "market_value", "performance_pct")
MARKET_COLUMNS = ("symbol", "name", "sector", "price", "initial_price", "performance_pct", "average_price", "volatility")
TRANSACTION_COLUMNS = ("timestamp", "type", "symbol", "quantity", "price", "total")


def holdings_frame(ledger: Ledger) -> pd.DataFrame:
    """One row per owned position, in the order positions were opened."""
    rows = [
        {
            "symbol": h.symbol,
            "name": h.instrument.name,
            "sector": h.instrument.sector,
            "quantity": h.quantity,
            "price": h.instrument.current_price,
            "market_value": h.market_value,
            "performance_pct": h.instrument.performance(),
        }
        for h in ledger.owned_stocks()
    ]
    return pd.DataFrame(rows, columns=list(HOLDINGS_COLUMNS))


def market_frame(ledger: Ledger) -> pd.DataFrame:
    """One row per catalog instrument, indexed by symbol."""
    rows = [
        {
            "symbol": s.symbol,
            "name": s.name,
            "sector": s.sector,
            "price": s.current_price,
            "initial_price": s.initial_price,
            "performance_pct": s.performance(),
            "average_price": s.average_price(),
            "volatility": s.volatility(),
        }
        for s in ledger.all_stocks()
    ]
    return pd.DataFrame(rows, columns=list(MARKET_COLUMNS)).set_index("symbol")


def transactions_frame(ledger: Ledger) -> pd.DataFrame:
    """Transaction log, oldest first. type is 'buy' or 'sell'."""
    rows = [
        {
            "timestamp": t.timestamp,
            "type": t.type.value,
            "symbol": t.symbol,
            "quantity": t.quantity,
            "price": t.price,
            "total": t.total,
        }
        for t in ledger.transactions
    ]
    return pd.DataFrame(rows, columns=list(TRANSACTION_COLUMNS))


def equity_frame(equity_curve: Sequence[tuple[datetime, float]]) -> pd.DataFrame:
    """Equity curve as a DataFrame with DatetimeIndex and a 'value' column."""
    df = pd.DataFrame(list(equity_curve), columns=["datetime", "value"])
    df["datetime"] = pd.to_datetime(df["datetime"])
    return df.set_index("datetime")
