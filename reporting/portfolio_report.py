"""
Portfolio report: print a console summary of a ledger and, optionally, session metrics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from portfolio_core.ledger import Ledger
from reporting.metrics import SessionMetrics, compute_session_metrics


def print_report(
    ledger: Ledger,
    equity_curve: Sequence[tuple[datetime, float]] | None = None,
    *,
    performers: int = 3,
    transactions: int = 10,
) -> SessionMetrics | None:
    """
    Print holdings, performers, sector allocation and recent transactions.

    Parameters
    ----------
    ledger : Ledger
        Portfolio to summarize.
    equity_curve : sequence of (datetime, value), optional
        If given (e.g. PortfolioSession.equity_curve), session metrics are
        computed, printed and returned.
    performers : int
        Number of top/worst performers to list (default 3).
    transactions : int
        Number of recent transactions to list (default 10).

    Returns
    -------
    SessionMetrics or None
    """
    print("--- Portfolio ---")
    print(f"Cash balance:    {ledger.cash_balance:,.2f}")
    print(f"Total value:     {ledger.total_value():,.2f}")
    print(f"Gain/loss:       {ledger.total_gain_loss():,.2f}")
    print(f"Performance:     {ledger.performance_percentage():.2f}%")

    print("--- Holdings ---")
    for h in ledger.owned_stocks():
        s = h.instrument
        print(
            f"{s.symbol:<6} {s.name:<20} {h.quantity:>6} @ {s.current_price:>10,.2f}"
            f"  value {h.market_value:>12,.2f}  {s.performance():+.2f}%"
        )

    print("--- Top performers ---")
    for i, s in enumerate(ledger.top_performers(performers), start=1):
        print(f"{i}. {s.symbol}: {s.performance():+.2f}%")
    print("--- Worst performers ---")
    for i, s in enumerate(ledger.worst_performers(performers), start=1):
        print(f"{i}. {s.symbol}: {s.performance():+.2f}%")

    print("--- Sector allocation ---")
    for sector, pct in ledger.sector_allocation().items():
        print(f"{sector}: {pct:.1f}%")

    print("--- Recent transactions ---")
    for t in ledger.recent_transactions(transactions):
        print(
            f"{t.timestamp:%Y-%m-%d %H:%M:%S}  {t.type.name:<4} {t.quantity} {t.symbol}"
            f" @ {t.price:,.2f} (total {t.total:,.2f})"
        )

    metrics = None
    if equity_curve is not None:
        metrics = compute_session_metrics(ledger.initial_cash, equity_curve)
        print("--- Session ---")
        print(f"Ticks:           {metrics.ticks}")
        print(f"Total PnL:       {metrics.total_pnl:,.2f}")
        print(f"Total return:    {metrics.total_return_pct:.2f}%")
        print(f"Max drawdown:    {metrics.max_drawdown:,.2f} ({metrics.max_drawdown_pct:.2f}%)")
        print(f"Tick volatility: {metrics.tick_volatility_pct:.2f}%")
    print("-----------------")
    return metrics
