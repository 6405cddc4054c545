"""
Session metrics from an equity curve: PnL, return, drawdown, tick volatility.

Ticks are simulated market movements, not trading days, so nothing here is
annualized.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import numpy as np


@dataclass
class SessionMetrics:
    """Performance of one portfolio session."""

    initial_value: float
    final_value: float
    total_pnl: float
    total_return_pct: float
    max_drawdown: float
    max_drawdown_pct: float
    tick_volatility_pct: float
    ticks: int


def compute_session_metrics(
    initial_value: float,
    equity_curve: Sequence[tuple[datetime, float]],
) -> SessionMetrics:
    """
    Compute metrics from starting value and (timestamp, value) pairs.

    Parameters
    ----------
    initial_value : float
        Portfolio value at session start (e.g. initial cash).
    equity_curve : sequence of (datetime, value)
        Time-ordered total values, e.g. PortfolioSession.equity_curve.

    Returns
    -------
    SessionMetrics
        tick_volatility_pct is the population std of tick-to-tick returns, in percent.
    """
    if not equity_curve:
        return SessionMetrics(
            initial_value=initial_value,
            final_value=initial_value,
            total_pnl=0.0,
            total_return_pct=0.0,
            max_drawdown=0.0,
            max_drawdown_pct=0.0,
            tick_volatility_pct=0.0,
            ticks=0,
        )

    values = np.array([v for _, v in equity_curve], dtype=float)
    final_value = float(values[-1])
    total_pnl = final_value - initial_value
    total_return_pct = (total_pnl / initial_value * 100.0) if initial_value else 0.0

    returns = np.diff(values) / np.maximum(values[:-1], 1e-14)
    tick_volatility_pct = float(np.std(returns) * 100.0) if len(returns) else 0.0

    peak = np.maximum.accumulate(values)
    drawdowns = peak - values
    worst = int(np.argmax(drawdowns))
    max_drawdown = float(drawdowns[worst])
    max_drawdown_pct = float(max_drawdown / peak[worst] * 100.0) if peak[worst] > 0 else 0.0

    return SessionMetrics(
        initial_value=initial_value,
        final_value=final_value,
        total_pnl=total_pnl,
        total_return_pct=total_return_pct,
        max_drawdown=max_drawdown,
        max_drawdown_pct=max_drawdown_pct,
        tick_volatility_pct=tick_volatility_pct,
        ticks=len(values) - 1,
    )
