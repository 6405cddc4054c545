"""
Reporting on top of portfolio-core.

DataFrame projections of a ledger, session metrics from an equity curve,
and a console summary.
"""

from reporting.frames import equity_frame, holdings_frame, market_frame, transactions_frame
from reporting.metrics import SessionMetrics, compute_session_metrics
from reporting.portfolio_report import print_report

__all__ = [
    "equity_frame",
    "holdings_frame",
    "market_frame",
    "transactions_frame",
    "SessionMetrics",
    "compute_session_metrics",
    "print_report",
]
