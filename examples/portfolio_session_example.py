"""
Portfolio session example: trade against a simulated market from the command line.

Shows: LedgerConfig, PortfolioSession, trade observers, rejected-trade log,
market ticks and the console report. Set PORTFOLIO_SEED for a repeatable run.
"""

from __future__ import annotations

import logging

from portfolio_core import Ledger, LedgerConfig, PortfolioSession, Transaction
from reporting import holdings_frame, print_report


def print_fill_observer(transaction: Transaction, ledger: Ledger) -> None:
    """Observer: post-trade log."""
    print(
        f"  [Observer] FILL {transaction.type.value} {transaction.quantity} {transaction.symbol}"
        f" @ {transaction.price:.2f}, cash now {ledger.cash_balance:.2f}"
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = LedgerConfig.from_env()
    session = PortfolioSession.from_config(config, observers=[print_fill_observer])
    print(f"Starting with {session.ledger.cash_balance:,.2f} cash, {len(session.ledger.catalog)} stocks")

    print("\n--- Buy ---")
    session.buy("aapl", "5")
    session.buy("MSFT", 3)
    session.buy("JPM", "10")
    session.buy("NVDA", "1000")  # insufficient funds
    session.buy("ZZZZ", "1")  # unknown symbol

    print("\n--- Market ticks ---")
    for _ in range(5):
        value = session.tick()
        print(f"  total value {value:,.2f}")

    print("\n--- Sell ---")
    session.sell("JPM", "10")
    session.sell("TSLA", "1")  # nothing held

    print("\n--- Holdings ---")
    print(holdings_frame(session.ledger).to_string(index=False))

    print("\n--- Rejected log ---")
    for entry in session.get_rejected_log():
        print(f"  Rejected: {entry.side.value} {entry.symbol} x {entry.quantity}: {entry.error.value} ({entry.message})")

    print()
    print_report(session.ledger, session.equity_curve)


if __name__ == "__main__":
    main()
