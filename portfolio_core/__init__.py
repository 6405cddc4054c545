"""
portfolio-core: in-memory stock portfolio simulation.

Catalog of instruments, cash ledger with buy/sell, pluggable market movement.
No persistence, no network, no real market data.
"""

__version__ = "0.1.0"

from portfolio_core.instrument import Instrument
from portfolio_core.transaction import Transaction, TransactionType
from portfolio_core.types import Holding, LedgerErrorKind, TradeResult, TradeStatusKind
from portfolio_core.ledger import Ledger
from portfolio_core.market import DEFAULT_MARKET, fixed_sequence, random_walk
from portfolio_core.config import LedgerConfig, build_ledger
from portfolio_core.session import PortfolioSession

__all__ = [
    "Instrument",
    "Transaction",
    "TransactionType",
    "Holding",
    "LedgerErrorKind",
    "TradeResult",
    "TradeStatusKind",
    "Ledger",
    "DEFAULT_MARKET",
    "fixed_sequence",
    "random_walk",
    "LedgerConfig",
    "build_ledger",
    "PortfolioSession",
]
