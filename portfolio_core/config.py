"""
Ledger configuration: defaults plus environment overrides.

build_ledger() turns a config into a ready ledger with the default catalog
and a simulated price history.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import numpy as np

from portfolio_core.ledger import DEFAULT_INITIAL_CASH, Ledger
from portfolio_core.market import (
    DEFAULT_MARKET,
    DEFAULT_MAX_CHANGE,
    DEFAULT_PRICE_FLOOR,
    SeedEntry,
    random_walk,
)

logger = logging.getLogger(__name__)

# Environment variables read by LedgerConfig.from_env().
INITIAL_CASH_ENV = "PORTFOLIO_INITIAL_CASH"
PRICE_FLOOR_ENV = "PORTFOLIO_PRICE_FLOOR"
MAX_CHANGE_ENV = "PORTFOLIO_MAX_CHANGE"
HISTORY_DAYS_ENV = "PORTFOLIO_HISTORY_DAYS"
SEED_ENV = "PORTFOLIO_SEED"


@dataclass(frozen=True)
class LedgerConfig:
    """Settings for a simulated portfolio. seed=None draws fresh entropy."""

    initial_cash: float = DEFAULT_INITIAL_CASH
    price_floor: float = DEFAULT_PRICE_FLOOR
    max_change: float = DEFAULT_MAX_CHANGE
    history_days: int = 30
    seed: int | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.initial_cash) or self.initial_cash < 0:
            raise ValueError(f"initial_cash must be finite and non-negative, got {self.initial_cash}")
        if not math.isfinite(self.price_floor) or self.price_floor <= 0:
            raise ValueError(f"price_floor must be finite and positive, got {self.price_floor}")
        if not 0 <= self.max_change < 1:
            raise ValueError(f"max_change must be in [0, 1), got {self.max_change}")
        if self.history_days < 0:
            raise ValueError(f"history_days must be non-negative, got {self.history_days}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LedgerConfig":
        """Defaults overridden by PORTFOLIO_* environment variables."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, float | int] = {}
        for name, key, parse in (
            (INITIAL_CASH_ENV, "initial_cash", float),
            (PRICE_FLOOR_ENV, "price_floor", float),
            (MAX_CHANGE_ENV, "max_change", float),
            (HISTORY_DAYS_ENV, "history_days", int),
            (SEED_ENV, "seed", int),
        ):
            raw = env.get(name, "").strip()
            if not raw:
                continue
            try:
                kwargs[key] = parse(raw)
            except ValueError as e:
                raise ValueError(f"Invalid {name}={raw!r}: {e}") from e
        return cls(**kwargs)


def build_ledger(
    config: LedgerConfig | None = None,
    catalog: Iterable[SeedEntry] = DEFAULT_MARKET,
) -> Ledger:
    """Ledger seeded from config: catalog, random-walk updates, history_days of prices."""
    config = config or LedgerConfig()
    ledger = Ledger(
        config.initial_cash,
        catalog,
        price_update=random_walk(config.max_change, config.price_floor),
        rng=np.random.default_rng(config.seed),
    )
    ledger.simulate_history(config.history_days)
    logger.debug(
        "Ledger built: cash=%.2f, instruments=%d, history_days=%d, seed=%s",
        ledger.cash_balance,
        len(ledger.catalog),
        config.history_days,
        config.seed,
    )
    return ledger
