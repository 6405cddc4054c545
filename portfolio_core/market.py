"""
Market simulation: pluggable price-update functions and the default catalog.

A price update is a pure function (instrument, rng) -> new price. The ledger
applies it to every instrument on each market movement; tests substitute a
deterministic sequence.
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterable
from typing import Protocol

import numpy as np

from portfolio_core.instrument import Instrument

# (symbol, name, price, sector)
SeedEntry = tuple[str, str, float, str]

DEFAULT_PRICE_FLOOR = 1.0
DEFAULT_MAX_CHANGE = 0.05

DEFAULT_MARKET: tuple[SeedEntry, ...] = (
    ("AAPL", "Apple Inc.", 175.50, "Technology"),
    ("GOOGL", "Alphabet Inc.", 142.30, "Technology"),
    ("MSFT", "Microsoft Corp.", 378.85, "Technology"),
    ("TSLA", "Tesla Inc.", 248.50, "Automotive"),
    ("AMZN", "Amazon.com Inc.", 155.20, "E-commerce"),
    ("NVDA", "NVIDIA Corp.", 875.30, "Technology"),
    ("META", "Meta Platforms", 485.50, "Technology"),
    ("NFLX", "Netflix Inc.", 445.75, "Entertainment"),
    ("JPM", "JPMorgan Chase", 185.40, "Finance"),
    ("JNJ", "Johnson & Johnson", 162.80, "Healthcare"),
)


class PriceUpdate(Protocol):
    """Compute the next price for an instrument. Must return a positive price."""

    def __call__(self, instrument: Instrument, rng: np.random.Generator) -> float:
        ...


def random_walk(
    max_change: float = DEFAULT_MAX_CHANGE,
    price_floor: float = DEFAULT_PRICE_FLOOR,
) -> PriceUpdate:
    """
    Uniform random walk: new = max(current * (1 + u), price_floor),
    u drawn from [-max_change, +max_change].
    """
    if not math.isfinite(price_floor) or price_floor <= 0:
        raise ValueError(f"price_floor must be positive, got {price_floor}")
    if not 0 <= max_change < 1:
        raise ValueError(f"max_change must be in [0, 1), got {max_change}")

    def update(instrument: Instrument, rng: np.random.Generator) -> float:
        change = rng.uniform(-max_change, max_change)
        return max(instrument.current_price * (1.0 + change), price_floor)

    return update


def fixed_sequence(
    changes: Iterable[float],
    price_floor: float = DEFAULT_PRICE_FLOOR,
) -> PriceUpdate:
    """
    Deterministic update: cycles through the given relative changes, one per
    call, ignoring rng. Same flooring as random_walk.
    """
    values = list(changes)
    if not values:
        raise ValueError("changes must not be empty")
    if not math.isfinite(price_floor) or price_floor <= 0:
        raise ValueError(f"price_floor must be positive, got {price_floor}")
    cycle = itertools.cycle(values)

    def update(instrument: Instrument, rng: np.random.Generator) -> float:
        return max(instrument.current_price * (1.0 + next(cycle)), price_floor)

    return update
