"""
Tests for portfolio_core: Instrument, Transaction, Ledger.
"""

from datetime import datetime

import pytest

from portfolio_core import (
    Instrument,
    Ledger,
    LedgerErrorKind,
    TradeStatusKind,
    Transaction,
    TransactionType,
    fixed_sequence,
)

CATALOG = [
    ("AAPL", "Apple Inc.", 175.50, "Technology"),
    ("JPM", "JPMorgan Chase", 185.40, "Finance"),
    ("TSLA", "Tesla Inc.", 248.50, "Automotive"),
    ("MSFT", "Microsoft Corp.", 378.85, "Technology"),
]


def _ledger(cash: float = 10_000.0) -> Ledger:
    return Ledger(cash, CATALOG, clock=lambda: datetime(2024, 1, 15, 10, 0, 0))


def _assert_invariants(ledger: Ledger) -> None:
    assert ledger.cash_balance >= 0
    for sym, qty in ledger.holdings.items():
        assert isinstance(qty, int)
        assert qty > 0
        assert sym in ledger.catalog


# --- Instrument ---


def test_instrument_initial_state():
    s = Instrument(symbol="AAPL", name="Apple Inc.", current_price=175.5)
    assert s.sector == "Technology"
    assert s.initial_price == 175.5
    assert s.price_history == [175.5]
    assert s.performance() == 0.0


def test_instrument_update_price_appends_history():
    s = Instrument(symbol="AAPL", name="Apple Inc.", current_price=100.0)
    s.update_price(110.0)
    s.update_price(120.0)
    assert s.current_price == 120.0
    assert s.price_history == [100.0, 110.0, 120.0]
    assert s.price_history[-1] == s.current_price
    assert s.initial_price == 100.0


def test_instrument_performance_and_average():
    s = Instrument(symbol="X", name="X Corp", current_price=100.0)
    s.update_price(110.0)
    assert s.performance() == pytest.approx(10.0)
    assert s.average_price() == pytest.approx(105.0)
    s.update_price(90.0)
    assert s.performance() == pytest.approx(-10.0)
    assert s.average_price() == pytest.approx(100.0)


def test_instrument_volatility():
    s = Instrument(symbol="X", name="X Corp", current_price=100.0)
    assert s.volatility() == 0.0
    s.update_price(110.0)
    assert s.volatility() == pytest.approx(5.0)


def test_instrument_rejects_non_positive_price():
    with pytest.raises(ValueError):
        Instrument(symbol="X", name="X Corp", current_price=0.0)
    s = Instrument(symbol="X", name="X Corp", current_price=10.0)
    with pytest.raises(ValueError):
        s.update_price(-1.0)
    assert s.price_history == [10.0]


# --- Transaction ---


def test_transaction_total_and_immutable():
    t = Transaction(
        type=TransactionType.BUY,
        symbol="AAPL",
        quantity=5,
        price=175.5,
        timestamp=datetime(2024, 1, 15),
    )
    assert t.total == 877.5
    with pytest.raises(AttributeError):
        t.quantity = 10


# --- Ledger: construction and lookup ---


def test_ledger_initial_state():
    ledger = _ledger()
    assert ledger.cash_balance == 10_000.0
    assert ledger.initial_cash == 10_000.0
    assert ledger.holdings == {}
    assert ledger.transactions == []
    assert [s.symbol for s in ledger.all_stocks()] == ["AAPL", "JPM", "TSLA", "MSFT"]
    assert ledger.total_value() == 10_000.0


def test_ledger_rejects_duplicate_symbols():
    with pytest.raises(ValueError):
        Ledger(10_000.0, [("AAPL", "Apple", 1.0, "Technology"), ("AAPL", "Apple", 2.0, "Technology")])


def test_ledger_catalog_is_read_only():
    ledger = _ledger()
    with pytest.raises(TypeError):
        ledger.catalog["ZZZZ"] = Instrument(symbol="ZZZZ", name="Z", current_price=1.0)


def test_find_stock_unknown_returns_none():
    ledger = _ledger()
    assert ledger.find_stock("ZZZZ") is None


def test_find_stock_is_repeatable():
    ledger = _ledger()
    first = ledger.find_stock("AAPL")
    second = ledger.find_stock("AAPL")
    assert first is not None
    assert first is second
    assert first.current_price == 175.5


# --- Ledger: buy ---


def test_buy_deducts_cash_and_adds_holding():
    ledger = _ledger()
    result = ledger.buy("AAPL", 5)
    assert result.ok
    assert result.status == TradeStatusKind.FILLED
    assert ledger.cash_balance == 10_000 - 5 * 175.50 == 9122.50
    assert ledger.holdings["AAPL"] == 5
    txn = result.transaction
    assert txn.type == TransactionType.BUY
    assert txn.symbol == "AAPL"
    assert txn.quantity == 5
    assert txn.price == 175.5
    assert txn.total == 877.5
    assert txn.timestamp == datetime(2024, 1, 15, 10, 0, 0)
    assert ledger.transactions == [txn]


def test_buy_accumulates_holding():
    ledger = _ledger()
    ledger.buy("AAPL", 2)
    ledger.buy("AAPL", 3)
    assert ledger.holding("AAPL") == 5
    assert len(ledger.transactions) == 2


def test_buy_insufficient_funds_has_no_effect():
    ledger = _ledger()
    result = ledger.buy("AAPL", 1000)
    assert not result.ok
    assert result.status == TradeStatusKind.REJECTED
    assert result.error == LedgerErrorKind.INSUFFICIENT_FUNDS
    assert result.transaction is None
    assert ledger.cash_balance == 10_000.0
    assert ledger.holdings == {}
    assert ledger.transactions == []


def test_buy_exact_cash_is_allowed():
    ledger = Ledger(351.0, [("AAPL", "Apple Inc.", 175.50, "Technology")])
    assert ledger.buy("AAPL", 2).ok
    assert ledger.cash_balance == 0.0


def test_buy_unknown_symbol():
    ledger = _ledger()
    result = ledger.buy("ZZZZ", 1)
    assert result.error == LedgerErrorKind.NOT_FOUND
    assert ledger.cash_balance == 10_000.0


@pytest.mark.parametrize("quantity", [0, -3, 2.5, 1.0, True, "5", None])
def test_buy_invalid_quantity(quantity):
    ledger = _ledger()
    result = ledger.buy("AAPL", quantity)
    assert result.error == LedgerErrorKind.INVALID_QUANTITY
    assert ledger.cash_balance == 10_000.0
    assert ledger.holdings == {}


def test_invalid_quantity_checked_before_symbol():
    ledger = _ledger()
    assert ledger.buy("ZZZZ", 0).error == LedgerErrorKind.INVALID_QUANTITY


# --- Ledger: sell ---


def test_sell_full_position_removes_key_and_restores_cash():
    ledger = _ledger()
    ledger.buy("AAPL", 5)
    result = ledger.sell("AAPL", 5)
    assert result.ok
    assert result.transaction.type == TransactionType.SELL
    assert ledger.cash_balance == 10_000.0
    assert "AAPL" not in ledger.holdings
    assert ledger.holding("AAPL") == 0


def test_sell_partial_position():
    ledger = _ledger()
    ledger.buy("JPM", 10)
    ledger.sell("JPM", 4)
    assert ledger.holdings == {"JPM": 6}


def test_sell_without_holding():
    ledger = _ledger()
    result = ledger.sell("AAPL", 1)
    assert result.error == LedgerErrorKind.INSUFFICIENT_SHARES
    assert ledger.cash_balance == 10_000.0
    assert ledger.transactions == []


def test_sell_more_than_held_has_no_effect():
    ledger = _ledger()
    ledger.buy("AAPL", 2)
    result = ledger.sell("AAPL", 3)
    assert result.error == LedgerErrorKind.INSUFFICIENT_SHARES
    assert ledger.holdings == {"AAPL": 2}
    assert len(ledger.transactions) == 1


def test_sell_unknown_symbol_and_invalid_quantity():
    ledger = _ledger()
    assert ledger.sell("ZZZZ", 1).error == LedgerErrorKind.NOT_FOUND
    assert ledger.sell("AAPL", -1).error == LedgerErrorKind.INVALID_QUANTITY


def test_sell_at_moved_price_credits_current_price():
    ledger = _ledger()
    ledger.buy("AAPL", 2)
    ledger.find_stock("AAPL").update_price(200.0)
    ledger.sell("AAPL", 2)
    assert ledger.cash_balance == pytest.approx(10_000.0 - 2 * 175.5 + 2 * 200.0)


def test_round_trip_conserves_cash():
    ledger = _ledger()
    for sym, qty in [("AAPL", 7), ("JPM", 3), ("MSFT", 1)]:
        before = ledger.cash_balance
        ledger.buy(sym, qty)
        ledger.sell(sym, qty)
        assert ledger.cash_balance == pytest.approx(before)
    assert ledger.holdings == {}


def test_invariants_hold_over_mixed_sequence():
    ledger = _ledger(cash=2_000.0)
    ops = [
        ("buy", "AAPL", 5),
        ("buy", "TSLA", 10),
        ("sell", "AAPL", 2),
        ("sell", "JPM", 1),
        ("buy", "MSFT", 3),
        ("sell", "AAPL", 3),
        ("buy", "JPM", 0),
        ("sell", "MSFT", 3),
    ]
    for side, sym, qty in ops:
        getattr(ledger, side)(sym, qty)
        _assert_invariants(ledger)
    assert ledger.holdings == {}


# --- Ledger: valuation ---


def test_total_value_uses_current_prices():
    ledger = _ledger()
    ledger.buy("AAPL", 10)
    ledger.find_stock("AAPL").update_price(200.0)
    assert ledger.holdings_value() == pytest.approx(2000.0)
    assert ledger.total_value() == pytest.approx(10_000.0 - 1755.0 + 2000.0)
    assert ledger.total_gain_loss() == pytest.approx(2000.0 - 1755.0)
    assert ledger.performance_percentage() == pytest.approx(245.0 / 10_000.0 * 100.0)


def test_gain_loss_nets_sells():
    ledger = _ledger()
    ledger.buy("JPM", 10)
    ledger.sell("JPM", 4)
    assert ledger.total_gain_loss() == pytest.approx(0.0)


# --- Ledger: queries ---


def test_top_performers_fewer_than_requested():
    ledger = _ledger()
    ledger.buy("AAPL", 1)
    ledger.buy("JPM", 1)
    ledger.find_stock("AAPL").update_price(175.5 * 0.9)
    ledger.find_stock("JPM").update_price(185.4 * 1.1)
    top = ledger.top_performers(5)
    assert [s.symbol for s in top] == ["JPM", "AAPL"]
    worst = ledger.worst_performers(5)
    assert [s.symbol for s in worst] == ["AAPL", "JPM"]


def test_top_performers_only_held_and_limited():
    ledger = _ledger()
    for sym in ("AAPL", "JPM", "TSLA"):
        ledger.buy(sym, 1)
    ledger.find_stock("MSFT").update_price(1000.0)  # not held
    ledger.find_stock("TSLA").update_price(300.0)
    top = ledger.top_performers(2)
    assert len(top) == 2
    assert top[0].symbol == "TSLA"
    assert "MSFT" not in [s.symbol for s in ledger.top_performers(10)]
    assert ledger.top_performers(0) == []


def test_top_performers_ties_by_symbol():
    ledger = _ledger()
    for sym in ("TSLA", "AAPL", "JPM"):
        ledger.buy(sym, 1)
    assert [s.symbol for s in ledger.top_performers()] == ["AAPL", "JPM", "TSLA"]
    assert [s.symbol for s in ledger.worst_performers()] == ["AAPL", "JPM", "TSLA"]


def test_owned_stocks_projection():
    ledger = _ledger()
    ledger.buy("JPM", 2)
    ledger.buy("AAPL", 1)
    owned = ledger.owned_stocks()
    assert [(h.symbol, h.quantity) for h in owned] == [("JPM", 2), ("AAPL", 1)]
    assert owned[0].instrument is ledger.find_stock("JPM")
    assert owned[0].market_value == pytest.approx(2 * 185.4)


def test_sector_queries():
    ledger = _ledger()
    assert ledger.sector_allocation() == {}
    ledger.buy("AAPL", 2)  # 351.0
    ledger.buy("MSFT", 1)  # 378.85
    ledger.buy("JPM", 1)  # 185.4
    tech = ledger.stocks_by_sector("Technology")
    assert sorted(s.symbol for s in tech) == ["AAPL", "MSFT"]
    alloc = ledger.sector_allocation()
    assert list(alloc) == ["Finance", "Technology"]
    assert sum(alloc.values()) == pytest.approx(100.0)
    assert alloc["Finance"] == pytest.approx(185.4 / (351.0 + 378.85 + 185.4) * 100.0)


def test_recent_transactions_most_recent_first():
    ledger = _ledger()
    ledger.buy("AAPL", 1)
    ledger.buy("JPM", 1)
    ledger.sell("AAPL", 1)
    recent = ledger.recent_transactions(2)
    assert [(t.type, t.symbol) for t in recent] == [
        (TransactionType.SELL, "AAPL"),
        (TransactionType.BUY, "JPM"),
    ]
    assert ledger.recent_transactions(0) == []


# --- Ledger: simulation ---


def test_simulate_market_movement_with_fixed_sequence():
    ledger = _ledger()
    ledger.simulate_market_movement(fixed_sequence([0.10]))
    for s in ledger.all_stocks():
        assert len(s.price_history) == 2
        assert s.performance() == pytest.approx(10.0)


def test_simulate_market_movement_revalues_holdings():
    ledger = Ledger(10_000.0, CATALOG, price_update=fixed_sequence([-0.5]))
    ledger.buy("AAPL", 10)
    ledger.simulate_market_movement()
    assert ledger.find_stock("AAPL").current_price == pytest.approx(87.75)
    assert ledger.total_value() == pytest.approx(10_000.0 - 1755.0 + 877.5)


def test_simulate_history_grows_every_instrument():
    ledger = _ledger()
    ledger.simulate_history(30)
    for s in ledger.all_stocks():
        assert len(s.price_history) == 31
        assert s.price_history[-1] == s.current_price
        assert all(p > 0 for p in s.price_history)


# --- Non-finite and read-only guards ---


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_instrument_rejects_non_finite_price(bad):
    with pytest.raises(ValueError):
        Instrument(symbol="X", name="X Corp", current_price=bad)
    s = Instrument(symbol="X", name="X Corp", current_price=10.0)
    with pytest.raises(ValueError):
        s.update_price(bad)
    assert s.price_history == [10.0]
    assert s.current_price == 10.0


def test_instrument_identity_is_read_only():
    s = Instrument(symbol="AAPL", name="Apple Inc.", current_price=175.5)
    with pytest.raises(AttributeError):
        s.symbol = "MSFT"
    with pytest.raises(AttributeError):
        s.initial_price = 1.0
    with pytest.raises(AttributeError):
        s.current_price = 1.0
    s.price_history.append(999.0)
    assert s.price_history == [175.5]


def test_ledger_rejects_non_finite_inputs():
    with pytest.raises(ValueError):
        Ledger(float("nan"), CATALOG)
    with pytest.raises(ValueError):
        Ledger(10_000.0, [("BAD", "Bad Co", float("nan"), "Technology")])


def test_nan_price_update_is_rejected_and_buy_stays_guarded():
    ledger = Ledger(10_000.0, CATALOG, price_update=lambda instrument, rng: float("nan"))
    with pytest.raises(ValueError):
        ledger.simulate_market_movement()
    for s in ledger.all_stocks():
        assert len(s.price_history) == 1
    assert ledger.buy("AAPL", 1).ok
    assert ledger.cash_balance == 10_000.0 - 175.5


def test_failed_market_movement_leaves_catalog_unchanged():
    def update(instrument, rng):
        return -1.0 if instrument.symbol == "TSLA" else instrument.current_price * 2

    ledger = _ledger()
    with pytest.raises(ValueError):
        ledger.simulate_market_movement(update)
    for s in ledger.all_stocks():
        assert s.price_history == [s.initial_price]
