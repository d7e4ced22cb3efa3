"""Unit tests for whole-state recomputation"""

import copy
import random
import pytest
from dataclasses import asdict
from treasury_pooling.domain.engine import compute_derived_state
from treasury_pooling.domain.models import BorrowingTenor, ClientEntry, WhatIfParams
from treasury_pooling.domain.pooling import RESTRICTED_NODE, RTC_NODE
from treasury_pooling.utils.number_utils import parse_non_negative_number
from tests.factories import entry, position

COUNTRIES = ["Singapore", "China", "Malaysia", "India", "Thailand", "Japan", "Germany", ""]
CURRENCIES = ["USD", "SGD", "CNY", "MYR", "INR", "THB", "EUR", ""]
RAW_AMOUNTS = [0, 1, 0.05, 250_000, 1_000_000, "2000", "bad", None, -10]


def _random_book(seed: int) -> list[ClientEntry]:
    rng = random.Random(seed)
    book = []
    for i in range(rng.randint(0, 12)):
        positions = [
            position(
                rng.choice(CURRENCIES),
                rng.choice(RAW_AMOUNTS),
                rng.choice(RAW_AMOUNTS),
                rng.choice([0, 1.5, 3, "x"]),
                rng.choice([0, 2.5, 6, None]),
                rng.choice(list(BorrowingTenor)),
            )
            for _ in range(rng.randint(0, 4))
        ]
        book.append(entry(rng.choice([f"Client {i}", ""]), rng.choice(COUNTRIES), *positions))
    return book


PARAMS = WhatIfParams(fx_haircut_pct=5, blended_credit_rate_pct=2, usd_debit_rate_pct=4.5)


def test_recompute_is_idempotent(sample_entries, reference):
    first = compute_derived_state(sample_entries, reference, PARAMS)
    second = compute_derived_state(sample_entries, reference, PARAMS)

    assert asdict(first) == asdict(second)


def test_recompute_does_not_mutate_input(sample_entries, reference):
    before = copy.deepcopy(sample_entries)

    compute_derived_state(sample_entries, reference, PARAMS)

    assert sample_entries == before


@pytest.mark.parametrize("seed", range(25))
def test_properties_hold_for_random_books(seed, reference):
    """Idempotence, conservation, category partition and link floor on messy input"""
    book = _random_book(seed)

    state = compute_derived_state(book, reference, PARAMS)
    assert asdict(state) == asdict(compute_derived_state(book, reference, PARAMS))

    valid_rows = [p for e in book if e.is_complete for p in e.currencies if p.currency_code]
    expected_cash = sum(parse_non_negative_number(p.cash_amount) for p in valid_rows)
    expected_borrowing = sum(parse_non_negative_number(p.borrowing_amount) for p in valid_rows)
    assert sum(t.total_cash for t in state.currency_totals.values()) == pytest.approx(expected_cash)
    assert sum(t.total_borrowing for t in state.currency_totals.values()) == pytest.approx(expected_borrowing)

    listed = [c for t in state.convertibility_totals.values() for c in t.countries]
    assert len(listed) == len(set(listed))

    for link in state.pooling_graph.links:
        assert link.value >= 0.1
        assert link.converted_value is None or link.converted_value >= 0.1
        assert link.target in (RTC_NODE, RESTRICTED_NODE)

    assert [n.id for n in state.pooling_graph.nodes][-2:] == [RTC_NODE, RESTRICTED_NODE]


def test_derived_state_bundles_all_views(sample_entries, reference):
    state = compute_derived_state(sample_entries, reference, PARAMS)

    assert set(state.currency_totals) == {"USD", "SGD", "CNY", "MYR", "INR"}
    assert len(state.clients) == 4
    assert state.interest.currencies[0].currency_code == "USD"
    assert len(state.pooling_graph.links) == 8
    assert state.rtc_metrics.restricted_funds == 8_700_000
    assert state.pooling_summary.restricted_total == 8_700_000
    assert state.rtc_impact.poolable_total == 5_550_000
    assert state.what_if.pooled_cash_after_haircut == pytest.approx(5_550_000 * 0.95)
    assert state.skipped_entries == 0


def test_default_params_are_zero(sample_entries, reference):
    state = compute_derived_state(sample_entries, reference)

    assert state.what_if.pooled_cash_after_haircut == pytest.approx(5_550_000)
    assert state.what_if.credit_interest == 0
    assert state.what_if.post_pooling_expense == 0


def test_entries_round_trip_through_snapshot_shape(sample_entries):
    """Snapshot JSON uses the camelCase form layout"""
    payload = sample_entries[1].to_dict()

    assert payload["clientName"] == "China Restricted"
    assert payload["currencies"][0]["borrowingTenor"] == "Long Term"
    assert ClientEntry.from_dict(payload) == sample_entries[1]
