"""Unit tests for the what-if savings calculator"""

import pytest
from treasury_pooling.domain.aggregation import aggregate_positions
from treasury_pooling.domain.models import PoolingGraph, PoolingLink, WhatIfParams
from treasury_pooling.domain.pooling import RESTRICTED_NODE, RTC_NODE, simulate_pooling
from treasury_pooling.domain.what_if import (
    borrowing_outside_restricted,
    calculate_what_if,
    pooled_cash_after_haircut,
    pre_pooling_expense,
)
from tests.factories import entry, position


def _run(entries, reference, **params):
    graph = simulate_pooling(entries, reference).graph
    currency_totals = aggregate_positions(entries, reference).currency_totals
    return calculate_what_if(graph, entries, currency_totals, WhatIfParams(**params), reference)


def test_haircut_and_credit_interest():
    """1,000,000 pooled at a 10% haircut and 2.5% credit rate"""
    graph = PoolingGraph(links=[PoolingLink("Singapore", RTC_NODE, 1_000_000, "USD")])

    pooled = pooled_cash_after_haircut(graph, 10)

    assert pooled == pytest.approx(900_000)
    assert pooled * 2.5 / 100 == pytest.approx(22_500)


def test_only_rtc_links_are_pooled():
    graph = PoolingGraph(
        links=[
            PoolingLink("Singapore", RTC_NODE, 400, "USD"),
            PoolingLink("China", RESTRICTED_NODE, 1_000, "CNY"),
            PoolingLink("Malaysia", RTC_NODE, 600, "MYR", converted_value=126),
        ]
    )

    # Pre-conversion link value is what gets pooled
    assert pooled_cash_after_haircut(graph, 0) == 1_000


def test_single_entry_scenario(reference):
    result = _run(
        [entry("SG Co", "Singapore", position("USD", 1_000_000, 0))],
        reference,
        fx_haircut_pct=10,
        blended_credit_rate_pct=2.5,
    )

    assert result.pooled_cash_after_haircut == pytest.approx(900_000)
    assert result.credit_interest == pytest.approx(22_500)


def test_sample_book(sample_entries, reference):
    result = _run(
        sample_entries,
        reference,
        fx_haircut_pct=10,
        blended_credit_rate_pct=2.5,
        usd_debit_rate_pct=5,
    )

    # RTC link values: 1M + 750k + 3M + 800k = 5.55M, less 10%
    assert result.pooled_cash_after_haircut == pytest.approx(4_995_000)
    assert result.credit_interest == pytest.approx(124_875)
    assert result.pre_pooling_expense == pytest.approx(280_750)
    # Singapore 750k + Malaysia 1.9M; China and India excluded
    assert result.total_borrowing_ex_restricted == pytest.approx(2_650_000)
    assert result.post_pooling_net_position == pytest.approx(2_345_000)
    assert result.cash_pool_borrowing_cost == pytest.approx(249_750)
    assert result.additional_borrowing_cost == 0
    assert result.post_pooling_expense == pytest.approx(249_750)
    assert result.net_savings == pytest.approx(31_000)
    assert result.savings_percentage == pytest.approx(31_000 / 280_750 * 100)


def test_shortfall_adds_borrowing_cost(reference):
    entries = [entry("SG Co", "Singapore", position("USD", 100_000, 400_000, 0, 6))]

    result = _run(entries, reference, usd_debit_rate_pct=4)

    assert result.post_pooling_net_position == pytest.approx(-300_000)
    assert result.cash_pool_borrowing_cost == pytest.approx(4_000)
    assert result.additional_borrowing_cost == pytest.approx(12_000)
    assert result.post_pooling_expense == pytest.approx(16_000)
    assert result.pre_pooling_expense == pytest.approx(24_000)
    assert result.net_savings == pytest.approx(8_000)


def test_restricted_borrowing_counts_before_pooling_only(reference):
    entries = [
        entry("CN Co", "China", position("CNY", 0, 1_000_000, 0, 2.5)),
        entry("SG Co", "Singapore", position("USD", 500_000, 0)),
    ]

    result = _run(entries, reference, usd_debit_rate_pct=1)

    assert result.pre_pooling_expense == pytest.approx(25_000)
    assert result.total_borrowing_ex_restricted == 0
    assert result.additional_borrowing_cost == 0


def test_zero_rates_mean_zero_interest(sample_entries, reference):
    result = _run(sample_entries, reference, fx_haircut_pct=5)

    assert result.credit_interest == 0
    assert result.cash_pool_borrowing_cost == 0
    assert result.post_pooling_expense == 0


def test_savings_percentage_zero_without_pre_expense(reference):
    result = _run([entry("SG Co", "Singapore", position("USD", 1_000))], reference, usd_debit_rate_pct=3)

    assert result.pre_pooling_expense == 0
    assert result.net_savings == pytest.approx(-30)
    assert result.savings_percentage == 0


def test_out_of_range_params_are_clamped(reference):
    entries = [entry("SG Co", "Singapore", position("USD", 1_000))]

    result = _run(entries, reference, fx_haircut_pct=250, blended_credit_rate_pct=-1, usd_debit_rate_pct="x")

    assert result.pooled_cash_after_haircut == 0
    assert result.credit_interest == 0
    assert result.cash_pool_borrowing_cost == 0


def test_pre_pooling_expense_uses_bookkept_rates(reference):
    entries = [
        entry("A", "Singapore", position("USD", 0, 100, 0, 2)),
        entry("B", "Japan", position("USD", 0, 100, 0, 5)),
    ]
    currency_totals = aggregate_positions(entries, reference).currency_totals

    # Both rows charged at the highest USD rate seen (5%)
    assert pre_pooling_expense(currency_totals) == pytest.approx(10)


def test_borrowing_outside_restricted_includes_unknown_countries(reference):
    entries = [
        entry("DE Co", "Germany", position("EUR", 0, 300)),
        entry("IN Co", "India", position("INR", 0, 900)),
        entry("", "Singapore", position("USD", 0, 50)),
    ]

    assert borrowing_outside_restricted(entries, reference) == 300
