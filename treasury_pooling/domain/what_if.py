"""What-if calculator - interest expense before and after pooling"""

from typing import Dict, Iterable

from treasury_pooling.domain.models import (
    ClientEntry,
    ConvertibilityCategory,
    CurrencyTotals,
    PoolingGraph,
    WhatIfParams,
    WhatIfResult,
)
from treasury_pooling.domain.pooling import RTC_NODE
from treasury_pooling.domain.reference_data import ReferenceData, normalize_currency_code
from treasury_pooling.utils.number_utils import clamp_percentage, parse_non_negative_number


def pooled_cash_after_haircut(graph: PoolingGraph, fx_haircut_pct: float) -> float:
    """Sum of RTC link values, less the FX haircut"""
    pooled = sum(link.value for link in graph.links if link.target == RTC_NODE)
    return pooled * (1 - fx_haircut_pct / 100)


def pre_pooling_expense(currency_totals: Dict[str, CurrencyTotals]) -> float:
    """
    Borrowing cost today, at each currency's bookkept borrowing rate.

    Covers every country, restricted ones included.
    """
    return sum(t.total_borrowing * t.borrowing_interest_rate / 100 for t in currency_totals.values())


def borrowing_outside_restricted(entries: Iterable[ClientEntry], reference: ReferenceData) -> float:
    """Borrowing from all complete entries except those in restricted countries"""
    total = 0.0
    for entry in entries:
        if not entry.is_complete:
            continue
        if reference.category_for(entry.operating_country) == ConvertibilityCategory.RESTRICTED:
            continue
        total += sum(
            parse_non_negative_number(p.borrowing_amount)
            for p in entry.currencies
            if normalize_currency_code(p.currency_code)
        )
    return total


def calculate_what_if(
    graph: PoolingGraph,
    entries: Iterable[ClientEntry],
    currency_totals: Dict[str, CurrencyTotals],
    params: WhatIfParams,
    reference: ReferenceData,
) -> WhatIfResult:
    """
    Compare annual interest expense before and after pooling.

    Post-pooling, the pool is charged at the USD debit rate, and any shortfall
    of pooled cash against borrowing outside restricted countries is charged at
    the same rate. Parameters are read leniently: the haircut is capped to
    [0, 100] and negative rates count as zero.
    """
    haircut = clamp_percentage(params.fx_haircut_pct)
    credit_rate = parse_non_negative_number(params.blended_credit_rate_pct)
    debit_rate = parse_non_negative_number(params.usd_debit_rate_pct)

    pooled = pooled_cash_after_haircut(graph, haircut)
    credit_interest = pooled * credit_rate / 100

    pre_expense = pre_pooling_expense(currency_totals)

    borrowing = borrowing_outside_restricted(entries, reference)
    net_position = pooled - borrowing
    cash_pool_cost = pooled * debit_rate / 100
    additional_cost = abs(net_position) * debit_rate / 100 if net_position < 0 else 0.0
    post_expense = cash_pool_cost + additional_cost

    net_savings = pre_expense - post_expense
    savings_pct = net_savings / pre_expense * 100 if pre_expense != 0 else 0.0

    return WhatIfResult(
        pooled_cash_after_haircut=pooled,
        credit_interest=credit_interest,
        pre_pooling_expense=pre_expense,
        total_borrowing_ex_restricted=borrowing,
        post_pooling_net_position=net_position,
        cash_pool_borrowing_cost=cash_pool_cost,
        additional_borrowing_cost=additional_cost,
        post_pooling_expense=post_expense,
        net_savings=net_savings,
        savings_percentage=savings_pct,
    )
