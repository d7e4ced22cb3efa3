"""Liquidity engine - main entry point recomputing all derived state from one snapshot"""

from typing import List, Optional, Sequence

from treasury_pooling.domain.aggregation import aggregate_positions, summarize_interest
from treasury_pooling.domain.models import ClientEntry, DerivedState, WhatIfParams
from treasury_pooling.domain.pooling import assess_rtc_impact, simulate_pooling, summarize_pooling
from treasury_pooling.domain.reference_data import ReferenceData
from treasury_pooling.domain.what_if import calculate_what_if


def compute_derived_state(
    entries: Sequence[ClientEntry],
    reference: ReferenceData,
    params: Optional[WhatIfParams] = None,
) -> DerivedState:
    """
    Recompute everything from scratch for the given entries.

    Callers invoke this after every change to their entries. There is no
    cache or incremental path, and the same input always yields the same output.
    """
    snapshot: List[ClientEntry] = list(entries)
    params = params or WhatIfParams()

    positions = aggregate_positions(snapshot, reference)
    pooling = simulate_pooling(snapshot, reference)

    return DerivedState(
        currency_totals=positions.currency_totals,
        convertibility_totals=positions.convertibility_totals,
        clients=positions.clients,
        interest=summarize_interest(positions.currency_totals),
        pooling_graph=pooling.graph,
        rtc_metrics=pooling.metrics,
        pooling_summary=summarize_pooling(pooling.graph),
        rtc_impact=assess_rtc_impact(pooling.metrics, positions.currency_totals, reference),
        what_if=calculate_what_if(pooling.graph, snapshot, positions.currency_totals, params, reference),
        skipped_entries=positions.skipped_entries,
    )
