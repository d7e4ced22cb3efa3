"""POST /v1/liquidity/* - Recompute totals, pooling graph and what-if figures"""

import time
import logging
from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from treasury_pooling.api.v1.schemas import (
    ClientEntrySchema,
    DerivedStateResponse,
    EntriesResponse,
    FilterRequest,
    LiquidityRequest,
    PoolingResponse,
    WhatIfResultSchema,
)
from treasury_pooling.api.dependencies import get_reference_data, get_request_id, resolve_what_if_params
from treasury_pooling.domain.aggregation import filter_entries
from treasury_pooling.domain.engine import compute_derived_state
from treasury_pooling.domain.models import ClientEntry, DerivedState, WhatIfParams
from treasury_pooling.domain.reference_data import ReferenceData
from treasury_pooling.infrastructure.observability.metrics import record_recompute
from treasury_pooling.infrastructure.observability.logging import log_recompute

router = APIRouter()


def recompute(
    entries: List[ClientEntry],
    params: WhatIfParams,
    reference: ReferenceData,
    request_id: str,
) -> DerivedState:
    """Run one recomputation pass with timing, metrics and logging"""
    start_time = time.time()

    try:
        state = compute_derived_state(entries, reference, params)
    except Exception as e:
        logging.error(f"Recompute failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration = time.time() - start_time
    record_recompute(state, duration)
    log_recompute(
        request_id,
        entry_count=len(entries),
        link_count=len(state.pooling_graph.links),
        skipped_entries=state.skipped_entries,
        duration_ms=duration * 1000,
    )
    return state


@router.post("/liquidity/summary", response_model=DerivedStateResponse, response_model_exclude_none=True)
def create_summary(
    request_body: LiquidityRequest,
    request: Request,
    reference: ReferenceData = Depends(get_reference_data),
):
    """
    Recompute the full derived state for a set of client entries.

    Returns:
        Currency and convertibility totals, client breakdown, interest view,
        pooling graph, RTC metrics and impact, and what-if figures
    """
    state = recompute(
        request_body.to_domain(),
        resolve_what_if_params(request_body.what_if),
        reference,
        get_request_id(request),
    )
    return DerivedStateResponse.model_validate(asdict(state))


@router.post("/liquidity/pooling", response_model=PoolingResponse, response_model_exclude_none=True)
def create_pooling_simulation(
    request_body: LiquidityRequest,
    request: Request,
    reference: ReferenceData = Depends(get_reference_data),
):
    """Simulate pooling to the RTC: flow graph, RTC metrics and sink totals"""
    state = recompute(
        request_body.to_domain(),
        resolve_what_if_params(request_body.what_if),
        reference,
        get_request_id(request),
    )
    return PoolingResponse(
        pooling_graph=asdict(state.pooling_graph),
        rtc_metrics=asdict(state.rtc_metrics),
        pooling_summary=asdict(state.pooling_summary),
    )


@router.post("/liquidity/what-if", response_model=WhatIfResultSchema)
def create_what_if(
    request_body: LiquidityRequest,
    request: Request,
    reference: ReferenceData = Depends(get_reference_data),
):
    """Pre/post-pooling interest expense and savings for the given parameters"""
    state = recompute(
        request_body.to_domain(),
        resolve_what_if_params(request_body.what_if),
        reference,
        get_request_id(request),
    )
    return WhatIfResultSchema.model_validate(asdict(state.what_if))


@router.post("/liquidity/filter", response_model=EntriesResponse)
def filter_liquidity_entries(request_body: FilterRequest):
    """Narrow entries by client, country and currency (case-insensitive substring)"""
    filtered = filter_entries(
        request_body.to_domain(),
        client=request_body.client,
        country=request_body.country,
        currency=request_body.currency,
    )
    return EntriesResponse(entries=[ClientEntrySchema.from_domain(entry) for entry in filtered])
