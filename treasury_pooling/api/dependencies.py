"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from typing import Optional
from fastapi import Request
from treasury_pooling.api.v1.schemas import WhatIfParamsSchema
from treasury_pooling.config import settings
from treasury_pooling.domain.models import WhatIfParams
from treasury_pooling.domain.reference_data import ReferenceData, build_reference_data


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache(maxsize=1)
def get_reference_data() -> ReferenceData:
    """Provide the reference tables, built once per process"""
    return build_reference_data(
        rtc_location=settings.rtc_location,
        default_target_currency=settings.default_target_currency,
    )


def resolve_what_if_params(params: Optional[WhatIfParamsSchema]) -> WhatIfParams:
    """Fill omitted what-if values from configured defaults"""
    params = params or WhatIfParamsSchema()
    return WhatIfParams(
        fx_haircut_pct=(
            params.fx_haircut_pct if params.fx_haircut_pct is not None else settings.default_fx_haircut_pct
        ),
        blended_credit_rate_pct=(
            params.blended_credit_rate_pct
            if params.blended_credit_rate_pct is not None
            else settings.default_blended_credit_rate_pct
        ),
        usd_debit_rate_pct=(
            params.usd_debit_rate_pct if params.usd_debit_rate_pct is not None else settings.default_usd_debit_rate_pct
        ),
    )
