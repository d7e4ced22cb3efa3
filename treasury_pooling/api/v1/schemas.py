"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional, Union

from treasury_pooling.domain.models import (
    BorrowingTenor,
    ClientEntry,
    ConvertibilityCategory,
    CurrencyPosition,
)

# Form values may be numbers, numeric strings or half-typed garbage;
# the engine parses them leniently so the schema must not reject them.
RawNumber = Union[float, str, None]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CurrencyPositionSchema(CamelModel):
    """One currency row of a client entry"""

    currency_code: Optional[str] = ""
    cash_amount: RawNumber = 0
    cash_interest_rate: RawNumber = 0
    borrowing_amount: RawNumber = 0
    borrowing_interest_rate: RawNumber = 0
    borrowing_tenor: Optional[str] = BorrowingTenor.SHORT_TERM.value

    def to_domain(self) -> CurrencyPosition:
        return CurrencyPosition(
            currency_code=self.currency_code or "",
            cash_amount=self.cash_amount,
            cash_interest_rate=self.cash_interest_rate,
            borrowing_amount=self.borrowing_amount,
            borrowing_interest_rate=self.borrowing_interest_rate,
            borrowing_tenor=BorrowingTenor.parse(self.borrowing_tenor),
        )


class ClientEntrySchema(CamelModel):
    """One client in one operating country; incomplete entries are accepted and skipped"""

    client_name: Optional[str] = ""
    operating_country: Optional[str] = ""
    currencies: Optional[List[CurrencyPositionSchema]] = Field(default_factory=list)

    def to_domain(self) -> ClientEntry:
        return ClientEntry(
            client_name=self.client_name or "",
            operating_country=self.operating_country or "",
            currencies=[c.to_domain() for c in self.currencies or []],
        )

    @classmethod
    def from_domain(cls, entry: ClientEntry) -> "ClientEntrySchema":
        return cls.model_validate(entry.to_dict())


class WhatIfParamsSchema(CamelModel):
    """Omitted values fall back to the configured defaults"""

    fx_haircut_pct: Optional[float] = Field(None, ge=0, le=100)
    blended_credit_rate_pct: Optional[float] = Field(None, ge=0)
    usd_debit_rate_pct: Optional[float] = Field(None, ge=0)


class EntriesRequest(CamelModel):
    entries: List[ClientEntrySchema] = Field(default_factory=list)

    def to_domain(self) -> List[ClientEntry]:
        return [entry.to_domain() for entry in self.entries]


class LiquidityRequest(EntriesRequest):
    """Request body for POST /v1/liquidity/summary and /what-if"""

    what_if: Optional[WhatIfParamsSchema] = None


class FilterRequest(EntriesRequest):
    """Request body for POST /v1/liquidity/filter"""

    client: Optional[str] = None
    country: Optional[str] = None
    currency: Optional[str] = None


class EntriesResponse(CamelModel):
    entries: List[ClientEntrySchema]


# Derived state


class CurrencyTotalsSchema(CamelModel):
    total_cash: float
    total_borrowing: float
    net_position: float
    cash_interest_rate: float
    borrowing_interest_rate: float
    borrowing_tenor: BorrowingTenor


class ConvertibilityTotalsSchema(CamelModel):
    total_cash: float
    total_borrowing: float
    net_position: float
    countries: List[str]
    share_pct: float


class CurrencySummarySchema(CamelModel):
    currency_code: str
    total_cash: float
    total_borrowing: float
    net_position: float


class CountrySummarySchema(CamelModel):
    country: str
    currencies: List[CurrencySummarySchema]


class ClientSummarySchema(CamelModel):
    client_name: str
    countries: List[CountrySummarySchema]
    total_assets: float
    total_liabilities: float
    net_position: float


class CurrencyInterestSchema(CamelModel):
    currency_code: str
    net_position: float
    cash_interest_rate: float
    interest_earned: float
    borrowing_interest_rate: float
    interest_expense: float
    net_interest: float


class InterestOverviewSchema(CamelModel):
    currencies: List[CurrencyInterestSchema]
    total_interest_earned: float
    total_interest_expense: float
    net_interest: float


class PoolingNodeSchema(CamelModel):
    id: str
    category: ConvertibilityCategory


class PoolingLinkSchema(CamelModel):
    source: str
    target: str
    value: float
    currency: str
    converted_value: Optional[float] = None


class PoolingGraphSchema(CamelModel):
    nodes: List[PoolingNodeSchema]
    links: List[PoolingLinkSchema]
    rtc_total: float


class RTCMetricsSchema(CamelModel):
    potential_upstream_to_rtc: float = Field(alias="potentialUpstreamToRTC")
    restricted_funds: float
    pending_conversion: float


class PoolingSummarySchema(CamelModel):
    restricted_total: float
    restricted_by_currency: Dict[str, float]
    pooled_to_rtc: float = Field(alias="pooledToRTC")
    conversions: List[PoolingLinkSchema]


class RTCImpactSchema(CamelModel):
    location: str
    notes: str
    poolable_total: float
    share_of_exposure_pct: float


class WhatIfResultSchema(CamelModel):
    pooled_cash_after_haircut: float
    credit_interest: float
    pre_pooling_expense: float
    total_borrowing_ex_restricted: float
    post_pooling_net_position: float
    cash_pool_borrowing_cost: float
    additional_borrowing_cost: float
    post_pooling_expense: float
    net_savings: float
    savings_percentage: float


class DerivedStateResponse(CamelModel):
    """Response for POST /v1/liquidity/summary"""

    currency_totals: Dict[str, CurrencyTotalsSchema]
    convertibility_totals: Dict[ConvertibilityCategory, ConvertibilityTotalsSchema]
    clients: List[ClientSummarySchema]
    interest: InterestOverviewSchema
    pooling_graph: PoolingGraphSchema
    rtc_metrics: RTCMetricsSchema = Field(alias="rtcMetrics")
    pooling_summary: PoolingSummarySchema
    rtc_impact: RTCImpactSchema = Field(alias="rtcImpact")
    what_if: WhatIfResultSchema
    skipped_entries: int


class PoolingResponse(CamelModel):
    """Response for POST /v1/liquidity/pooling"""

    pooling_graph: PoolingGraphSchema
    rtc_metrics: RTCMetricsSchema = Field(alias="rtcMetrics")
    pooling_summary: PoolingSummarySchema


# Reference data


class CountryInfo(CamelModel):
    country: str
    category: ConvertibilityCategory
    notes: str
    can_pool: bool
    requires_conversion: bool
    target_currency: Optional[str] = None


class CountriesResponse(CamelModel):
    countries: List[CountryInfo]
    regions: Dict[str, List[str]]


class CurrencyInfo(CamelModel):
    code: str
    name: str


class CurrenciesResponse(CamelModel):
    currencies: List[CurrencyInfo]


class SuggestedCurrenciesResponse(CamelModel):
    country: str
    currencies: List[str]


class RTCLocationsResponse(CamelModel):
    rtc_location: str = Field(alias="rtcLocation")
    eligible: List[str]


class FxRatesResponse(CamelModel):
    rates: Dict[str, Dict[str, float]]


# Snapshots


class SnapshotResponse(CamelModel):
    """A stored entries snapshot"""

    name: str
    saved_at: str
    entries: List[ClientEntrySchema]


class SnapshotListItem(CamelModel):
    name: str
    saved_at: str
    entry_count: int


class SnapshotListResponse(CamelModel):
    snapshots: List[SnapshotListItem]


class FormStateResponse(CamelModel):
    saved_at: str
    entries: List[ClientEntrySchema]
