"""Domain models - pure Python dataclasses representing liquidity positions and derived views"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NewType, Optional

CountryName = NewType("CountryName", str)
CurrencyCode = NewType("CurrencyCode", str)


class ConvertibilityCategory(str, Enum):
    """Country-level classification governing whether its cash can be pooled"""

    RESTRICTED = "Restricted Currencies"
    PARTIALLY_CONVERTIBLE = "Partially Convertible"
    FREELY_CONVERTIBLE = "Freely Convertible Currencies"


class BorrowingTenor(str, Enum):
    SHORT_TERM = "Short Term"
    LONG_TERM = "Long Term"

    @classmethod
    def parse(cls, value: Any) -> "BorrowingTenor":
        """Accept enum members, values ("Long Term") or names ("LongTerm"); default short term"""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").replace(" ", "").replace("_", "").lower()
        if normalized == "longterm":
            return cls.LONG_TERM
        return cls.SHORT_TERM


@dataclass
class CurrencyPosition:
    """
    One currency balance held by a client in one country.

    Numeric fields carry the raw form values; they are parsed leniently by the
    engine, never validated here.
    """

    currency_code: str
    cash_amount: Any = 0
    cash_interest_rate: Any = 0
    borrowing_amount: Any = 0
    borrowing_interest_rate: Any = 0
    borrowing_tenor: BorrowingTenor = BorrowingTenor.SHORT_TERM

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CurrencyPosition":
        """Build from the camelCase snapshot shape"""
        return cls(
            currency_code=str(data.get("currencyCode") or ""),
            cash_amount=data.get("cashAmount", 0),
            cash_interest_rate=data.get("cashInterestRate", 0),
            borrowing_amount=data.get("borrowingAmount", 0),
            borrowing_interest_rate=data.get("borrowingInterestRate", 0),
            borrowing_tenor=BorrowingTenor.parse(data.get("borrowingTenor")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currencyCode": self.currency_code,
            "cashAmount": self.cash_amount,
            "cashInterestRate": self.cash_interest_rate,
            "borrowingAmount": self.borrowing_amount,
            "borrowingInterestRate": self.borrowing_interest_rate,
            "borrowingTenor": self.borrowing_tenor.value,
        }


@dataclass
class ClientEntry:
    """One client operating in one country"""

    client_name: str
    operating_country: str
    currencies: List[CurrencyPosition] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Entries missing a name, a country or currencies take no part in any computation"""
        return bool(self.client_name and self.operating_country and self.currencies)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientEntry":
        return cls(
            client_name=str(data.get("clientName") or ""),
            operating_country=str(data.get("operatingCountry") or ""),
            currencies=[CurrencyPosition.from_dict(c) for c in data.get("currencies") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clientName": self.client_name,
            "operatingCountry": self.operating_country,
            "currencies": [c.to_dict() for c in self.currencies],
        }


@dataclass(frozen=True)
class PoolingRule:
    """Per-category pooling policy"""

    can_pool: bool
    requires_conversion: bool
    target_currency: Optional[str] = None


@dataclass(frozen=True)
class CountryConvertibility:
    category: ConvertibilityCategory
    notes: str


# Aggregation outputs


@dataclass
class CurrencyTotals:
    """
    Totals for one currency across all valid entries.

    Interest rates hold the highest rate seen for the currency, not an
    average. This mirrors the legacy tool; a balance-weighted average would
    be the better financial measure.
    """

    total_cash: float = 0.0
    total_borrowing: float = 0.0
    net_position: float = 0.0
    cash_interest_rate: float = 0.0
    borrowing_interest_rate: float = 0.0
    borrowing_tenor: BorrowingTenor = BorrowingTenor.SHORT_TERM


@dataclass
class ConvertibilityTotals:
    total_cash: float = 0.0
    total_borrowing: float = 0.0
    net_position: float = 0.0
    countries: List[str] = field(default_factory=list)  # insertion-ordered, unique
    share_pct: float = 0.0


@dataclass
class CurrencySummary:
    currency_code: str
    total_cash: float
    total_borrowing: float
    net_position: float


@dataclass
class CountrySummary:
    country: str
    currencies: List[CurrencySummary] = field(default_factory=list)


@dataclass
class ClientSummary:
    client_name: str
    countries: List[CountrySummary] = field(default_factory=list)
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    net_position: float = 0.0


@dataclass
class CurrencyInterest:
    currency_code: str
    net_position: float
    cash_interest_rate: float
    interest_earned: float
    borrowing_interest_rate: float
    interest_expense: float
    net_interest: float


@dataclass
class InterestOverview:
    """Annualized interest view per currency, largest absolute net position first"""

    currencies: List[CurrencyInterest] = field(default_factory=list)
    total_interest_earned: float = 0.0
    total_interest_expense: float = 0.0
    net_interest: float = 0.0


@dataclass
class PositionTotals:
    currency_totals: Dict[str, CurrencyTotals]
    convertibility_totals: Dict[ConvertibilityCategory, ConvertibilityTotals]
    clients: List[ClientSummary] = field(default_factory=list)
    skipped_entries: int = 0


# Pooling outputs


@dataclass
class PoolingNode:
    id: str
    category: ConvertibilityCategory


@dataclass
class PoolingLink:
    """One routed currency balance; value/converted_value are floored for display only"""

    source: str
    target: str
    value: float
    currency: str
    converted_value: Optional[float] = None


@dataclass
class PoolingGraph:
    nodes: List[PoolingNode] = field(default_factory=list)
    links: List[PoolingLink] = field(default_factory=list)
    rtc_total: float = 0.0


@dataclass
class RTCMetrics:
    potential_upstream_to_rtc: float = 0.0  # FreelyConvertible cash
    restricted_funds: float = 0.0  # Restricted cash
    pending_conversion: float = 0.0  # PartiallyConvertible cash, source currency


@dataclass
class PoolingResult:
    graph: PoolingGraph
    metrics: RTCMetrics


@dataclass
class PoolingSummary:
    restricted_total: float
    restricted_by_currency: Dict[str, float]
    pooled_to_rtc: float
    conversions: List[PoolingLink]


@dataclass
class RTCImpact:
    location: str
    notes: str
    poolable_total: float
    share_of_exposure_pct: float


# What-if


@dataclass(frozen=True)
class WhatIfParams:
    fx_haircut_pct: Any = 0.0
    blended_credit_rate_pct: Any = 0.0
    usd_debit_rate_pct: Any = 0.0


@dataclass
class WhatIfResult:
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


@dataclass
class DerivedState:
    """Everything recomputed from one entries snapshot"""

    currency_totals: Dict[str, CurrencyTotals]
    convertibility_totals: Dict[ConvertibilityCategory, ConvertibilityTotals]
    clients: List[ClientSummary]
    interest: InterestOverview
    pooling_graph: PoolingGraph
    rtc_metrics: RTCMetrics
    pooling_summary: PoolingSummary
    rtc_impact: RTCImpact
    what_if: WhatIfResult
    skipped_entries: int = 0
