"""Pooling simulation - routes cash balances to the RTC or the restricted sink"""

import logging
from typing import Dict, Iterable, Set

from treasury_pooling.domain.models import (
    ClientEntry,
    ConvertibilityCategory,
    CurrencyTotals,
    PoolingGraph,
    PoolingLink,
    PoolingNode,
    PoolingResult,
    PoolingSummary,
    RTCImpact,
    RTCMetrics,
)
from treasury_pooling.domain.reference_data import ReferenceData, normalize_currency_code
from treasury_pooling.utils.number_utils import parse_non_negative_number

logger = logging.getLogger(__name__)

RTC_NODE = "RTC"
RESTRICTED_NODE = "Restricted"

# Keeps zero-ish flows visible as thin edges; never applied to metrics
LINK_VALUE_FLOOR = 0.1


def _floored(amount: float) -> float:
    return max(LINK_VALUE_FLOOR, amount)


def simulate_pooling(entries: Iterable[ClientEntry], reference: ReferenceData) -> PoolingResult:
    """
    Build the pooling flow graph and RTC metrics.

    Only gross cash is eligible: borrowing is ignored and each currency row with
    cash > 0 becomes exactly one link. Routing by the country's pooling rule:
    - cannot pool → "Restricted"
    - pool after conversion → "RTC", carrying the converted amount
    - pool directly → "RTC"

    Link order follows entry and currency order. The two sink nodes are always
    appended last, whether or not any link reaches them.
    """
    graph = PoolingGraph()
    metrics = RTCMetrics()
    seen_nodes: Set[str] = set()

    for entry in entries:
        if not entry.is_complete:
            continue

        country = reference.resolve_country(entry.operating_country)
        if country is None:
            continue

        category = reference.category_for(country)
        rule = reference.rule_for(category)

        if country not in seen_nodes:
            graph.nodes.append(PoolingNode(id=country, category=category))
            seen_nodes.add(country)

        for position in entry.currencies:
            code = normalize_currency_code(position.currency_code)
            if not code:
                continue

            cash = parse_non_negative_number(position.cash_amount)
            if cash <= 0:
                continue

            if not rule.can_pool:
                graph.links.append(
                    PoolingLink(source=country, target=RESTRICTED_NODE, value=_floored(cash), currency=code)
                )
                metrics.restricted_funds += cash

            elif rule.requires_conversion:
                target_currency = rule.target_currency or reference.default_target_currency
                converted = cash * reference.fx_rate(code, target_currency)
                graph.links.append(
                    PoolingLink(
                        source=country,
                        target=RTC_NODE,
                        value=_floored(cash),
                        converted_value=_floored(converted),
                        currency=code,
                    )
                )
                metrics.pending_conversion += cash
                graph.rtc_total += converted

            else:
                graph.links.append(
                    PoolingLink(source=country, target=RTC_NODE, value=_floored(cash), currency=code)
                )
                metrics.potential_upstream_to_rtc += cash
                graph.rtc_total += cash

    graph.nodes.append(PoolingNode(id=RTC_NODE, category=ConvertibilityCategory.FREELY_CONVERTIBLE))
    graph.nodes.append(PoolingNode(id=RESTRICTED_NODE, category=ConvertibilityCategory.RESTRICTED))

    logger.debug("Pooling graph built with %d nodes and %d links", len(graph.nodes), len(graph.links))
    return PoolingResult(graph=graph, metrics=metrics)


def summarize_pooling(graph: PoolingGraph) -> PoolingSummary:
    """Totals per sink as displayed next to the flow diagram (uses link values)"""
    restricted_by_currency: Dict[str, float] = {}
    restricted_total = 0.0
    pooled_to_rtc = 0.0
    conversions = []

    for link in graph.links:
        if link.target == RESTRICTED_NODE:
            restricted_total += link.value
            restricted_by_currency[link.currency] = restricted_by_currency.get(link.currency, 0.0) + link.value
        elif link.target == RTC_NODE:
            pooled_to_rtc += link.converted_value if link.converted_value is not None else link.value
            if link.converted_value is not None:
                conversions.append(link)

    return PoolingSummary(
        restricted_total=restricted_total,
        restricted_by_currency=restricted_by_currency,
        pooled_to_rtc=pooled_to_rtc,
        conversions=conversions,
    )


def assess_rtc_impact(
    metrics: RTCMetrics,
    currency_totals: Dict[str, CurrencyTotals],
    reference: ReferenceData,
) -> RTCImpact:
    """Cash the RTC could receive and its share of total absolute net exposure"""
    poolable = metrics.potential_upstream_to_rtc + metrics.pending_conversion
    exposure = sum(abs(t.net_position) for t in currency_totals.values())

    return RTCImpact(
        location=reference.rtc_location,
        notes=reference.notes_for(reference.rtc_location),
        poolable_total=poolable,
        share_of_exposure_pct=poolable / exposure * 100 if exposure > 0 else 0.0,
    )
