"""Position aggregation - folds client entries into currency and convertibility totals"""

import logging
from typing import Dict, Iterable, List, Optional

from treasury_pooling.domain.models import (
    ClientEntry,
    ClientSummary,
    ConvertibilityCategory,
    ConvertibilityTotals,
    CountrySummary,
    CurrencyInterest,
    CurrencySummary,
    CurrencyTotals,
    InterestOverview,
    PositionTotals,
)
from treasury_pooling.domain.reference_data import ReferenceData, normalize_currency_code
from treasury_pooling.utils.number_utils import clamp_percentage, parse_non_negative_number

logger = logging.getLogger(__name__)


def empty_convertibility_totals() -> Dict[ConvertibilityCategory, ConvertibilityTotals]:
    return {category: ConvertibilityTotals() for category in ConvertibilityCategory}


def aggregate_positions(entries: Iterable[ClientEntry], reference: ReferenceData) -> PositionTotals:
    """
    Aggregate cash and borrowing per currency and per convertibility category.

    Rules:
    - Incomplete entries (no name, no country or no currencies) are skipped
    - Currency rows without a code are ignored
    - Malformed amounts and rates count as zero
    - Rates keep the highest value seen per currency
    - Unknown countries still feed currency totals but no category
    """
    currency_totals: Dict[str, CurrencyTotals] = {}
    convertibility_totals = empty_convertibility_totals()
    clients: List[ClientSummary] = []
    skipped = 0

    for entry in entries:
        if not entry.is_complete:
            skipped += 1
            logger.debug("Skipping incomplete entry %r", entry.client_name)
            continue

        country_summary = CountrySummary(country=entry.operating_country)
        client_summary = ClientSummary(client_name=entry.client_name, countries=[country_summary])
        entry_cash = 0.0
        entry_borrowing = 0.0

        for position in entry.currencies:
            code = normalize_currency_code(position.currency_code)
            if not code:
                continue

            cash = parse_non_negative_number(position.cash_amount)
            borrowing = parse_non_negative_number(position.borrowing_amount)
            cash_rate = clamp_percentage(position.cash_interest_rate)
            borrowing_rate = clamp_percentage(position.borrowing_interest_rate)

            totals = currency_totals.get(code)
            if totals is None:
                totals = CurrencyTotals(
                    cash_interest_rate=cash_rate,
                    borrowing_interest_rate=borrowing_rate,
                )
                currency_totals[code] = totals
            else:
                # Monotonic max, not a weighted average
                if cash_rate > totals.cash_interest_rate:
                    totals.cash_interest_rate = cash_rate
                if borrowing_rate > totals.borrowing_interest_rate:
                    totals.borrowing_interest_rate = borrowing_rate

            totals.total_cash += cash
            totals.total_borrowing += borrowing
            totals.net_position += cash - borrowing
            totals.borrowing_tenor = position.borrowing_tenor

            country_summary.currencies.append(
                CurrencySummary(
                    currency_code=code,
                    total_cash=cash,
                    total_borrowing=borrowing,
                    net_position=cash - borrowing,
                )
            )
            entry_cash += cash
            entry_borrowing += borrowing

        client_summary.total_assets = entry_cash
        client_summary.total_liabilities = entry_borrowing
        client_summary.net_position = entry_cash - entry_borrowing
        clients.append(client_summary)

        category = reference.category_for(entry.operating_country)
        if category is None:
            logger.debug("Country %r has no convertibility data", entry.operating_country)
            continue

        bucket = convertibility_totals[category]
        if entry.operating_country not in bucket.countries:
            bucket.countries.append(entry.operating_country)
        bucket.total_cash += entry_cash
        bucket.total_borrowing += entry_borrowing
        bucket.net_position += entry_cash - entry_borrowing

    _apply_category_shares(convertibility_totals)

    return PositionTotals(
        currency_totals=currency_totals,
        convertibility_totals=convertibility_totals,
        clients=clients,
        skipped_entries=skipped,
    )


def _apply_category_shares(convertibility_totals: Dict[ConvertibilityCategory, ConvertibilityTotals]) -> None:
    """Share of absolute net position per category, 0 when nothing is held"""
    total = sum(abs(t.net_position) for t in convertibility_totals.values())
    for totals in convertibility_totals.values():
        totals.share_pct = abs(totals.net_position) / total * 100 if total > 0 else 0.0


def summarize_interest(currency_totals: Dict[str, CurrencyTotals]) -> InterestOverview:
    """Annualized interest earned and paid per currency, at the bookkept rates"""
    rows = []
    for code, totals in currency_totals.items():
        earned = totals.total_cash * totals.cash_interest_rate / 100
        expense = totals.total_borrowing * totals.borrowing_interest_rate / 100
        rows.append(
            CurrencyInterest(
                currency_code=code,
                net_position=totals.net_position,
                cash_interest_rate=totals.cash_interest_rate,
                interest_earned=earned,
                borrowing_interest_rate=totals.borrowing_interest_rate,
                interest_expense=expense,
                net_interest=earned - expense,
            )
        )

    # sorted() is stable, so ties keep first-seen currency order
    rows = sorted(rows, key=lambda row: abs(row.net_position), reverse=True)
    total_earned = sum(row.interest_earned for row in rows)
    total_expense = sum(row.interest_expense for row in rows)

    return InterestOverview(
        currencies=rows,
        total_interest_earned=total_earned,
        total_interest_expense=total_expense,
        net_interest=total_earned - total_expense,
    )


def filter_entries(
    entries: Iterable[ClientEntry],
    client: Optional[str] = None,
    country: Optional[str] = None,
    currency: Optional[str] = None,
) -> List[ClientEntry]:
    """
    Case-insensitive substring filter over client, country and currency.

    Entries keep only the currency rows that match; an entry with no matching
    rows is dropped. Inputs are never mutated.
    """
    client_term = (client or "").strip().lower()
    country_term = (country or "").strip().lower()
    currency_term = (currency or "").strip().lower()

    filtered = []
    for entry in entries:
        if client_term and client_term not in (entry.client_name or "").lower():
            continue
        if country_term and country_term not in (entry.operating_country or "").lower():
            continue

        positions = [
            p for p in entry.currencies
            if not currency_term or currency_term in (p.currency_code or "").lower()
        ]
        if not positions:
            continue

        filtered.append(
            ClientEntry(
                client_name=entry.client_name,
                operating_country=entry.operating_country,
                currencies=positions,
            )
        )

    return filtered
