"""Unit tests for reference tables and lookups"""

from treasury_pooling.domain.models import ConvertibilityCategory
from treasury_pooling.domain.reference_data import (
    DEFAULT_SUGGESTED_CURRENCIES,
    ReferenceData,
    build_reference_data,
    normalize_currency_code,
)


def test_every_country_maps_to_one_category(reference: ReferenceData):
    """Each country appears in exactly one category group"""
    grouped = reference.countries_by_category()
    flattened = [country for countries in grouped.values() for country in countries]

    assert len(flattened) == len(set(flattened)) == len(reference.countries)
    assert grouped[ConvertibilityCategory.RESTRICTED] == ["Vietnam", "India", "China"]


def test_pooling_rules_per_category(reference: ReferenceData):
    restricted = reference.rule_for(ConvertibilityCategory.RESTRICTED)
    partial = reference.rule_for(ConvertibilityCategory.PARTIALLY_CONVERTIBLE)
    free = reference.rule_for(ConvertibilityCategory.FREELY_CONVERTIBLE)

    assert restricted.can_pool is False
    assert partial.can_pool and partial.requires_conversion and partial.target_currency == "USD"
    assert free.can_pool and not free.requires_conversion


def test_resolve_country(reference: ReferenceData):
    assert reference.resolve_country("Malaysia") == "Malaysia"
    assert reference.resolve_country("Atlantis") is None
    assert reference.resolve_country("") is None
    assert reference.category_for("Germany") is None


def test_fx_rate_direct_pair_and_identity_fallback(reference: ReferenceData):
    assert reference.fx_rate("MYR", "USD") == 0.21
    assert reference.fx_rate("THB", "USD") == 1.0  # not listed
    assert reference.fx_rate("USD", "USD") == 1.0


def test_suggested_currencies_with_default(reference: ReferenceData):
    assert reference.suggest_currencies("Malaysia") == ["MYR", "USD", "SGD", "CNY"]
    assert reference.suggest_currencies("Kenya") == DEFAULT_SUGGESTED_CURRENCIES


def test_search_currencies_matches_code_or_name(reference: ReferenceData):
    by_code = reference.search_currencies("myr")
    by_name = reference.search_currencies("ringgit")

    assert by_code == [("MYR", "Malaysian Ringgit")]
    assert by_name == by_code
    assert len(reference.search_currencies("")) == len(reference.currencies)


def test_rtc_locations_are_freely_convertible(reference: ReferenceData):
    locations = reference.rtc_locations()

    assert "Singapore" in locations
    assert "Malaysia" not in locations
    assert all(reference.category_for(c) == ConvertibilityCategory.FREELY_CONVERTIBLE for c in locations)


def test_build_reference_data_falls_back_for_ineligible_rtc():
    """A restricted country cannot host the RTC"""
    reference = build_reference_data(rtc_location="China")
    assert reference.rtc_location == "Singapore"

    reference = build_reference_data(rtc_location="Hong Kong", default_target_currency="eur")
    assert reference.rtc_location == "Hong Kong"
    assert reference.default_target_currency == "EUR"


def test_normalize_currency_code():
    assert normalize_currency_code(" usd ") == "USD"
    assert normalize_currency_code(None) == ""


def test_configured_target_currency_drives_conversion_rule():
    reference = build_reference_data(default_target_currency="eur")

    partial = reference.rule_for(ConvertibilityCategory.PARTIALLY_CONVERTIBLE)
    assert partial.target_currency == "EUR"
    assert reference.rule_for(ConvertibilityCategory.FREELY_CONVERTIBLE).target_currency is None


def test_listed_zero_rate_is_not_treated_as_missing():
    reference = ReferenceData(fx_rates={"XYZ": {"USD": 0.0}})

    assert reference.fx_rate("XYZ", "USD") == 0.0
    assert reference.fx_rate("ABC", "USD") == 1.0
