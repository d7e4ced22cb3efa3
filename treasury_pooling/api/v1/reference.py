"""GET /v1/reference/* - Static convertibility, currency and FX tables"""

from fastapi import APIRouter, Depends, Query

from treasury_pooling.api.v1.schemas import (
    CountriesResponse,
    CountryInfo,
    CurrenciesResponse,
    CurrencyInfo,
    FxRatesResponse,
    RTCLocationsResponse,
    SuggestedCurrenciesResponse,
)
from treasury_pooling.api.dependencies import get_reference_data
from treasury_pooling.domain.reference_data import REGION_COUNTRIES, ReferenceData

router = APIRouter()


@router.get("/reference/countries", response_model=CountriesResponse)
def list_countries(reference: ReferenceData = Depends(get_reference_data)):
    """Countries with their convertibility category, notes and pooling rule"""
    countries = []
    for name, info in reference.countries.items():
        rule = reference.rule_for(info.category)
        countries.append(
            CountryInfo(
                country=name,
                category=info.category,
                notes=info.notes,
                can_pool=rule.can_pool,
                requires_conversion=rule.requires_conversion,
                target_currency=rule.target_currency,
            )
        )
    return CountriesResponse(countries=countries, regions=REGION_COUNTRIES)


@router.get("/reference/currencies", response_model=CurrenciesResponse)
def list_currencies(
    search: str = Query("", description="Match on currency code or name"),
    reference: ReferenceData = Depends(get_reference_data),
):
    """ISO currency list, optionally filtered"""
    return CurrenciesResponse(
        currencies=[CurrencyInfo(code=code, name=name) for code, name in reference.search_currencies(search)]
    )


@router.get("/reference/countries/{country}/suggested-currencies", response_model=SuggestedCurrenciesResponse)
def get_suggested_currencies(country: str, reference: ReferenceData = Depends(get_reference_data)):
    """Currencies commonly held in a country, with a generic default list"""
    return SuggestedCurrenciesResponse(country=country, currencies=reference.suggest_currencies(country))


@router.get("/reference/rtc-locations", response_model=RTCLocationsResponse)
def list_rtc_locations(reference: ReferenceData = Depends(get_reference_data)):
    """Configured RTC location and the countries eligible to host it"""
    return RTCLocationsResponse(rtc_location=reference.rtc_location, eligible=reference.rtc_locations())


@router.get("/reference/fx-rates", response_model=FxRatesResponse)
def list_fx_rates(reference: ReferenceData = Depends(get_reference_data)):
    return FxRatesResponse(rates={source: dict(targets) for source, targets in reference.fx_rates.items()})
