"""Static reference tables: convertibility, pooling rules, FX rates and currency suggestions"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Tuple

from treasury_pooling.domain.models import (
    ConvertibilityCategory,
    CountryConvertibility,
    CountryName,
    CurrencyCode,
    PoolingRule,
)

logger = logging.getLogger(__name__)

RESTRICTED = ConvertibilityCategory.RESTRICTED
PARTIAL = ConvertibilityCategory.PARTIALLY_CONVERTIBLE
FREE = ConvertibilityCategory.FREELY_CONVERTIBLE

COUNTRY_CONVERTIBILITY: Dict[str, CountryConvertibility] = {
    "Vietnam": CountryConvertibility(RESTRICTED, "Local funds must stay within the country"),
    "India": CountryConvertibility(RESTRICTED, "Strict capital controls and repatriation limits"),
    "Malaysia": CountryConvertibility(PARTIAL, "Conversion to USD/foreign currency required for repatriation"),
    "Indonesia": CountryConvertibility(PARTIAL, "Central bank oversight required for repatriation"),
    "Singapore": CountryConvertibility(FREE, "RTC location, no restrictions"),
    "Hong Kong": CountryConvertibility(FREE, "No material restrictions"),
    "Australia": CountryConvertibility(FREE, "No material restrictions"),
    "China": CountryConvertibility(RESTRICTED, "Strict capital controls and SAFE approval required"),
    "Philippines": CountryConvertibility(PARTIAL, "Central bank registration required for repatriation"),
    "Thailand": CountryConvertibility(PARTIAL, "Bank of Thailand oversight required"),
    "United States": CountryConvertibility(FREE, "Global reserve currency"),
    "United Kingdom": CountryConvertibility(FREE, "No material restrictions"),
    "Japan": CountryConvertibility(FREE, "No material restrictions"),
    "South Korea": CountryConvertibility(FREE, "No material restrictions"),
    "Taiwan": CountryConvertibility(PARTIAL, "Central bank oversight required"),
}

POOLING_RULES: Dict[ConvertibilityCategory, PoolingRule] = {
    RESTRICTED: PoolingRule(can_pool=False, requires_conversion=False),
    PARTIAL: PoolingRule(can_pool=True, requires_conversion=True, target_currency="USD"),
    FREE: PoolingRule(can_pool=True, requires_conversion=False),
}

# Direct pairs only: FX_RATES[source][target]
FX_RATES: Dict[str, Dict[str, float]] = {
    "USD": {"EUR": 0.92, "SGD": 1.35, "MYR": 4.75, "INR": 83.25},
    "EUR": {"USD": 1.09, "SGD": 1.47, "MYR": 5.17, "INR": 90.73},
    "SGD": {"USD": 0.74, "EUR": 0.68, "MYR": 3.52, "INR": 61.67},
    "MYR": {"USD": 0.21, "EUR": 0.19, "SGD": 0.28, "INR": 17.52},
    "INR": {"USD": 0.012, "EUR": 0.011, "SGD": 0.016, "MYR": 0.057},
}

SUGGESTED_CURRENCIES: Dict[str, List[str]] = {
    "Singapore": ["SGD", "USD", "EUR", "JPY", "CNY", "HKD", "AUD", "GBP", "MYR", "IDR", "THB"],
    "United States": ["USD", "EUR", "GBP", "JPY", "CAD", "MXN"],
    "United Kingdom": ["GBP", "EUR", "USD"],
    "Japan": ["JPY", "USD", "EUR", "CNY"],
    "China": ["CNY", "USD", "HKD", "JPY"],
    "Hong Kong": ["HKD", "USD", "CNY", "JPY"],
    "Australia": ["AUD", "USD", "JPY", "NZD"],
    "Germany": ["EUR", "USD", "GBP", "CHF"],
    "France": ["EUR", "USD", "GBP"],
    "India": ["INR", "USD", "EUR", "GBP"],
    "Indonesia": ["IDR", "USD", "SGD", "JPY"],
    "Malaysia": ["MYR", "USD", "SGD", "CNY"],
}

DEFAULT_SUGGESTED_CURRENCIES: List[str] = ["USD", "EUR", "GBP", "JPY"]

REGION_COUNTRIES: Dict[str, List[str]] = {
    "Asia": [
        "China", "Hong Kong", "India", "Indonesia", "Japan", "Malaysia",
        "Philippines", "Singapore", "South Korea", "Taiwan", "Thailand", "Vietnam",
    ],
    "Europe": [
        "Austria", "Belgium", "Denmark", "Finland", "France", "Germany", "Greece",
        "Ireland", "Italy", "Netherlands", "Norway", "Poland", "Portugal", "Spain",
        "Sweden", "Switzerland", "United Kingdom",
    ],
    "North America": ["Canada", "Mexico", "United States"],
    "South America": ["Argentina", "Brazil", "Chile", "Colombia", "Peru"],
    "Oceania": ["Australia", "New Zealand"],
    "Africa": ["Egypt", "Kenya", "Nigeria", "South Africa"],
    "Middle East": ["Israel", "Saudi Arabia", "United Arab Emirates"],
}

ISO_CURRENCIES: List[Tuple[str, str]] = [
    ("AED", "United Arab Emirates Dirham"),
    ("AFN", "Afghan Afghani"),
    ("ALL", "Albanian Lek"),
    ("AMD", "Armenian Dram"),
    ("ANG", "Netherlands Antillean Guilder"),
    ("AOA", "Angolan Kwanza"),
    ("ARS", "Argentine Peso"),
    ("AUD", "Australian Dollar"),
    ("AWG", "Aruban Florin"),
    ("AZN", "Azerbaijani Manat"),
    ("BAM", "Bosnia-Herzegovina Convertible Mark"),
    ("BBD", "Barbadian Dollar"),
    ("BDT", "Bangladeshi Taka"),
    ("BGN", "Bulgarian Lev"),
    ("BHD", "Bahraini Dinar"),
    ("BIF", "Burundian Franc"),
    ("BMD", "Bermudan Dollar"),
    ("BND", "Brunei Dollar"),
    ("BOB", "Bolivian Boliviano"),
    ("BRL", "Brazilian Real"),
    ("BSD", "Bahamian Dollar"),
    ("BTN", "Bhutanese Ngultrum"),
    ("BWP", "Botswanan Pula"),
    ("BYN", "Belarusian Ruble"),
    ("BZD", "Belize Dollar"),
    ("CAD", "Canadian Dollar"),
    ("CDF", "Congolese Franc"),
    ("CHF", "Swiss Franc"),
    ("CLP", "Chilean Peso"),
    ("CNY", "Chinese Yuan"),
    ("COP", "Colombian Peso"),
    ("CRC", "Costa Rican Colón"),
    ("CUP", "Cuban Peso"),
    ("CVE", "Cape Verdean Escudo"),
    ("CZK", "Czech Koruna"),
    ("DJF", "Djiboutian Franc"),
    ("DKK", "Danish Krone"),
    ("DOP", "Dominican Peso"),
    ("DZD", "Algerian Dinar"),
    ("EGP", "Egyptian Pound"),
    ("ERN", "Eritrean Nakfa"),
    ("ETB", "Ethiopian Birr"),
    ("EUR", "Euro"),
    ("FJD", "Fijian Dollar"),
    ("FKP", "Falkland Islands Pound"),
    ("GBP", "British Pound"),
    ("GEL", "Georgian Lari"),
    ("GHS", "Ghanaian Cedi"),
    ("GIP", "Gibraltar Pound"),
    ("GMD", "Gambian Dalasi"),
    ("GNF", "Guinean Franc"),
    ("GTQ", "Guatemalan Quetzal"),
    ("GYD", "Guyanaese Dollar"),
    ("HKD", "Hong Kong Dollar"),
    ("HNL", "Honduran Lempira"),
    ("HRK", "Croatian Kuna"),
    ("HTG", "Haitian Gourde"),
    ("HUF", "Hungarian Forint"),
    ("IDR", "Indonesian Rupiah"),
    ("ILS", "Israeli New Shekel"),
    ("INR", "Indian Rupee"),
    ("IQD", "Iraqi Dinar"),
    ("IRR", "Iranian Rial"),
    ("ISK", "Icelandic Króna"),
    ("JMD", "Jamaican Dollar"),
    ("JOD", "Jordanian Dinar"),
    ("JPY", "Japanese Yen"),
    ("KES", "Kenyan Shilling"),
    ("KGS", "Kyrgystani Som"),
    ("KHR", "Cambodian Riel"),
    ("KMF", "Comorian Franc"),
    ("KPW", "North Korean Won"),
    ("KRW", "South Korean Won"),
    ("KWD", "Kuwaiti Dinar"),
    ("KYD", "Cayman Islands Dollar"),
    ("KZT", "Kazakhstani Tenge"),
    ("LAK", "Laotian Kip"),
    ("LBP", "Lebanese Pound"),
    ("LKR", "Sri Lankan Rupee"),
    ("LRD", "Liberian Dollar"),
    ("LSL", "Lesotho Loti"),
    ("LYD", "Libyan Dinar"),
    ("MAD", "Moroccan Dirham"),
    ("MDL", "Moldovan Leu"),
    ("MGA", "Malagasy Ariary"),
    ("MKD", "Macedonian Denar"),
    ("MMK", "Myanmar Kyat"),
    ("MNT", "Mongolian Tugrik"),
    ("MOP", "Macanese Pataca"),
    ("MRU", "Mauritanian Ouguiya"),
    ("MUR", "Mauritian Rupee"),
    ("MVR", "Maldivian Rufiyaa"),
    ("MWK", "Malawian Kwacha"),
    ("MXN", "Mexican Peso"),
    ("MYR", "Malaysian Ringgit"),
    ("MZN", "Mozambican Metical"),
    ("NAD", "Namibian Dollar"),
    ("NGN", "Nigerian Naira"),
    ("NIO", "Nicaraguan Córdoba"),
    ("NOK", "Norwegian Krone"),
    ("NPR", "Nepalese Rupee"),
    ("NZD", "New Zealand Dollar"),
    ("OMR", "Omani Rial"),
    ("PAB", "Panamanian Balboa"),
    ("PEN", "Peruvian Sol"),
    ("PGK", "Papua New Guinean Kina"),
    ("PHP", "Philippine Peso"),
    ("PKR", "Pakistani Rupee"),
    ("PLN", "Polish Złoty"),
    ("PYG", "Paraguayan Guarani"),
    ("QAR", "Qatari Rial"),
    ("RON", "Romanian Leu"),
    ("RSD", "Serbian Dinar"),
    ("RUB", "Russian Ruble"),
    ("RWF", "Rwandan Franc"),
    ("SAR", "Saudi Riyal"),
    ("SBD", "Solomon Islands Dollar"),
    ("SCR", "Seychellois Rupee"),
    ("SDG", "Sudanese Pound"),
    ("SEK", "Swedish Krona"),
    ("SGD", "Singapore Dollar"),
    ("SHP", "Saint Helena Pound"),
    ("SLL", "Sierra Leonean Leone"),
    ("SOS", "Somali Shilling"),
    ("SRD", "Surinamese Dollar"),
    ("SSP", "South Sudanese Pound"),
    ("STN", "São Tomé and Príncipe Dobra"),
    ("SYP", "Syrian Pound"),
    ("SZL", "Swazi Lilangeni"),
    ("THB", "Thai Baht"),
    ("TJS", "Tajikistani Somoni"),
    ("TMT", "Turkmenistani Manat"),
    ("TND", "Tunisian Dinar"),
    ("TOP", "Tongan Paʻanga"),
    ("TRY", "Turkish Lira"),
    ("TTD", "Trinidad and Tobago Dollar"),
    ("TWD", "New Taiwan Dollar"),
    ("TZS", "Tanzanian Shilling"),
    ("UAH", "Ukrainian Hryvnia"),
    ("UGX", "Ugandan Shilling"),
    ("USD", "US Dollar"),
    ("UYU", "Uruguayan Peso"),
    ("UZS", "Uzbekistani Som"),
    ("VES", "Venezuelan Bolívar Soberano"),
    ("VND", "Vietnamese Đồng"),
    ("VUV", "Vanuatu Vatu"),
    ("WST", "Samoan Tala"),
    ("XAF", "Central African CFA Franc"),
    ("XCD", "East Caribbean Dollar"),
    ("XOF", "West African CFA Franc"),
    ("XPF", "CFP Franc"),
    ("YER", "Yemeni Rial"),
    ("ZAR", "South African Rand"),
    ("ZMW", "Zambian Kwacha"),
    ("ZWL", "Zimbabwean Dollar"),
]


def normalize_currency_code(code: Optional[str]) -> CurrencyCode:
    """Trim and upper-case a currency code; empty input stays empty"""
    return CurrencyCode((code or "").strip().upper())


@dataclass(frozen=True)
class ReferenceData:
    """
    Immutable lookup tables consumed by the engine.

    Built once at startup. All lookups are total: unknown countries resolve to
    None and unknown FX pairs resolve to the identity rate, so callers never
    have to guard against missing keys.
    """

    countries: Mapping[str, CountryConvertibility] = field(default_factory=lambda: dict(COUNTRY_CONVERTIBILITY))
    pooling_rules: Mapping[ConvertibilityCategory, PoolingRule] = field(default_factory=lambda: dict(POOLING_RULES))
    fx_rates: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: {k: dict(v) for k, v in FX_RATES.items()})
    suggested_currencies: Mapping[str, List[str]] = field(default_factory=lambda: dict(SUGGESTED_CURRENCIES))
    currencies: List[Tuple[str, str]] = field(default_factory=lambda: list(ISO_CURRENCIES))
    rtc_location: str = "Singapore"
    default_target_currency: str = "USD"

    def resolve_country(self, country: Optional[str]) -> Optional[CountryName]:
        """Return the canonical country name if it is in the convertibility table"""
        if country and country in self.countries:
            return CountryName(country)
        return None

    def category_for(self, country: Optional[str]) -> Optional[ConvertibilityCategory]:
        info = self.countries.get(country) if country else None
        return info.category if info else None

    def notes_for(self, country: Optional[str]) -> str:
        info = self.countries.get(country) if country else None
        return info.notes if info else ""

    def rule_for(self, category: ConvertibilityCategory) -> PoolingRule:
        return self.pooling_rules[category]

    def fx_rate(self, source: str, target: str) -> float:
        """Direct rate source → target; identity (1.0) when the pair is not listed"""
        rate = self.fx_rates.get(source, {}).get(target)
        if rate is None:
            logger.debug("No FX rate for %s→%s, using identity rate", source, target)
            return 1.0
        return rate

    def suggest_currencies(self, country: str) -> List[str]:
        return list(self.suggested_currencies.get(country, DEFAULT_SUGGESTED_CURRENCIES))

    def search_currencies(self, term: str = "") -> List[Tuple[str, str]]:
        """Case-insensitive match on currency code or name"""
        needle = (term or "").strip().lower()
        if not needle:
            return list(self.currencies)
        return [(code, name) for code, name in self.currencies if needle in code.lower() or needle in name.lower()]

    def rtc_locations(self) -> List[str]:
        """Countries that may host the RTC (freely convertible only)"""
        return [name for name, info in self.countries.items() if info.category == FREE]

    def countries_by_category(self) -> Dict[ConvertibilityCategory, List[str]]:
        grouped: Dict[ConvertibilityCategory, List[str]] = {category: [] for category in ConvertibilityCategory}
        for name, info in self.countries.items():
            grouped[info.category].append(name)
        return grouped


def build_reference_data(rtc_location: str = "Singapore", default_target_currency: str = "USD") -> ReferenceData:
    """
    Build the reference tables, falling back to the first freely convertible
    country when the configured RTC location cannot host an RTC.

    Rules that require conversion convert into default_target_currency.
    """
    target_currency = normalize_currency_code(default_target_currency) or "USD"
    pooling_rules = {
        category: replace(rule, target_currency=target_currency) if rule.requires_conversion else rule
        for category, rule in POOLING_RULES.items()
    }
    reference = ReferenceData(pooling_rules=pooling_rules, default_target_currency=target_currency)
    eligible = reference.rtc_locations()

    if rtc_location not in eligible:
        logger.warning(
            "RTC location %r is not freely convertible, using %r instead",
            rtc_location,
            eligible[0],
        )
        rtc_location = eligible[0]

    return replace(reference, rtc_location=rtc_location)
