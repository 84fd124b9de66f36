"""
Currency resolution and conversion.

Resolution priority (highest wins):
    1. Company code        -> the company's default currency
    2. Material currency   -> if it is a supported currency
    3. User preference     -> if it is a supported currency
    4. Base currency

A company code always wins, even when the line item declares another
currency; the amount is then converted into the company currency.

Conversion goes through the base currency:
    base_amount = amount / rate(from)
    converted   = base_amount * rate(to)
rounded half-up to 2 decimals. Unknown currencies count as rate 1.0.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional

from app.config import settings


TWO_PLACES = Decimal("0.01")
ONE = Decimal("1")


class CompanyCurrencyMap:
    """
    Lookup company code -> default currency.

    Unknown company codes resolve to the base currency.
    """

    def __init__(self, mapping: Mapping[str, str], base_currency: str = "EUR"):
        self._mapping = {str(code): currency.upper() for code, currency in mapping.items()}
        self.base_currency = base_currency.upper()

    def __call__(self, company_code: str) -> str:
        return self._mapping.get(str(company_code).strip(), self.base_currency)

    def __contains__(self, company_code: str) -> bool:
        return str(company_code) in self._mapping


class CurrencyResolver:
    """Pick the output currency for a document and convert amounts into it."""

    def __init__(
        self,
        company_currencies: CompanyCurrencyMap,
        supported_currencies: Iterable[str] = ("EUR", "GBP", "CHF", "USD"),
    ):
        self.company_currencies = company_currencies
        self.base_currency = company_currencies.base_currency
        self.supported_currencies = {c.upper() for c in supported_currencies}

    def resolve_currency(
        self,
        company_code: Optional[str] = None,
        material_currency: Optional[str] = None,
        user_preference: Optional[str] = None,
    ) -> str:
        if company_code:
            return self.company_currencies(company_code)

        if material_currency and material_currency.upper() in self.supported_currencies:
            return material_currency.upper()

        if user_preference and user_preference.upper() in self.supported_currencies:
            return user_preference.upper()

        return self.base_currency

    def is_supported(self, currency: str) -> bool:
        return bool(currency) and currency.upper() in self.supported_currencies


def _rate(rates: Mapping[str, Decimal], currency: str) -> Decimal:
    rate = rates.get(currency)
    if not rate:
        # Unknown (or zero) rates are treated as base-equivalent
        return ONE
    return Decimal(str(rate))


def quantize_amount(amount) -> Decimal:
    """Round a monetary amount half-up to 2 decimals."""
    return Decimal(str(amount)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def convert(
    amount: Decimal,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, Decimal],
) -> Decimal:
    """
    Convert an amount between currencies via the base currency.

    Same-currency conversion returns the amount untouched; callers storing
    it round with quantize_amount.
    """
    if from_currency == to_currency:
        return amount

    amount = Decimal(str(amount))
    base_amount = amount / _rate(rates, from_currency)
    return quantize_amount(base_amount * _rate(rates, to_currency))


def get_currency_resolver() -> CurrencyResolver:
    """Resolver configured from application settings."""
    return CurrencyResolver(
        CompanyCurrencyMap(settings.COMPANY_CURRENCIES, settings.BASE_CURRENCY),
        settings.SUPPORTED_CURRENCIES,
    )
