"""Currency conversion over an immutable table of direct rates.

Pure functions only: the rate table is loaded by ``exchange_rate_service``
and passed in, so one calculation always sees a single consistent snapshot.
"""

import itertools
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from portfolio.core.constants import ExchangeRateConstants
from portfolio.core.exceptions import CurrencyConversionError
from portfolio.models.exchange_rate import SupportedCurrency

logger = logging.getLogger(__name__)

CurrencyPair = tuple[SupportedCurrency, SupportedCurrency]


def parse_currency(value: "SupportedCurrency | str") -> SupportedCurrency:
    """Coerce a currency code to ``SupportedCurrency``.

    Raises:
        CurrencyConversionError: If the code is not supported
    """
    if isinstance(value, SupportedCurrency):
        return value
    try:
        return SupportedCurrency(str(value).upper())
    except ValueError as e:
        raise CurrencyConversionError(f"Unsupported currency: {value}") from e


def supported_pairs() -> list[CurrencyPair]:
    """Every directed pair of distinct supported currencies."""
    return list(itertools.permutations(SupportedCurrency, 2))


@dataclass(frozen=True)
class RateTable:
    """Read-only snapshot of direct exchange rates keyed by (from, to)."""

    rates: Mapping[CurrencyPair, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    @classmethod
    def from_pairs(cls, pairs: Mapping[tuple[str, str], float]) -> "RateTable":
        """Build a table from string-keyed pairs, e.g. {("USD", "SGD"): 1.35}."""
        return cls(
            {
                (parse_currency(from_code), parse_currency(to_code)): float(rate)
                for (from_code, to_code), rate in pairs.items()
            }
        )

    @classmethod
    def from_records(cls, records: Iterable[object]) -> "RateTable":
        """Build a table from rows exposing from_currency, to_currency and rate.

        Rows with an unsupported currency are skipped. When a pair appears
        more than once the last row wins.
        """
        rates: dict[CurrencyPair, float] = {}
        for record in records:
            try:
                pair = (
                    parse_currency(record.from_currency),
                    parse_currency(record.to_currency),
                )
            except CurrencyConversionError:
                logger.warning(
                    f"Ignoring rate {record.from_currency}->{record.to_currency}: unsupported"
                )
                continue
            rates[pair] = float(record.rate)
        return cls(rates)

    @classmethod
    def fallback(cls) -> "RateTable":
        """Hardcoded rates used when nothing better is available."""
        return cls.from_pairs(ExchangeRateConstants.FALLBACK_RATES)

    def get(
        self, from_currency: SupportedCurrency, to_currency: SupportedCurrency
    ) -> float | None:
        return self.rates.get((from_currency, to_currency))

    def is_complete(self) -> bool:
        """True when every directed pair has a rate."""
        return all(pair in self.rates for pair in supported_pairs())

    def as_dict(self) -> dict[str, float]:
        """Rates keyed as "SGD_TO_USD" for API responses."""
        return {f"{src.value}_TO_{dst.value}": rate for (src, dst), rate in self.rates.items()}


def convert(
    amount: float,
    from_currency: "SupportedCurrency | str",
    to_currency: "SupportedCurrency | str",
    rates: RateTable,
) -> float:
    """
    Convert ``amount`` using the direct rate between two currencies.

    Same-currency conversion returns ``amount`` unchanged. Otherwise the
    result is rounded to cents. Missing pairs are never triangulated.

    Raises:
        CurrencyConversionError: If a currency is unsupported or the direct
            rate is missing from ``rates`` or zero
    """
    source = parse_currency(from_currency)
    target = parse_currency(to_currency)
    if source == target:
        return amount

    rate = rates.get(source, target)
    # A zero rate is as unusable as a missing one
    if not rate:
        raise CurrencyConversionError(
            f"Exchange rate not found for {source.value} to {target.value}"
        )
    return round(amount * rate, 2)


def convert_to_all_currencies(
    amount: float,
    from_currency: "SupportedCurrency | str",
    rates: RateTable,
) -> dict[SupportedCurrency, float]:
    """Value of ``amount`` in every supported currency.

    Raises:
        CurrencyConversionError: If any direct rate from ``from_currency`` is missing
    """
    return {
        currency: convert(amount, from_currency, currency, rates) for currency in SupportedCurrency
    }
