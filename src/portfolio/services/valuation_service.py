"""Holding valuation and portfolio aggregation.

``value_of`` prefers live quantity x price over the stored snapshot values;
``aggregate`` sums it over a holding set. Neither touches the database or
mutates a holding.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID

from portfolio.core.constants import ValuationConstants
from portfolio.core.exceptions import CurrencyConversionError
from portfolio.models.category import CATEGORY_NAMES
from portfolio.models.exchange_rate import SupportedCurrency
from portfolio.services.currency_service import (
    RateTable,
    convert,
    convert_to_all_currencies,
    parse_currency,
)

logger = logging.getLogger(__name__)


class ValuedHolding(Protocol):
    """Attributes the valuator reads from a holding."""

    id: Any
    symbol: str
    category: str
    entry_currency: str
    quantity: Decimal | float | None
    current_unit_price: Decimal | float | None
    value_sgd: Decimal | float | None
    value_usd: Decimal | float | None
    value_inr: Decimal | float | None


@dataclass(frozen=True)
class PortfolioValuation:
    """Result of ``aggregate``: every figure is in ``display_currency``."""

    display_currency: SupportedCurrency
    total: float
    per_holding: dict[UUID, float] = field(default_factory=dict)
    per_category: dict[str, float] = field(default_factory=dict)


def snapshot_field(currency: SupportedCurrency) -> str:
    """Name of the holding attribute caching its value in ``currency``."""
    return f"value_{currency.value.lower()}"


def stored_value(holding: ValuedHolding, display_currency: SupportedCurrency) -> float:
    """Snapshot value for ``display_currency``; 0 when it was never written."""
    value = getattr(holding, snapshot_field(display_currency), None)
    return float(value) if value is not None else 0.0


def live_value(
    holding: ValuedHolding,
    display_currency: SupportedCurrency,
    rates: RateTable | None,
) -> float | None:
    """
    Quantity x current price in ``display_currency``, or None if not computable.

    Not computable means: quantity or price missing, an unknown entry
    currency, or a cross-currency holding with no usable direct rate.
    """
    if not holding.quantity or not holding.current_unit_price:
        return None

    raw_value = float(holding.quantity) * float(holding.current_unit_price)

    try:
        entry_currency = parse_currency(holding.entry_currency)
    except CurrencyConversionError:
        logger.warning(
            f"Holding {holding.symbol} has unsupported entry currency "
            f"{holding.entry_currency!r}; using stored value"
        )
        return None

    if entry_currency == display_currency:
        return raw_value
    if rates is None:
        return None

    try:
        return convert(raw_value, entry_currency, display_currency, rates)
    except CurrencyConversionError as e:
        logger.debug(f"Falling back to stored value for {holding.symbol}: {e.detail}")
        return None


def value_of(
    holding: ValuedHolding,
    display_currency: "SupportedCurrency | str",
    rates: RateTable | None = None,
) -> float:
    """
    Value of one holding in ``display_currency``.

    Priority:
        1. quantity x current price, unconverted when the entry currency is
           the display currency (no rate table needed)
        2. the same, converted with the direct rate from ``rates``
        3. the stored snapshot for ``display_currency``

    A warning is logged when the live value and the snapshot disagree by more
    than ``ValuationConstants.DRIFT_TOLERANCE``; the snapshot is not corrected
    here.
    """
    currency = parse_currency(display_currency)
    stored = stored_value(holding, currency)
    live = live_value(holding, currency, rates)
    if live is None:
        return stored

    if abs(live - stored) > ValuationConstants.DRIFT_TOLERANCE:
        logger.warning(
            f"Value drift for {holding.symbol} in {currency.value}: "
            f"live={live:.2f} stored={stored:.2f}"
        )
    return live


def category_of(holding: ValuedHolding) -> str:
    """Category name of a holding, or the "Other" bucket when unrecognised."""
    category = getattr(holding.category, "value", holding.category)
    if category in CATEGORY_NAMES:
        return category

    logger.warning(
        f"Holding {holding.symbol} has unrecognised category {category!r}; "
        f"counting it under {ValuationConstants.OTHER_CATEGORY}"
    )
    return ValuationConstants.OTHER_CATEGORY


def aggregate(
    holdings: Iterable[ValuedHolding],
    display_currency: "SupportedCurrency | str",
    rates: RateTable | None = None,
) -> PortfolioValuation:
    """
    Total, per-holding and per-category value of ``holdings``.

    The four fixed categories are always present (0 when empty). Holdings with
    an unrecognised category land in "Other", so the category values always
    sum to the total.
    """
    currency = parse_currency(display_currency)
    per_holding: dict[UUID, float] = {}
    per_category: dict[str, float] = dict.fromkeys(CATEGORY_NAMES, 0.0)
    total = 0.0

    for holding in holdings:
        value = value_of(holding, currency, rates)
        per_holding[holding.id] = value
        category = category_of(holding)
        per_category[category] = per_category.get(category, 0.0) + value
        total += value

    return PortfolioValuation(
        display_currency=currency,
        total=total,
        per_holding=per_holding,
        per_category=per_category,
    )


def snapshot_values(
    amount: float,
    entry_currency: "SupportedCurrency | str",
    rates: RateTable,
) -> dict[str, Decimal]:
    """
    Snapshot columns for a holding worth ``amount`` in its entry currency.

    Returns e.g. {"value_sgd": Decimal("135.00"), "value_usd": ..., ...},
    ready to be set on a holding.

    Raises:
        CurrencyConversionError: If a direct rate from the entry currency is missing
    """
    converted = convert_to_all_currencies(amount, entry_currency, rates)
    return {
        snapshot_field(currency): Decimal(str(round(value, 2)))
        for currency, value in converted.items()
    }
