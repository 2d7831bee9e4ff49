"""Holding lifecycle: create, edit, buy/sell adjustments.

Every write recomputes the SGD/USD/INR snapshot columns from the holding's
own value in its entry currency, using the rate table passed in.
"""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.holding import Holding
from portfolio.repositories.holding import HoldingRepository
from portfolio.schemas.holding import HoldingAdjust, HoldingCreate, HoldingUpdate
from portfolio.services.currency_service import RateTable
from portfolio.services.valuation_service import snapshot_values

logger = logging.getLogger(__name__)

UNIT_COST_PRECISION = Decimal("0.000001")


def entry_value(holding: Holding, fallback: Decimal | None = None) -> float:
    """Holding value in its entry currency.

    Quantity x current price when both are set, else ``fallback`` (a cash
    value given by the user), else the current snapshot in that currency.
    """
    if holding.quantity is not None and holding.current_unit_price is not None:
        return float(holding.quantity) * float(holding.current_unit_price)
    if fallback is not None:
        return float(fallback)
    return float(getattr(holding, f"value_{holding.entry_currency.lower()}") or 0)


def apply_snapshots(
    holding: Holding, rates: RateTable, cash_value: Decimal | None = None
) -> None:
    """Rewrite the snapshot columns of ``holding`` in place.

    Raises:
        CurrencyConversionError: If a direct rate from the entry currency is missing
    """
    for field, value in snapshot_values(
        entry_value(holding, cash_value), holding.entry_currency, rates
    ).items():
        setattr(holding, field, value)


async def create_holding(
    db: AsyncSession,
    user_id: UUID,
    data: HoldingCreate,
    rates: RateTable,
) -> Holding:
    """Create a holding with snapshot values filled in."""
    fields = data.model_dump(exclude={"value"})
    fields["category"] = data.category.value
    fields["entry_currency"] = data.entry_currency.value
    if data.unit_cost is None and data.current_unit_price is not None:
        fields["unit_cost"] = data.current_unit_price

    holding = Holding(user_id=user_id, **fields)
    apply_snapshots(holding, rates, data.value)

    db.add(holding)
    await db.flush()
    await db.refresh(holding)
    logger.info(f"Created holding {holding.symbol} ({holding.category}) for user {user_id}")
    return holding


async def update_holding(
    db: AsyncSession,
    holding: Holding,
    data: HoldingUpdate,
    rates: RateTable,
) -> Holding:
    """Apply a partial edit and recompute the snapshots."""
    update_data = data.model_dump(exclude_unset=True, exclude={"value"})
    for enum_field in ("category", "entry_currency"):
        if update_data.get(enum_field) is not None:
            update_data[enum_field] = update_data[enum_field].value

    repo = HoldingRepository(Holding, db)
    holding = await repo.update(db_obj=holding, obj_in=update_data)
    apply_snapshots(holding, rates, data.value)
    await db.flush()
    await db.refresh(holding)
    return holding


async def adjust_holding(
    db: AsyncSession,
    holding: Holding,
    adjustment: HoldingAdjust,
    rates: RateTable,
) -> Holding | None:
    """
    Buy or sell part of a position.

    Buys move ``unit_cost`` to the weighted average of the old cost and
    ``unit_price``. A sell that brings the quantity to zero or below deletes
    the holding.

    Returns:
        The updated holding, or None when it was deleted
    """
    repo = HoldingRepository(Holding, db)
    current_quantity = holding.quantity or Decimal("0")
    new_quantity = current_quantity + adjustment.quantity_delta

    if new_quantity <= 0:
        await repo.remove(holding)
        logger.info(f"Closed holding {holding.symbol} ({holding.id})")
        return None

    if adjustment.quantity_delta > 0 and adjustment.unit_price is not None:
        previous_cost = holding.unit_cost
        if previous_cost is None:
            previous_cost = adjustment.unit_price
        weighted_cost = (
            current_quantity * previous_cost + adjustment.quantity_delta * adjustment.unit_price
        ) / new_quantity
        holding.unit_cost = weighted_cost.quantize(UNIT_COST_PRECISION)

    holding.quantity = new_quantity
    if holding.current_unit_price is None and adjustment.unit_price is not None:
        holding.current_unit_price = adjustment.unit_price

    apply_snapshots(holding, rates)
    await db.flush()
    await db.refresh(holding)
    return holding
