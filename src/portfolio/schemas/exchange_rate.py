"""Exchange rate schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from portfolio.models.exchange_rate import SupportedCurrency


class ExchangeRateResponse(BaseModel):
    """A stored rate row."""

    id: UUID
    from_currency: str
    to_currency: str
    rate: Decimal
    source: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RateTableResponse(BaseModel):
    """The rate table in use, keyed "FROM_TO_TO"."""

    rates: dict[str, float]
    complete: bool


class ManualRatesRequest(BaseModel):
    """User-entered rates keyed "FROM_TO_TO", e.g. {"USD_TO_SGD": 1.35}."""

    rates: dict[str, float] = Field(..., min_length=1)

    @field_validator("rates")
    @classmethod
    def validate_keys(cls, v: dict[str, float]) -> dict[str, float]:
        for key in v:
            parts = key.upper().split("_TO_")
            if len(parts) != 2 or not all(parts):
                raise ValueError(f"Invalid rate key {key!r}, expected e.g. USD_TO_SGD")
        return {key.upper(): rate for key, rate in v.items()}

    def as_pairs(self) -> dict[tuple[str, str], float]:
        pairs: dict[tuple[str, str], float] = {}
        for key, rate in self.rates.items():
            from_code, to_code = key.split("_TO_")
            pairs[(from_code, to_code)] = rate
        return pairs


class ConversionResponse(BaseModel):
    amount: float
    from_currency: SupportedCurrency
    to_currency: SupportedCurrency
    converted: float
