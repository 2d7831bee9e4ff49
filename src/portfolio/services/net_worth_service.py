"""Net worth trend from yearly snapshots."""

from collections.abc import Iterable
from dataclasses import dataclass

from portfolio.models.yearly_data import YearlyData


@dataclass(frozen=True)
class NetWorthPoint:
    year: int
    net_worth: float
    savings: float
    market_gains: float | None
    return_percent: float | None
    savings_rate: float | None


def build_trend(entries: Iterable[YearlyData]) -> list[NetWorthPoint]:
    """
    Yearly net worth points, oldest first.

    Stored market gains and return are used as entered. When missing they are
    derived from the previous year: gains are the change in net worth not
    explained by savings, and return is gains over the previous net worth.
    The first year has nothing to derive from and stays None.
    """
    points: list[NetWorthPoint] = []
    previous: YearlyData | None = None

    for entry in sorted(entries, key=lambda e: e.year):
        net_worth = float(entry.net_worth)
        savings = float(entry.savings)

        gains = float(entry.market_gains) if entry.market_gains is not None else None
        if gains is None and previous is not None:
            gains = net_worth - float(previous.net_worth) - savings

        return_percent = float(entry.return_percent) if entry.return_percent is not None else None
        if return_percent is None and gains is not None and previous is not None:
            base = float(previous.net_worth)
            return_percent = gains / base * 100 if base > 0 else None

        income = float(entry.income)
        points.append(
            NetWorthPoint(
                year=entry.year,
                net_worth=net_worth,
                savings=savings,
                market_gains=gains,
                return_percent=return_percent,
                savings_rate=savings / income * 100 if income > 0 else None,
            )
        )
        previous = entry
    return points
