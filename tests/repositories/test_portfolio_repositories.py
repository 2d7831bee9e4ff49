"""Tests for the repository layer."""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.allocation_target import AllocationTarget
from portfolio.models.category import Category
from portfolio.models.fi_milestone import FIMilestone
from portfolio.models.holding import Holding
from portfolio.models.user import User
from portfolio.models.yearly_data import YearlyData
from portfolio.repositories import (
    AllocationTargetRepository,
    CategoryRepository,
    FIMilestoneRepository,
    HoldingRepository,
    UserRepository,
    YearlyDataRepository,
)

pytestmark = pytest.mark.integration

TARGETS = {
    "core_target": Decimal("25"),
    "growth_target": Decimal("55"),
    "hedge_target": Decimal("10"),
    "liquidity_target": Decimal("10"),
}


class TestUserRepository:
    async def test_get_or_create_provisions_once(self, test_db: AsyncSession):
        repo = UserRepository(User, test_db)

        created = await repo.get_or_create("new@example.com")
        again = await repo.get_or_create("new@example.com")

        assert created.id == again.id
        assert created.employment_status == "EmploymentPass"
        assert created.is_active is True

    async def test_get_by_email_unknown(self, test_db: AsyncSession):
        assert await UserRepository(User, test_db).get_by_email("nobody@example.com") is None


class TestHoldingRepository:
    async def test_filters_and_orders(
        self, test_db: AsyncSession, test_user: User, test_holdings: list[Holding]
    ):
        repo = HoldingRepository(Holding, test_db)

        holdings = await repo.get_by_user_id(test_user.id)
        assert [h.category for h in holdings] == ["Core", "Growth", "Hedge", "Liquidity"]

        growth = await repo.get_by_user_id(test_user.id, category="Growth")
        assert [h.symbol for h in growth] == ["CSPX"]

        page = await repo.get_by_user_id(test_user.id, skip=1, limit=2)
        assert [h.symbol for h in page] == ["CSPX", "GLD"]

    async def test_symbol_lookups(
        self, test_db: AsyncSession, test_user: User, holding_factory
    ):
        test_db.add_all(
            [
                holding_factory(test_user, location="IBKR"),
                holding_factory(test_user, location="Endowus"),
                holding_factory(test_user, symbol="ES3"),
            ]
        )
        await test_db.commit()
        repo = HoldingRepository(Holding, test_db)

        assert len(await repo.get_by_symbol(test_user.id, "vwra")) == 2
        assert await repo.get_distinct_symbols(test_user.id) == ["ES3", "VWRA"]

    async def test_get_for_user_checks_owner(
        self,
        test_db: AsyncSession,
        other_user: User,
        test_holdings: list[Holding],
    ):
        repo = HoldingRepository(Holding, test_db)
        holding = test_holdings[0]

        assert await repo.get_for_user(holding.id, holding.user_id) is not None
        assert await repo.get_for_user(holding.id, other_user.id) is None
        assert await repo.get_for_user(uuid4(), holding.user_id) is None


class TestAllocationTargetRepository:
    async def test_activate_keeps_history(self, test_db: AsyncSession, test_user: User):
        repo = AllocationTargetRepository(AllocationTarget, test_db)

        first = await repo.activate(test_user.id, {**TARGETS, "name": "Balanced"})
        second = await repo.activate(
            test_user.id, {**TARGETS, "core_target": Decimal("35"), "growth_target": Decimal("45")}
        )

        active = await repo.get_active(test_user.id)
        assert active.id == second.id
        assert active.as_targets()["Core"] == 35.0

        history = await repo.get_history(test_user.id)
        assert {target.id for target in history} == {first.id, second.id}
        await test_db.refresh(first)
        assert first.is_active is False

    async def test_no_active_target(self, test_db: AsyncSession, test_user: User):
        assert await AllocationTargetRepository(AllocationTarget, test_db).get_active(
            test_user.id
        ) is None


class TestCategoryRepository:
    async def test_effective_target(self, test_db: AsyncSession, test_user: User):
        repo = CategoryRepository(Category, test_db)
        await repo.create(
            obj_in={
                "user_id": test_user.id,
                "name": "Growth",
                "target_percentage": Decimal("55"),
                "user_target_percentage": Decimal("50"),
            }
        )

        category = await repo.get_by_name(test_user.id, "Growth")
        assert category.effective_target == Decimal("50")
        assert category.rebalance_threshold == Decimal("5")
        assert await repo.get_by_name(test_user.id, "Hedge") is None


class TestYearlyDataRepository:
    async def test_years_in_order(self, test_db: AsyncSession, test_user: User):
        repo = YearlyDataRepository(YearlyData, test_db)
        for year in (2025, 2023, 2024):
            await repo.create(obj_in={"user_id": test_user.id, "year": year})

        assert [entry.year for entry in await repo.get_by_user_id(test_user.id)] == [
            2023,
            2024,
            2025,
        ]
        assert (await repo.get_by_year(test_user.id, 2024)).year == 2024
        assert await repo.get_by_year(test_user.id, 2030) is None


class TestFIMilestoneRepository:
    async def test_active_in_order(self, test_db: AsyncSession, test_user: User):
        repo = FIMilestoneRepository(FIMilestone, test_db)
        assert await repo.next_sort_order(test_user.id) == 1

        for name, order, active in [("Lean", 2, True), ("Coast", 1, True), ("Old", 3, False)]:
            await repo.create(
                obj_in={
                    "user_id": test_user.id,
                    "name": name,
                    "amount": Decimal("100000") * order,
                    "sort_order": order,
                    "is_active": active,
                }
            )

        assert [m.name for m in await repo.get_active(test_user.id)] == ["Coast", "Lean"]
        assert len(await repo.get_by_user_id(test_user.id)) == 3
        assert await repo.next_sort_order(test_user.id) == 3
