"""Generic async repository.

Repositories never commit: the request-scoped session from ``get_db`` or a
service's ``transactional`` block owns the transaction.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """CRUD operations shared by every model repository.

    The ``*_for_user`` variants scope lookups to rows owned by one user and
    are what routes should use for user-owned models.

    Example:
        >>> repo = HoldingRepository(Holding, db)
        >>> holding = await repo.get_for_user(holding_id, user.id)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: Any) -> ModelType | None:
        """Get a single record by primary key."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    async def get_for_user(self, id: Any, user_id: UUID) -> ModelType | None:
        """Get a record by primary key if it belongs to ``user_id``."""
        result = await self.db.execute(
            select(self.model).where(
                self.model.id == id,  # type: ignore[attr-defined]
                self.model.user_id == user_id,  # type: ignore[attr-defined]
            )
        )
        return result.scalar_one_or_none()

    async def get_multi(self, *, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Get records with offset pagination."""
        result = await self.db.execute(select(self.model).offset(skip).limit(limit))
        return list(result.scalars().all())

    async def create(self, *, obj_in: BaseModel | dict[str, Any]) -> ModelType:
        """Add a record built from a schema or a dict and flush it.

        Returns:
            The new instance (not yet committed)
        """
        if isinstance(obj_in, BaseModel):
            create_data = obj_in.model_dump(exclude_unset=True)
        else:
            create_data = obj_in

        db_obj = self.model(**create_data)
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        *,
        db_obj: ModelType,
        obj_in: BaseModel | dict[str, Any],
    ) -> ModelType:
        """Apply a partial update from a schema (unset fields ignored) or a dict."""
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = obj_in

        for field, value in update_data.items():
            setattr(db_obj, field, value)

        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def remove(self, db_obj: ModelType) -> None:
        """Delete an already loaded record."""
        await self.db.delete(db_obj)
        await self.db.flush()

    async def delete(self, *, id: Any) -> ModelType:
        """Delete a record by primary key.

        Raises:
            ValueError: If the record does not exist
        """
        db_obj = await self.get(id)
        if not db_obj:
            raise ValueError(f"{self.model.__name__} with id {id} not found")

        await self.remove(db_obj)
        return db_obj
