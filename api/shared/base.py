"""Generic async repository shared by the chat and message repositories.

Repositories only flush; committing belongs to whoever owns the session.
"""
from abc import ABC
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase

T = TypeVar("T", bound=DeclarativeBase)


class BaseRepository(ABC, Generic[T]):
    """Base repository with common CRUD operations."""

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entity: T) -> T:
        """Create new entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str) -> Optional[T]:
        """Get entity by ID."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: T) -> T:
        """Flush pending changes on an attached entity."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: str) -> bool:
        """Delete entity by ID."""
        stmt = delete(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_field(self, field_name: str, value: Any) -> int:
        """Delete entities by field value."""
        field = getattr(self.model, field_name)
        stmt = delete(self.model).where(field == value)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def exists(self, entity_id: str) -> bool:
        """Check if entity exists."""
        stmt = select(self.model.id).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self, **filters: Any) -> int:
        """Count entities with filters."""
        stmt = select(func.count(self.model.id))  # type: ignore[attr-defined]

        for field_name, value in filters.items():
            if hasattr(self.model, field_name) and value is not None:
                field = getattr(self.model, field_name)
                stmt = stmt.where(field == value)

        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)
