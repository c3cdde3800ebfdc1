"""
Storage interface used by the social graph services.

A `Store` wraps a single AsyncSession. Services receive it through their
constructor and group every write of one operation inside `transaction()`,
which commits once at the end or rolls everything back.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Iterable, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import Table, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.errors import StoreConflict, StoreError

log = logging.getLogger(__name__)

T = TypeVar("T")


def _translate(exc: SQLAlchemyError, action: str) -> StoreError:
    if isinstance(exc, IntegrityError):
        log.warning("Integrity violation during %s: %s", action, exc.orig)
        return StoreConflict(action=action)
    log.error("Store failure during %s", action, exc_info=exc)
    return StoreError(action=action)


class Store:

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self):
        try:
            yield self
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise _translate(exc, "commit") from exc
        except Exception:
            await self.session.rollback()
            raise

    async def get(self, model: Type[T], ident: Any) -> Optional[T]:
        try:
            return await self.session.get(model, ident)
        except SQLAlchemyError as exc:
            raise _translate(exc, f"get {model.__name__}") from exc

    async def find(
        self,
        model: Type[T],
        *where,
        for_update: bool = False,
        options: Iterable = (),
        **criteria: Any,
    ) -> Optional[T]:
        stmt = (
            select(model)
            .where(*where)
            .filter_by(**criteria)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise _translate(exc, f"find {model.__name__}") from exc
        return result.scalars().first()

    async def find_many(
        self,
        model: Type[T],
        *where,
        options: Iterable = (),
        order_by: Sequence = (),
        limit: int | None = None,
        **criteria: Any,
    ) -> list[T]:
        stmt = (
            select(model)
            .where(*where)
            .filter_by(**criteria)
            .options(*options)
            .order_by(*order_by)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise _translate(exc, f"find_many {model.__name__}") from exc
        return list(result.scalars().all())

    async def create(self, model: Type[T], **fields: Any) -> T:
        entity = model(**fields)
        self.session.add(entity)
        try:
            await self.session.flush()
            await self.session.refresh(entity)
        except SQLAlchemyError as exc:
            raise _translate(exc, f"create {model.__name__}") from exc
        return entity

    async def update(self, entity: T, **fields: Any) -> T:
        for name, value in fields.items():
            setattr(entity, name, value)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise _translate(exc, f"update {type(entity).__name__}") from exc
        return entity

    async def upsert(
        self,
        model: Type[T],
        key: Mapping[str, Any],
        create: Mapping[str, Any],
        update: Mapping[str, Any],
    ) -> T:
        """Create-or-update keyed by the columns of a uniqueness constraint."""
        existing = await self.find(model, for_update=True, **key)
        if existing is not None:
            return await self.update(existing, **update)
        return await self.create(model, **key, **create)

    async def delete(self, entity: Any) -> None:
        try:
            await self.session.delete(entity)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise _translate(exc, f"delete {type(entity).__name__}") from exc

    async def link(self, table: Table, **values: Any) -> bool:
        """Insert an association row unless it already exists."""
        conditions = [table.c[name] == value for name, value in values.items()]
        try:
            existing = await self.session.execute(select(table).where(*conditions))
            if existing.first() is not None:
                return False
            await self.session.execute(insert(table).values(**values))
        except SQLAlchemyError as exc:
            raise _translate(exc, f"link {table.name}") from exc
        return True
