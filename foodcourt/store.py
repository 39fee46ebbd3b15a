"""
Document Store

Collection-style access over one ``AsyncSession``. Services talk to the
database only through this class: lookups by id or by field equality,
ordered listings, single-record writes, and the grouping queries the
reports are built on.

Each write targets one record and commits immediately; nothing spans
several records in one transaction.
"""

import logging
from typing import Any, Iterable, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodcourt.database import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class DocumentStore:
    """
    Thin repository shared by every service.

    Keyword filters are equality matches on model columns; positional
    ``criteria`` are arbitrary SQLAlchemy expressions (ranges, IN, ...).
    ``options`` are loader options such as ``selectinload(Order.restaurant)``.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    @staticmethod
    def _where(model: Type[ModelType], criteria: Iterable[Any], filters: dict[str, Any]) -> list:
        clauses = list(criteria)
        for key, value in filters.items():
            clauses.append(getattr(model, key) == value)
        return clauses

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    async def find_by_id(
        self,
        model: Type[ModelType],
        id: Optional[str],
        options: Sequence[Any] = (),
    ) -> Optional[ModelType]:
        if not id:
            return None
        return await self.find_one(model, options=options, id=id)

    async def find_one(
        self,
        model: Type[ModelType],
        *criteria: Any,
        options: Sequence[Any] = (),
        **filters: Any,
    ) -> Optional[ModelType]:
        query = select(model).where(*self._where(model, criteria, filters)).options(*options)
        result = await self.session.execute(query.limit(1))
        return result.scalars().first()

    async def find(
        self,
        model: Type[ModelType],
        *criteria: Any,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
        options: Sequence[Any] = (),
        **filters: Any,
    ) -> list[ModelType]:
        query = (
            select(model)
            .where(*self._where(model, criteria, filters))
            .order_by(*order_by)
            .options(*options)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_ids(self, model: Type[ModelType], ids: Iterable[str]) -> dict[str, ModelType]:
        """Join-like lookup: fetch the referenced records for a set of ids."""
        ids = [i for i in set(ids) if i]
        if not ids:
            return {}
        rows = await self.find(model, model.id.in_(ids))
        return {row.id: row for row in rows}

    async def count(self, model: Type[ModelType], *criteria: Any, **filters: Any) -> int:
        query = select(func.count()).select_from(model).where(*self._where(model, criteria, filters))
        result = await self.session.execute(query)
        return result.scalar() or 0

    # -------------------------------------------------------------------------
    # AGGREGATES
    # -------------------------------------------------------------------------

    async def sum(self, model: Type[ModelType], column: Any, *criteria: Any, **filters: Any) -> float:
        query = select(func.sum(column)).where(*self._where(model, criteria, filters))
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def group_count(self, model: Type[ModelType], key: Any, *criteria: Any, **filters: Any) -> dict[Any, int]:
        """``{key_value: row_count}`` for the matching rows."""
        query = (
            select(key, func.count())
            .where(*self._where(model, criteria, filters))
            .group_by(key)
        )
        result = await self.session.execute(query)
        return {row[0]: row[1] for row in result.all()}

    async def group_totals(
        self,
        model: Type[ModelType],
        key: Any,
        amount: Any,
        *criteria: Any,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> list[tuple[Any, int, float]]:
        """
        Group matching rows by ``key`` with a count and a sum of ``amount``.

        Groups come back largest count first; equal counts are ordered by the
        key ascending so the ranking is stable.
        """
        order_count = func.count().label("order_count")
        total = func.coalesce(func.sum(amount), 0).label("total")
        query = (
            select(key, order_count, total)
            .where(*self._where(model, criteria, filters))
            .group_by(key)
            .order_by(order_count.desc(), key.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return [(row[0], row[1], float(row[2])) for row in result.all()]

    async def rows(
        self,
        model: Type[ModelType],
        *columns: Any,
        criteria: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
        offset: int = 0,
        **filters: Any,
    ) -> list[tuple]:
        """Project selected columns for the matching rows."""
        query = select(*columns).where(*self._where(model, criteria, filters)).order_by(*order_by)
        if limit is not None:
            query = query.limit(limit).offset(offset)
        result = await self.session.execute(query)
        return [tuple(row) for row in result.all()]

    # -------------------------------------------------------------------------
    # WRITES
    # -------------------------------------------------------------------------

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    async def create(self, model: Type[ModelType], **fields: Any) -> ModelType:
        obj = model(**fields)
        self.session.add(obj)
        await self._commit()
        await self.session.refresh(obj)
        logger.debug(f"Created {model.__name__} {obj.id}")
        return obj

    async def save(self, obj: ModelType) -> ModelType:
        self.session.add(obj)
        await self._commit()
        await self.session.refresh(obj)
        return obj

    async def find_one_and_delete(self, model: Type[ModelType], *criteria: Any, **filters: Any) -> Optional[ModelType]:
        obj = await self.find_one(model, *criteria, **filters)
        if obj is None:
            return None
        await self.session.delete(obj)
        await self._commit()
        logger.debug(f"Deleted {model.__name__} {obj.id}")
        return obj
