from __future__ import annotations
from typing import Any
from sqlalchemy import select, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from store_ratings.models.store import Store
from store_ratings.models.review import Review

_STORE_FIELDS = ("name", "description", "address", "category", "image_url")

average_rating = func.round(func.avg(Review.rating), 1).label("average_rating")
review_count = func.count(Review.id).label("review_count")


def _rated(store: Store, avg: Any, count: int) -> dict[str, Any]:
    row = {c.key: getattr(store, c.key) for c in Store.__table__.columns}
    row["average_rating"] = float(avg) if avg is not None else None
    row["review_count"] = int(count or 0)
    return row


class StoreRepo:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _rated_select(self):
        # LEFT JOIN keeps stores without reviews: avg NULL, count 0
        return (
            select(Store, average_rating, review_count)
            .outerjoin(Review, Review.store_id == Store.id)
            .group_by(Store.id)
        )

    async def _rated_rows(self, stmt) -> list[dict[str, Any]]:
        res = await self.session.execute(stmt)
        return [_rated(store, avg, count) for store, avg, count in res.all()]

    async def get(self, store_id: int) -> Store | None:
        res = await self.session.execute(select(Store).where(Store.id == store_id))
        return res.scalars().first()

    async def exists(self, store_id: int) -> bool:
        res = await self.session.execute(select(Store.id).where(Store.id == store_id))
        return res.scalar_one_or_none() is not None

    async def get_with_rating(self, store_id: int) -> dict[str, Any] | None:
        rows = await self._rated_rows(self._rated_select().where(Store.id == store_id))
        return rows[0] if rows else None

    async def list_with_ratings(self) -> list[dict[str, Any]]:
        stmt = self._rated_select().order_by(Store.created_at.desc(), Store.id.desc())
        return await self._rated_rows(stmt)

    async def search(self, query: str) -> list[dict[str, Any]]:
        pattern = f"%{query}%"
        stmt = (
            self._rated_select()
            .where(or_(
                Store.name.ilike(pattern),
                Store.category.ilike(pattern),
                Store.address.ilike(pattern),
            ))
            .order_by(Store.name)
        )
        return await self._rated_rows(stmt)

    async def list_by_category(self, category: str) -> list[dict[str, Any]]:
        stmt = (
            self._rated_select()
            .where(Store.category == category)
            .order_by(average_rating.desc().nulls_last(), Store.name)
        )
        return await self._rated_rows(stmt)

    async def create(self, *, created_by: int | None, **values) -> Store:
        store = Store(created_by=created_by, **{k: values.get(k) for k in _STORE_FIELDS})
        self.session.add(store)
        await self.session.commit()
        await self.session.refresh(store)
        return store

    async def update(self, store: Store, **fields) -> Store:
        # assign only provided (not None) fields
        for k, v in fields.items():
            if v is not None and k in _STORE_FIELDS:
                setattr(store, k, v)
        # stamp even when no column value changed
        store.updated_at = func.now()
        await self.session.commit()
        await self.session.refresh(store)
        return store

    async def delete(self, store_id: int) -> None:
        # reviews go with it through ON DELETE CASCADE
        await self.session.execute(delete(Store).where(Store.id == store_id))
        await self.session.commit()
