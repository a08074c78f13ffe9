from __future__ import annotations
from typing import Any
from sqlalchemy import select, delete, func, case
from sqlalchemy.ext.asyncio import AsyncSession
from store_ratings.models.review import Review
from store_ratings.models.store import Store
from store_ratings.models.user import User

_STAR_COLUMNS = {5: "five_star", 4: "four_star", 3: "three_star", 2: "two_star", 1: "one_star"}


def _detail(review: Review, username: str | None = None, store_name: str | None = None,
            store_category: str | None = None) -> dict[str, Any]:
    row = {c.key: getattr(review, c.key) for c in Review.__table__.columns}
    row.update(username=username, store_name=store_name, store_category=store_category)
    return row


class ReviewRepo:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _detail_select(self):
        return (
            select(
                Review,
                User.username,
                Store.name.label("store_name"),
                Store.category.label("store_category"),
            )
            .join(User, User.id == Review.user_id)
            .join(Store, Store.id == Review.store_id)
        )

    async def _detail_rows(self, stmt) -> list[dict[str, Any]]:
        res = await self.session.execute(stmt)
        return [_detail(*row) for row in res.all()]

    @staticmethod
    def _newest_first(stmt):
        return stmt.order_by(Review.created_at.desc(), Review.id.desc())

    async def get(self, review_id: int) -> Review | None:
        res = await self.session.execute(select(Review).where(Review.id == review_id))
        return res.scalars().first()

    async def get_detail(self, review_id: int) -> dict[str, Any] | None:
        rows = await self._detail_rows(self._detail_select().where(Review.id == review_id))
        return rows[0] if rows else None

    async def find_for_store_and_user(self, *, store_id: int, user_id: int) -> Review | None:
        res = await self.session.execute(
            select(Review).where(Review.store_id == store_id, Review.user_id == user_id)
        )
        return res.scalars().first()

    async def list_all(self, *, limit: int = 10, offset: int = 0) -> list[dict[str, Any]]:
        stmt = self._newest_first(self._detail_select()).limit(limit).offset(offset)
        return await self._detail_rows(stmt)

    async def count_all(self) -> int:
        res = await self.session.execute(select(func.count(Review.id)))
        return int(res.scalar_one())

    async def list_for_store(self, store_id: int, *, limit: int = 10, offset: int = 0) -> list[dict[str, Any]]:
        stmt = (
            self._newest_first(self._detail_select().where(Review.store_id == store_id))
            .limit(limit)
            .offset(offset)
        )
        return await self._detail_rows(stmt)

    async def count_for_store(self, store_id: int) -> int:
        res = await self.session.execute(
            select(func.count(Review.id)).where(Review.store_id == store_id)
        )
        return int(res.scalar_one())

    async def rating_stats_for_store(self, store_id: int) -> dict[str, Any]:
        columns = [
            func.round(func.avg(Review.rating), 1).label("average_rating"),
            func.count(Review.id).label("total_reviews"),
        ]
        columns += [
            func.coalesce(func.sum(case((Review.rating == star, 1), else_=0)), 0).label(name)
            for star, name in _STAR_COLUMNS.items()
        ]
        res = await self.session.execute(select(*columns).where(Review.store_id == store_id))
        stats = dict(res.mappings().one())
        avg = stats["average_rating"]
        stats["average_rating"] = float(avg) if avg is not None else None
        return {k: (int(v) if k != "average_rating" else v) for k, v in stats.items()}

    async def list_for_user(self, user_id: int) -> list[dict[str, Any]]:
        stmt = self._newest_first(self._detail_select().where(Review.user_id == user_id))
        return await self._detail_rows(stmt)

    async def create(self, *, store_id: int, user_id: int, rating: int, comment: str | None) -> Review:
        review = Review(store_id=store_id, user_id=user_id, rating=rating, comment=comment)
        self.session.add(review)
        await self.session.commit()
        await self.session.refresh(review)
        return review

    async def update(self, review: Review, *, rating: int | None = None, comment: str | None = None) -> Review:
        if rating is not None:
            review.rating = rating
        if comment is not None:
            review.comment = comment
        # bump even when nothing else changed
        review.updated_at = func.now()
        await self.session.commit()
        await self.session.refresh(review)
        return review

    async def delete(self, review_id: int) -> None:
        await self.session.execute(delete(Review).where(Review.id == review_id))
        await self.session.commit()
