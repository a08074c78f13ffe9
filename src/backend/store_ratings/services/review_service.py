# src/backend/store_ratings/services/review_service.py
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from store_ratings.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from store_ratings.models.review import Review
from store_ratings.repositories.review_repo import ReviewRepo
from store_ratings.repositories.store_repo import StoreRepo
from store_ratings.schemas.common import Pagination
from store_ratings.schemas.review import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)

MIN_RATING, MAX_RATING = 1, 5
ALREADY_REVIEWED = "You have already reviewed this store"


def check_rating(rating: int) -> None:
    if not MIN_RATING <= rating <= MAX_RATING:
        msg = f"Rating must be between {MIN_RATING} and {MAX_RATING}"
        raise ValidationError(msg, errors={"rating": msg})


class ReviewService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = ReviewRepo(session)
        self.stores = StoreRepo(session)

    async def _owned(self, review_id: int, caller_id: int, action: str) -> Review:
        review = await self.repo.get(review_id)
        if not review:
            raise NotFoundError("Review not found")
        if review.user_id != caller_id:
            raise ForbiddenError(f"You can only {action} your own reviews")
        return review

    async def _require_store(self, store_id: int) -> None:
        if not await self.stores.exists(store_id):
            raise NotFoundError("Store not found")

    async def create(self, payload: ReviewCreate, user_id: int) -> Dict[str, Any]:
        if payload.store_id is None or payload.rating is None:
            errors = {}
            if payload.store_id is None:
                errors["store_id"] = "Store ID is required"
            if payload.rating is None:
                errors["rating"] = "Rating is required"
            raise ValidationError("Store ID and rating are required", errors=errors)
        # bounds first: an out-of-range rating is rejected whatever the store
        check_rating(payload.rating)
        await self._require_store(payload.store_id)

        if await self.repo.find_for_store_and_user(store_id=payload.store_id, user_id=user_id):
            raise ConflictError(ALREADY_REVIEWED)
        try:
            review = await self.repo.create(
                store_id=payload.store_id,
                user_id=user_id,
                rating=payload.rating,
                comment=payload.comment,
            )
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(ALREADY_REVIEWED)

        logger.info("Review %s created for store %s by user %s", review.id, review.store_id, user_id)
        return await self.repo.get_detail(review.id)

    async def update(self, review_id: int, caller_id: int, payload: ReviewUpdate) -> Dict[str, Any]:
        if payload.rating is not None:
            check_rating(payload.rating)
        review = await self._owned(review_id, caller_id, "update")
        await self.repo.update(review, rating=payload.rating, comment=payload.comment)
        logger.info("Review %s updated by user %s", review_id, caller_id)
        return await self.repo.get_detail(review_id)

    async def delete(self, review_id: int, caller_id: int) -> None:
        await self._owned(review_id, caller_id, "delete")
        await self.repo.delete(review_id)
        logger.info("Review %s deleted by user %s", review_id, caller_id)

    async def get(self, review_id: int) -> Dict[str, Any]:
        review = await self.repo.get_detail(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    async def list_all(self, *, page: int, limit: int) -> tuple[list[Dict[str, Any]], Pagination]:
        reviews = await self.repo.list_all(limit=limit, offset=(page - 1) * limit)
        total = await self.repo.count_all()
        return reviews, Pagination.build(page=page, limit=limit, total=total)

    async def list_for_store(
        self, store_id: int, *, page: int, limit: int
    ) -> tuple[list[Dict[str, Any]], Dict[str, Any], Pagination]:
        await self._require_store(store_id)
        reviews = await self.repo.list_for_store(store_id, limit=limit, offset=(page - 1) * limit)
        total = await self.repo.count_for_store(store_id)
        stats = await self.repo.rating_stats_for_store(store_id)
        return reviews, stats, Pagination.build(page=page, limit=limit, total=total)

    async def list_for_user(self, user_id: int, caller_id: int) -> list[Dict[str, Any]]:
        if user_id != caller_id:
            raise ForbiddenError("Access denied")
        return await self.repo.list_for_user(user_id)
