from typing import Annotated
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from store_ratings.core.deps import get_current_claims
from store_ratings.db.session import get_session
from store_ratings.schemas.common import ApiResponse, PaginatedResponse
from store_ratings.schemas.review import (
    RatingStats,
    ReviewCreate,
    ReviewOut,
    ReviewUpdate,
    StoreReviewsResponse,
)
from store_ratings.schemas.user import TokenClaims
from store_ratings.services.review_service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["reviews"])

Page = Annotated[int, Query(ge=1)]
Limit = Annotated[int, Query(ge=1, le=50)]

@router.get("", response_model=PaginatedResponse[ReviewOut])
async def list_reviews(
    page: Page = 1,
    limit: Limit = 10,
    session: AsyncSession = Depends(get_session),
):
    reviews, pagination = await ReviewService(session).list_all(page=page, limit=limit)
    return PaginatedResponse[ReviewOut](data=reviews, pagination=pagination)

@router.get("/store/{store_id}", response_model=StoreReviewsResponse[ReviewOut])
async def list_store_reviews(
    store_id: int,
    page: Page = 1,
    limit: Limit = 10,
    session: AsyncSession = Depends(get_session),
):
    reviews, stats, pagination = await ReviewService(session).list_for_store(store_id, page=page, limit=limit)
    return StoreReviewsResponse[ReviewOut](
        data=reviews,
        rating_stats=RatingStats(**stats),
        pagination=pagination,
    )

@router.get("/user/{user_id}", response_model=ApiResponse[list[ReviewOut]])
async def list_user_reviews(
    user_id: int,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    return ApiResponse(data=await ReviewService(session).list_for_user(user_id, claims.id))

@router.get("/{review_id}", response_model=ApiResponse[ReviewOut])
async def get_review(review_id: int, session: AsyncSession = Depends(get_session)):
    return ApiResponse(data=await ReviewService(session).get(review_id))

@router.post("", response_model=ApiResponse[ReviewOut], status_code=201)
async def create_review(
    payload: ReviewCreate,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    review = await ReviewService(session).create(payload, claims.id)
    return ApiResponse(message="Review created successfully", data=review)

@router.put("/{review_id}", response_model=ApiResponse[ReviewOut])
async def update_review(
    review_id: int,
    payload: ReviewUpdate,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    review = await ReviewService(session).update(review_id, claims.id, payload)
    return ApiResponse(message="Review updated successfully", data=review)

@router.delete("/{review_id}", response_model=ApiResponse[None])
async def delete_review(
    review_id: int,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    await ReviewService(session).delete(review_id, claims.id)
    return ApiResponse(message="Review deleted successfully")
