from datetime import datetime
from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict
from store_ratings.schemas.common import PaginatedResponse

T = TypeVar("T")

class ReviewCreate(BaseModel):
    store_id: int | None = None
    rating: int | None = None
    comment: str | None = None

class ReviewUpdate(BaseModel):
    # all optional; omitted fields keep their stored value
    rating: int | None = None
    comment: str | None = None

class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    store_id: int
    user_id: int
    rating: int
    comment: str | None
    created_at: datetime
    updated_at: datetime
    username: str | None = None
    store_name: str | None = None
    store_category: str | None = None

class RatingStats(BaseModel):
    average_rating: float | None = None
    total_reviews: int = 0
    five_star: int = 0
    four_star: int = 0
    three_star: int = 0
    two_star: int = 0
    one_star: int = 0

class StoreReviewsResponse(PaginatedResponse[T], Generic[T]):
    rating_stats: RatingStats
