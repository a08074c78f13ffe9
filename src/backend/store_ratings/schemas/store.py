from datetime import datetime
from pydantic import BaseModel, ConfigDict
from store_ratings.schemas.review import ReviewOut

class StoreOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    address: str
    category: str
    image_url: str | None
    created_by: int | None
    created_at: datetime
    updated_at: datetime

class StoreWithRating(StoreOut):
    # null when the store has no reviews yet
    average_rating: float | None = None
    review_count: int = 0

class StoreDetail(BaseModel):
    store: StoreWithRating
    recent_reviews: list[ReviewOut]
