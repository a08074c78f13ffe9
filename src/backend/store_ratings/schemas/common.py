from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: dict[str, str] | None = None

class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_reviews: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "Pagination":
        total_pages = -(-total // limit) if total else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_reviews=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

class PaginatedResponse(ApiResponse[T], Generic[T]):
    pagination: Pagination
