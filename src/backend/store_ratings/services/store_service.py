# src/backend/store_ratings/services/store_service.py
import logging
import os
from pathlib import Path
from typing import Any, Dict
from uuid import uuid4

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from store_ratings.core.config import settings
from store_ratings.core.errors import NotFoundError, ValidationError
from store_ratings.repositories.review_repo import ReviewRepo
from store_ratings.repositories.store_repo import StoreRepo

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"
RECENT_REVIEWS = 10
IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}


async def save_image(image: UploadFile) -> str:
    """Store an uploaded image under UPLOAD_DIR and return its public URL."""
    ext = IMAGE_TYPES.get((image.content_type or "").lower())
    if ext is None:
        raise ValidationError("Please select a valid image file", errors={"image": "Allowed types: JPEG, PNG, GIF"})
    content = await image.read()
    if len(content) > settings.MAX_IMAGE_BYTES:
        raise ValidationError("File size must be less than 5MB", errors={"image": "File too large"})

    base_dir = Path(settings.UPLOAD_DIR)
    base_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{uuid4().hex}{ext}"
    with open(base_dir / filename, "wb") as f:
        f.write(content)
    return f"{UPLOAD_URL_PREFIX}/{filename}"


def remove_image(image_url: str | None) -> None:
    if not image_url or not image_url.startswith(UPLOAD_URL_PREFIX + "/"):
        return
    path = Path(settings.UPLOAD_DIR) / image_url[len(UPLOAD_URL_PREFIX) + 1:]
    try:
        if path.exists():
            os.remove(path)
    except OSError:
        logger.warning("Could not remove image file %s", path, exc_info=True)


class StoreService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = StoreRepo(session)
        self.reviews = ReviewRepo(session)

    async def list_stores(self) -> list[Dict[str, Any]]:
        return await self.repo.list_with_ratings()

    async def get_store(self, store_id: int) -> Dict[str, Any]:
        store = await self.repo.get_with_rating(store_id)
        if not store:
            raise NotFoundError("Store not found")
        recent = await self.reviews.list_for_store(store_id, limit=RECENT_REVIEWS)
        return {"store": store, "recent_reviews": recent}

    async def search(self, query: str) -> list[Dict[str, Any]]:
        return await self.repo.search(query.strip())

    async def by_category(self, category: str) -> list[Dict[str, Any]]:
        return await self.repo.list_by_category(category)

    async def create_store(
        self,
        *,
        name: str | None,
        description: str | None,
        address: str | None,
        category: str | None,
        image: UploadFile | None,
        created_by: int,
    ):
        missing = {
            field: f"{field.capitalize()} is required"
            for field, value in (("name", name), ("address", address), ("category", category))
            if not (value and value.strip())
        }
        if missing:
            raise ValidationError("Name, address, and category are required", errors=missing)

        image_url = await save_image(image) if image is not None and image.filename else None
        store = await self.repo.create(
            name=name.strip(),
            description=description,
            address=address.strip(),
            category=category.strip(),
            image_url=image_url,
            created_by=created_by,
        )
        logger.info("Store %s created by user %s", store.id, created_by)
        return store

    async def update_store(self, store_id: int, *, image: UploadFile | None = None, **fields):
        # any authenticated caller may edit a store; authorship is not checked
        store = await self.repo.get(store_id)
        if not store:
            raise NotFoundError("Store not found")

        for required in ("name", "address", "category"):
            value = fields.get(required)
            if value is not None and not value.strip():
                msg = f"{required.capitalize()} cannot be empty"
                raise ValidationError(msg, errors={required: msg})

        old_image = store.image_url
        if image is not None and image.filename:
            fields["image_url"] = await save_image(image)
        updated = await self.repo.update(store, **fields)
        if fields.get("image_url") and old_image != updated.image_url:
            remove_image(old_image)
        logger.info("Store %s updated", store_id)
        return updated

    async def delete_store(self, store_id: int) -> None:
        store = await self.repo.get(store_id)
        if not store:
            raise NotFoundError("Store not found")
        image_url = store.image_url
        await self.repo.delete(store_id)
        remove_image(image_url)
        logger.info("Store %s deleted with its reviews", store_id)
