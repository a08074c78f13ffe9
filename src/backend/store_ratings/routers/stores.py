from fastapi import APIRouter, Depends, UploadFile, File, Form
from sqlalchemy.ext.asyncio import AsyncSession

from store_ratings.core.deps import get_current_claims
from store_ratings.db.session import get_session
from store_ratings.schemas.common import ApiResponse
from store_ratings.schemas.store import StoreDetail, StoreOut, StoreWithRating
from store_ratings.schemas.user import TokenClaims
from store_ratings.services.store_service import StoreService

router = APIRouter(prefix="/api/stores", tags=["stores"])

@router.get("", response_model=ApiResponse[list[StoreWithRating]])
async def list_stores(session: AsyncSession = Depends(get_session)):
    return ApiResponse(data=await StoreService(session).list_stores())

@router.get("/search/{query}", response_model=ApiResponse[list[StoreWithRating]])
async def search_stores(query: str, session: AsyncSession = Depends(get_session)):
    return ApiResponse(data=await StoreService(session).search(query))

@router.get("/category/{category}", response_model=ApiResponse[list[StoreWithRating]])
async def stores_by_category(category: str, session: AsyncSession = Depends(get_session)):
    return ApiResponse(data=await StoreService(session).by_category(category))

@router.get("/{store_id}", response_model=ApiResponse[StoreDetail])
async def get_store(store_id: int, session: AsyncSession = Depends(get_session)):
    return ApiResponse(data=await StoreService(session).get_store(store_id))

@router.post("", response_model=ApiResponse[StoreOut], status_code=201)
async def create_store(
    name: str | None = Form(default=None),
    description: str | None = Form(default=None),
    address: str | None = Form(default=None),
    category: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    store = await StoreService(session).create_store(
        name=name,
        description=description,
        address=address,
        category=category,
        image=image,
        created_by=claims.id,
    )
    return ApiResponse(message="Store created successfully", data=StoreOut.model_validate(store))

@router.put("/{store_id}", response_model=ApiResponse[StoreOut])
async def update_store(
    store_id: int,
    name: str | None = Form(default=None),
    description: str | None = Form(default=None),
    address: str | None = Form(default=None),
    category: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    store = await StoreService(session).update_store(
        store_id,
        name=name,
        description=description,
        address=address,
        category=category,
        image=image,
    )
    return ApiResponse(message="Store updated successfully", data=StoreOut.model_validate(store))

@router.delete("/{store_id}", response_model=ApiResponse[None])
async def delete_store(
    store_id: int,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    await StoreService(session).delete_store(store_id)
    return ApiResponse(message="Store deleted successfully")
