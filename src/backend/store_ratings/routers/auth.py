from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from store_ratings.core.deps import get_current_claims
from store_ratings.db.session import get_session
from store_ratings.schemas.user import (
    AuthResponse,
    LoginIn,
    ProfileUpdate,
    RegisterIn,
    TokenClaims,
    TokenCheckResponse,
    UserPublic,
)
from store_ratings.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(payload: RegisterIn, session: AsyncSession = Depends(get_session)):
    user, token = await AuthService(session).register(payload)
    return AuthResponse(message="User registered successfully", token=token, user=UserPublic.model_validate(user))

@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginIn, session: AsyncSession = Depends(get_session)):
    user, token = await AuthService(session).login(payload)
    return AuthResponse(message="Login successful", token=token, user=user)

@router.get("/profile", response_model=AuthResponse)
async def get_profile(
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    user = await AuthService(session).get_profile(claims.id)
    return AuthResponse(message="Profile retrieved successfully", user=UserPublic.model_validate(user))

@router.put("/profile", response_model=AuthResponse)
async def update_profile(
    payload: ProfileUpdate,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
):
    user = await AuthService(session).update_profile(claims.id, payload)
    return AuthResponse(message="Profile updated successfully", user=UserPublic.model_validate(user))

@router.post("/verify-token", response_model=TokenCheckResponse)
async def verify_token(claims: TokenClaims = Depends(get_current_claims)):
    return TokenCheckResponse(message="Token is valid", user=claims)

@router.post("/logout", response_model=AuthResponse)
async def logout(claims: TokenClaims = Depends(get_current_claims)):
    # tokens are stateless; the client drops its copy
    return AuthResponse(message="Logged out successfully")
