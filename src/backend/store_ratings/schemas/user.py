from pydantic import BaseModel, ConfigDict
from typing import Literal

# Request bodies stay permissive; field rules live in AuthService so every
# violation comes back as one message per field.

class RegisterIn(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None

class LoginIn(BaseModel):
    email: str | None = None
    password: str | None = None

class ProfileUpdate(BaseModel):
    username: str | None = None

class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str

class TokenClaims(BaseModel):
    id: int
    username: str
    type: Literal["user"] = "user"

class AuthResponse(BaseModel):
    message: str
    token: str | None = None
    user: UserPublic | None = None

class TokenCheckResponse(BaseModel):
    message: str
    user: TokenClaims
