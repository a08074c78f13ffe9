from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as SchemaError
from store_ratings.core.config import settings
from store_ratings.core.errors import ConfigurationError, InvalidTokenError
from store_ratings.schemas.user import TokenClaims

# Tokens are valid for exactly seven days from issuance; there is no refresh.
TOKEN_TTL = timedelta(days=7)
TOKEN_TYPE = "user"

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

def hash_password(raw: str) -> str:
    return pwd_ctx.hash(raw)

def verify_password(raw: str, hashed: str) -> bool:
    return pwd_ctx.verify(raw, hashed)

def _secret() -> str:
    if not settings.JWT_SECRET_KEY:
        raise ConfigurationError()
    return settings.JWT_SECRET_KEY

def ensure_signing_secret() -> None:
    _secret()

def create_access_token(user_id: int, username: str, issued_at: datetime | None = None) -> str:
    secret = _secret()
    iat = issued_at or datetime.now(tz=timezone.utc)
    payload: Dict[str, Any] = {
        "id": user_id,
        "username": username,
        "type": TOKEN_TYPE,
        "iat": iat,
        "exp": iat + TOKEN_TTL,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)

def decode_access_token(token: str) -> TokenClaims:
    secret = _secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e
    try:
        return TokenClaims.model_validate(payload)
    except SchemaError as e:
        raise InvalidTokenError("token claims are incomplete") from e
