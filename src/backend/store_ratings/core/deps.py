from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from store_ratings.core.errors import AuthenticationError, InvalidTokenError
from store_ratings.core.security import decode_access_token
from store_ratings.schemas.user import TokenClaims

# auto_error off so a missing header goes through our own 401 envelope
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_current_claims(token: str | None = Depends(oauth2_scheme)) -> TokenClaims:
    if not token:
        raise AuthenticationError("No token provided")
    try:
        # ConfigurationError (no secret) propagates as a 500
        return decode_access_token(token)
    except InvalidTokenError:
        raise AuthenticationError("Invalid token")
