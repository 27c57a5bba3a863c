# fintrack/auth.py
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from . import config

# Security scheme
security = HTTPBearer()


def get_token_claims(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """
    Verifies the bearer JWT issued by the identity provider and returns its claims.
    """
    token = credentials.credentials
    secret = config.jwt_secret()

    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT secret not configured"
        )

    try:
        return jwt.decode(token, secret, algorithms=["HS256"], audience=config.jwt_audience())
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(claims: dict = Depends(get_token_claims)) -> str:
    """Returns the user_id (sub) of the authenticated caller."""
    user_id: Optional[str] = claims.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_user_email(claims: dict = Depends(get_token_claims)) -> Optional[str]:
    email = claims.get("email")
    return email.lower() if email else None
