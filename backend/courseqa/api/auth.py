"""Decode the bearer token issued by the external auth layer into an Actor."""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from courseqa.core import config
from courseqa.domain.qa.models import Actor
from courseqa.domain.qa.policy import ROLES

_bearer = HTTPBearer(auto_error=False)


# ------------------------------------------------------------------
# JWT helpers
# ------------------------------------------------------------------
def create_access_token(user_id: str, role: str, username: Optional[str] = None) -> str:
    """Issue a token the way the upstream auth layer does (used by tooling and tests)."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": user_id,
        "username": username or user_id,
        "role": role,
        "exp": expire,
    }
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.ALGORITHM)


def _decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}")


# ------------------------------------------------------------------
# Dependency: get current actor from Bearer token
# ------------------------------------------------------------------
def get_current_actor(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> Actor:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    claims = _decode_token(credentials.credentials)
    if not claims.get("sub") or claims.get("role") not in ROLES:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is missing a subject or a known role")
    return Actor(id=claims["sub"], role=claims["role"], username=claims.get("username"))
