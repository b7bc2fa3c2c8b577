from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from lootledger.config import get_settings
from lootledger.exceptions import AuthenticationError
from lootledger.models.enums import PlayerRole
from lootledger.schemas.auth import Identity

# auto_error=False: fehlender Header wird selbst als AuthenticationError behandelt
security = HTTPBearer(auto_error=False)


def create_access_token(subject: str, role: PlayerRole, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {"sub": subject, "role": role.value, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Identity:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        subject = payload.get("sub")
        role = PlayerRole(payload.get("role"))
    except (JWTError, ValueError):
        raise AuthenticationError("Ungültiges oder abgelaufenes Token")
    if not subject:
        raise AuthenticationError("Ungültiges oder abgelaufenes Token")
    return Identity(subject=subject, role=role)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """Dependency: Identität aus dem Bearer-Token, sonst 401."""
    if credentials is None:
        raise AuthenticationError()
    return decode_access_token(credentials.credentials)


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Identity]:
    if credentials is None:
        return None
    try:
        return decode_access_token(credentials.credentials)
    except AuthenticationError:
        return None
