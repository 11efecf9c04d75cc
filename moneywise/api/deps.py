# moneywise/api/deps.py
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import jwt
import uuid

from moneywise.core.database import get_async_session
from moneywise.core.auth import User, JWT_AUDIENCE
from moneywise.core.config import settings

optional_security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the ``access_token`` cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials

    token = request.cookies.get("access_token")
    # Cookies may carry the "Bearer " prefix
    if token and token.startswith("Bearer "):
        token = token[7:]
    return token or None


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> User:
    """
    Resolve the active user from a fastapi-users JWT.

    The token is looked for in the Authorization header and then in the
    ``access_token`` cookie.
    """
    token = extract_token(request, credentials)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid token")

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        raise _unauthorized("Invalid user ID format in token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("Inactive user")

    return user
