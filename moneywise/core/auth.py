# moneywise/core/auth.py

import uuid
import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, BaseUserManager, UUIDIDMixin
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users import schemas

from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.ext.asyncio import AsyncSession

from .database import Base, get_async_session
from .config import settings
from moneywise.crud.category import ensure_default_categories
from moneywise.utils.mailer import send_email_via_sendgrid

logger = logging.getLogger(__name__)

JWT_AUDIENCE = ["fastapi-users:auth"]

# 1. User DB model
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(length=320), unique=True, index=True, nullable=False)
    hashed_password = Column(String(length=1024), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    full_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<User email={self.email}>"

# 2. Pydantic schemas
class UserRead(schemas.BaseUser[uuid.UUID]):
    full_name: Optional[str] = None

class UserCreate(schemas.BaseUserCreate):
    full_name: Optional[str] = None

class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None

# 3. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        """New accounts get the default income/expense categories exactly once, here."""
        logger.info(f"User {user.email} has registered. Creating default categories…")
        created = await ensure_default_categories(user.id, self.user_db.session)
        logger.info(f"Created {len(created)} default categories for {user.email}")

    async def on_after_request_verify(self, user: User, token: str, request: Optional[Request] = None):
        logger.info(f"Verification requested for user {user.email}. Token: {token[:10]}...")
        verification_url = f"{settings.FRONTEND_URL}/verify-email?token={token}"

        html_body = """
        <html>
        <body style="font-family: Arial, sans-serif; color: #333;">
            <h2 style="color: #2563eb;">Welcome to MoneyWise!</h2>
            <p>Hello <strong>{user_name}</strong>!</p>
            <p>Please verify your email address to finish setting up your account:</p>
            <p><a href="{verify_link}">Verify Email Address</a></p>
            <p>If you didn't create this account, please ignore this email.</p>
        </body>
        </html>
        """.format(
            user_name=user.full_name or user.email.split('@')[0],
            verify_link=verification_url
        )

        success = await send_email_via_sendgrid(user.email, "🔐 Verify your MoneyWise account", html_body)
        if not success:
            logger.error(f"❌ Failed to send verification email to {user.email}")

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None):
        logger.info(f"Password reset requested for user {user.email}. Token: {token[:10]}...")
        reset_url = f"{settings.FRONTEND_URL}/reset-password?token={token}"

        html_body = """
        <html>
        <body style="font-family: Arial, sans-serif; color: #333;">
            <h2 style="color: #2563eb;">Password Reset Request</h2>
            <p>Hello <strong>{user_name}</strong>!</p>
            <p>We received a request to reset your MoneyWise password:</p>
            <p><a href="{reset_link}">Reset Password</a></p>
            <p>If you didn't request this, you can safely ignore this email.</p>
        </body>
        </html>
        """.format(
            user_name=user.full_name or user.email.split('@')[0],
            reset_link=reset_url
        )

        success = await send_email_via_sendgrid(user.email, "🔑 Reset your MoneyWise password", html_body)
        if not success:
            logger.error(f"❌ Failed to send password reset email to {user.email}")

    async def on_after_reset_password(self, user: User, request: Optional[Request] = None):
        logger.info(f"Password reset completed for user {user.email}")

# 4. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)

# 5. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)

# 6. Authentication
bearer_transport = BearerTransport(tokenUrl="/api/v1/auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.SECRET_KEY,
        lifetime_seconds=settings.jwt_lifetime_seconds,
        token_audience=JWT_AUDIENCE,
        algorithm=settings.ALGORITHM,
    )

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# 7. FastAPI Users instance
fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

__all__ = [
    "fastapi_users",
    "auth_backend",
    "get_user_db",
    "User",
    "UserRead",
    "UserCreate",
    "UserUpdate",
    "JWT_AUDIENCE",
]
