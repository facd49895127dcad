"""
Identity service for user accounts.
"""

import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.kernel.identity.jwt import JWTManager, TokenResponseData
from stackit.kernel.identity.password import hash_password, verify_password
from stackit.kernel.models.user import User
from stackit.logging_config import get_logger

logger = get_logger(__name__)


class IdentityService:
    """
    Registration, login and user lookup.

    The caller owns the session and its transaction.
    """

    def __init__(self, session: AsyncSession, jwt_manager: Optional[JWTManager] = None):
        self.session = session
        self.jwt_manager = jwt_manager or JWTManager()

    async def register_user(self, email: str, username: str, password: str) -> User:
        """
        Register a new user.

        Raises:
            ValueError: If the email or username is already taken
        """
        email = email.lower().strip()
        username = username.strip()

        query = select(User).where(
            or_(func.lower(User.email) == email, User.username == username)
        )
        existing = (await self.session.execute(query)).scalar_one_or_none()
        if existing:
            raise ValueError("Email or username already registered")

        user = User(
            email=email,
            username=username,
            password_hash=hash_password(password),
        )
        self.session.add(user)
        await self.session.flush()  # Get the ID
        await self.session.refresh(user)

        logger.info("User registered", extra={"user_id": str(user.id)})
        return user

    async def authenticate(self, email: str, password: str) -> Optional[tuple[User, TokenResponseData]]:
        """
        Check credentials and issue an access token.

        Returns:
            (User, token) if successful, None otherwise
        """
        user = await self.get_user_by_email(email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None

        return user, self.issue_token(user)

    def issue_token(self, user: User) -> TokenResponseData:
        return self.jwt_manager.create_access_token(user.id, user.username)

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        query = select(User).where(func.lower(User.email) == email.lower().strip())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
