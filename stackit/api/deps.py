"""
FastAPI dependencies for authentication, database sessions and the engine.

Everything stateful hangs off ``app.state`` (set up in the lifespan), so a
test can build a fresh application per database.
"""

import uuid
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from stackit.engines.voting import VoteAcceptFacade
from stackit.kernel.identity.identity_service import IdentityService
from stackit.kernel.identity.jwt import JWTManager
from stackit.kernel.models.user import User
from stackit.kernel.store import EntityStore


# Security scheme
security = HTTPBearer(auto_error=False)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields database sessions."""
    async with request.app.state.session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_jwt_manager(request: Request) -> JWTManager:
    return request.app.state.jwt_manager


def get_store(request: Request) -> EntityStore:
    return request.app.state.store


def get_facade(request: Request) -> VoteAcceptFacade:
    return request.app.state.facade


Jwt = Annotated[JWTManager, Depends(get_jwt_manager)]
Store = Annotated[EntityStore, Depends(get_store)]
Facade = Annotated[VoteAcceptFacade, Depends(get_facade)]


def get_identity_service(db: DbSession, jwt_manager: Jwt) -> IdentityService:
    return IdentityService(db, jwt_manager)


Identity = Annotated[IdentityService, Depends(get_identity_service)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    identity: Identity,
) -> User:
    """Get current authenticated user or raise 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = identity.jwt_manager.verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await identity.get_user_by_id(uuid.UUID(payload.sub))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]

