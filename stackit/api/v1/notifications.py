"""
Notification feed (read-only).
"""

from fastapi import APIRouter, Query

from stackit.api.deps import CurrentUser, Store
from stackit.schemas.common import PaginatedResponse
from stackit.schemas.notification import NotificationResponse, UnreadCountResponse

router = APIRouter()


@router.get("", response_model=PaginatedResponse[NotificationResponse])
async def list_notifications(
    user: CurrentUser,
    store: Store,
    unread_only: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    """List the current user's notifications, newest first."""
    items = await store.list_notifications(
        user.id,
        unread_only=unread_only,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    total = await store.count_notifications(user.id, unread_only=unread_only)
    return PaginatedResponse.create(
        items=[NotificationResponse.from_record(n) for n in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(user: CurrentUser, store: Store):
    return UnreadCountResponse(unread=await store.count_notifications(user.id, unread_only=True))
