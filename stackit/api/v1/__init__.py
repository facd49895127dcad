"""
API v1 routes.
"""

from fastapi import APIRouter

from stackit.api.v1 import auth, notifications, questions, votes

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(questions.router, prefix="/questions", tags=["Questions"])
router.include_router(votes.router, tags=["Votes"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
