"""
ASGI middleware.
"""

from stackit.api.middleware.request_id import RequestIdMiddleware

__all__ = ["RequestIdMiddleware"]
