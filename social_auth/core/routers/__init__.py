"""
Routers for the application.

"""

from social_auth.core.routers.auth import router as auth_router

__all__ = ["auth_router"]
