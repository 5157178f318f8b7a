"""
Shared dependency functions for FastAPI routers.
Eliminates code duplication across multiple router files.
"""
from fastapi import Request, HTTPException, Depends

from helpers.RegistrationErrors import RegistrationError


async def get_current_user(request: Request):
    """
    Dependency to get the currently authenticated user from session.
    Raises HTTPException if user is not authenticated.
    """
    user = request.session.get('user')
    if not user:
        raise HTTPException(status_code=401, detail="User not authenticated")
    return user


async def require_admin(user: dict = Depends(get_current_user)):
    """
    Dependency to require admin role.
    Raises HTTPException if user is not an admin.
    """
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def require_db(db):
    if db is None:
        raise HTTPException(status_code=503, detail="Database connection not available. Please check MongoDB configuration.")
    return db


def to_http_exception(error: RegistrationError) -> HTTPException:
    """Map a domain error onto the response the frontend shows to the user."""
    return HTTPException(status_code=error.status_code, detail=error.message)
