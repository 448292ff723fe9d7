"""
Authentication Utility - header-based user lookup.

The frontend sends the logged-in user's id in the x-user-id header.
The backend checks the user exists and has the right role. There are
no tokens or passwords involved.

Provides FastAPI dependencies for protected routes.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from resumate.schemas.schemas import UserRole
from resumate.services.mongo_service import UserService


def get_user_service() -> UserService:
    return UserService()


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    users: UserService = Depends(get_user_service)
) -> dict:
    """
    FastAPI dependency - Get current user from the x-user-id header.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required: x-user-id header missing"
        )

    user = users.get_by_user_id(x_user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user: user not found"
        )

    return {
        "user_id": user["userId"],
        "email": user.get("email", ""),
        "name": user.get("name", ""),
        "role": user.get("role", ""),
    }


def require_role(*allowed: UserRole):
    """Dependency factory - allow only the given roles."""
    allowed_values = {role.value for role in allowed}

    async def checker(user: dict = Depends(get_current_user)) -> dict:
        if user["role"] not in allowed_values:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Requires role: {', '.join(sorted(allowed_values))}"
            )
        return user

    return checker


require_student = require_role(UserRole.student)
require_alumni = require_role(UserRole.alumni)
require_admin = require_role(UserRole.admin)
require_alumni_or_admin = require_role(UserRole.alumni, UserRole.admin)
