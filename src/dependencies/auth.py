"""
Authentication and authorization dependencies for FastAPI.

Identity only: the rater ID is the ``sub`` claim of a bearer JWT.
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config import config
from src.core.logger import logger

security = HTTPBearer()


class CurrentUser:
    """
    Current authenticated user information.
    """
    def __init__(self, user_id: str, email: Optional[str] = None, roles: list = None):
        self.user_id = user_id
        self.email = email
        self.roles = roles or []

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def is_admin(self) -> bool:
        return "admin" in self.roles


def decode_token(token: str) -> CurrentUser:
    """
    Validate a JWT and extract the user it identifies.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Expired JWT token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.InvalidTokenError as e:
        logger.warning("JWT validation error", metadata={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials"
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )

    return CurrentUser(
        user_id=str(user_id),
        email=payload.get("email"),
        roles=payload.get("roles", []),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> CurrentUser:
    """
    FastAPI dependency to get current authenticated user.

    Usage:
        @router.post("/{item_id}/ratings")
        async def rate_item(current_user: CurrentUser = Depends(get_current_user)):
            ...
    """
    user = decode_token(credentials.credentials)
    logger.debug("User authenticated", user_id=user.user_id)
    return user


def require_role(required_role: str):
    """
    Dependency factory to require specific role.

    Usage:
        @router.post("/items")
        async def create_item(current_user: CurrentUser = Depends(require_role("admin"))):
            ...
    """
    async def role_checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not current_user.has_role(required_role):
            logger.warning(
                "Access denied: user lacks required role",
                user_id=current_user.user_id,
                metadata={
                    "required_role": required_role,
                    "user_roles": current_user.roles
                }
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied: requires {required_role} role"
            )
        return current_user

    return role_checker


# Convenience dependency for admin-only endpoints
require_admin = require_role("admin")
