"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the current user from the Authorization: Bearer <jwt> header.
Protected routers get get_current_user at include time (see api/__init__),
so an unauthenticated request is rejected before any handler runs.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException

from carepoint.auth.jwt import TokenError, user_id_from_token


class CurrentUser:
    """The authenticated caller."""

    def __init__(self, user_id: int):
        self.user_id = user_id

    def __repr__(self) -> str:
        return f"CurrentUser(user_id={self.user_id})"


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
) -> Optional[CurrentUser]:
    """Extract the current user, or None when no bearer token is sent."""
    if not authorization or not authorization.startswith("Bearer "):
        return None

    token = authorization[7:]
    try:
        return CurrentUser(user_id=user_id_from_token(token))
    except TokenError as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    user: Optional[CurrentUser] = Depends(get_current_user_optional),
) -> CurrentUser:
    """Extract the current user (required — 401 if no auth)."""
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
