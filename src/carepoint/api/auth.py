"""Auth API — registration, login, token refresh, current user.

Learn: Routes for user authentication:
- POST /auth/register → create a new user account
- POST /auth/login → username/password → JWT tokens
- POST /auth/refresh → refresh token → new token pair
- GET /auth/me → current user info
"""

from fastapi import APIRouter, Depends, HTTPException

from carepoint.api.deps import get_store
from carepoint.auth.dependencies import CurrentUser, get_current_user
from carepoint.auth.jwt import (
    TokenError,
    create_access_token,
    create_refresh_token,
    user_id_from_token,
)
from carepoint.auth.password import hash_password, verify_password
from carepoint.schemas.user import (
    LoginRequest,
    RefreshRequest,
    TokenResponse,
    UserCreate,
    UserRead,
)
from carepoint.store.memory import MemoryStore

router = APIRouter(prefix="/auth")


def _issue_tokens(user_id: int) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user_id),
        refresh_token=create_refresh_token(user_id),
    )


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: UserCreate, store: MemoryStore = Depends(get_store)):
    """Create a new user account."""
    if await store.get_user_by_username(body.username):
        raise HTTPException(status_code=409, detail="Username already exists")

    return await store.create_user(
        username=body.username,
        password_hash=hash_password(body.password),
        full_name=body.full_name,
        email=body.email,
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, store: MemoryStore = Depends(get_store)):
    """Login with username and password → JWT tokens."""
    user = await store.get_user_by_username(body.username)
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _issue_tokens(user.id)


# ─── Refresh ────────────────────────────────────────────


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest):
    """Exchange a refresh token for a new token pair."""
    try:
        user_id = user_id_from_token(body.refresh_token, expected_type="refresh")
    except TokenError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return _issue_tokens(user_id)


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(
    current: CurrentUser = Depends(get_current_user),
    store: MemoryStore = Depends(get_store),
):
    """Get the current authenticated user's info."""
    user = await store.get_user(current.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
