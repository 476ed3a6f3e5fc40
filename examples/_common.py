"""
Shared helpers for CarePoint examples.

Handles the health check and authentication (register + login) so each
example can focus on its specific workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  carepoint serve --reload")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print(f"Backend: {health['status']} (v{health['version']})")
    print(f"  Live notification connections: {health['notifications']['connections']}")


def authenticate() -> tuple[int, str]:
    """Register a fresh user and login, returning (user_id, access_token).

    Uses a unique username per run so examples are idempotent.
    """
    run_id = uuid.uuid4().hex[:8]
    username = f"demo-{run_id}"
    password = "demo-password"

    resp = httpx.post(
        f"{BASE}/auth/register",
        json={
            "username": username,
            "password": password,
            "fullName": f"Demo User {run_id}",
            "email": f"{username}@example.com",
        },
        timeout=10,
    )
    if resp.status_code != 201:
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)
    user_id = resp.json()["id"]

    resp = httpx.post(
        f"{BASE}/auth/login",
        json={"username": username, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    return user_id, resp.json()["access_token"]


def create_client() -> tuple[int, httpx.Client]:
    """Check backend, authenticate, and return (user_id, authed client)."""
    check_backend()
    user_id, token = authenticate()
    print(f"  Auth: ✓ (user {user_id})")
    return user_id, httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {token}"},
    )
