"""CarePoint CLI — run the server and talk to its API.

Usage:
    carepoint serve                                   # Run the API server (uvicorn)
    carepoint login alice                             # Print an access token
    carepoint doctors                                 # Doctor directory
    carepoint appointments                            # Your appointments
    carepoint book 1 2026-11-02T09:30 "checkup"       # Book an appointment
    carepoint advice "headache and blurry vision"     # Symptom checker

Authenticated commands read the token from --token or CAREPOINT_TOKEN.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from carepoint import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("CAREPOINT_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the CarePoint backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("CAREPOINT_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set CAREPOINT_TOKEN; see `carepoint login`)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> dict | list:
    """Return the JSON body, or print the API's error detail and exit."""
    if r.is_success:
        return r.json()
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    click.secho(f"Error {r.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


_SEVERITY_COLORS = {"low": "green", "medium": "yellow", "high": "red"}

token_option = click.option("--token", help="Access token (or set CAREPOINT_TOKEN)")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="carepoint")
def main():
    """CarePoint — appointments, reminders and health advice."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: CAREPOINT_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: CAREPOINT_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from carepoint.config import settings

    uvicorn.run(
        "carepoint.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command()
@click.argument("username")
@click.password_option(confirmation_prompt=False)
def login(username: str, password: str):
    """Log in and print an access token."""
    _run(_login_impl(username, password))


async def _login_impl(username: str, password: str):
    async with _client() as c:
        r = await c.post("/api/auth/login", json={"username": username, "password": password})
        tokens = _check(r)
    click.echo(tokens["access_token"])


@main.command()
def doctors():
    """List doctors."""
    _run(_doctors_impl())


async def _doctors_impl():
    async with _client() as c:
        rows = _check(await c.get("/api/doctors"))
    for row in rows:
        row["days"] = ", ".join(row.get("availableDays", []))
    _print_table(rows, [
        ("ID", "id", 4),
        ("Name", "name", 22),
        ("Specialty", "specialty", 18),
        ("Available", "days", 32),
    ])


@main.command()
@token_option
def appointments(token: Optional[str]):
    """List your appointments."""
    _run(_appointments_impl(_require_token(token)))


async def _appointments_impl(token: str):
    async with _client(token) as c:
        rows = _check(await c.get("/api/appointments"))
    if not rows:
        click.echo("No appointments.")
        return
    _print_table(rows, [
        ("ID", "id", 4),
        ("Doctor", "doctorId", 6),
        ("Date", "date", 26),
        ("Status", "status", 10),
        ("Reason", "reason", 30),
    ])


@main.command()
@click.argument("doctor_id", type=int)
@click.argument("date")
@click.argument("reason")
@token_option
def book(doctor_id: int, date: str, reason: str, token: Optional[str]):
    """Book an appointment with DOCTOR_ID at DATE (ISO-8601) for REASON."""
    _run(_book_impl(doctor_id, date, reason, _require_token(token)))


async def _book_impl(doctor_id: int, date: str, reason: str, token: str):
    async with _client(token) as c:
        r = await c.post("/api/appointments", json={
            "doctorId": doctor_id,
            "date": date,
            "reason": reason,
        })
        appt = _check(r)
    click.secho(f"Appointment #{appt['id']} booked for {appt['date']}", fg="green")


@main.command()
@click.argument("symptoms")
@token_option
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON response")
def advice(symptoms: str, token: Optional[str], as_json: bool):
    """Get advice for SYMPTOMS."""
    _run(_advice_impl(symptoms, _require_token(token), as_json))


async def _advice_impl(symptoms: str, token: str, as_json: bool):
    async with _client(token) as c:
        result = _check(await c.post("/api/health-advice", json={"symptoms": symptoms}))
    if as_json:
        click.echo(json.dumps(result, indent=2))
        return
    severity = result["severity"]
    click.secho(f"Severity: {severity}", fg=_SEVERITY_COLORS.get(severity, "white"), bold=True)
    if result["seekMedicalAttention"]:
        click.secho("Seek medical attention.", fg="red")
    click.echo()
    click.echo(result["advice"])


if __name__ == "__main__":
    main()
