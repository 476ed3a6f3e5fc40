#!/usr/bin/env python3
"""
CarePoint Quickstart — the whole patient flow in one script.

Registers a user → browses doctors → books an appointment 30 minutes out
→ asks the symptom checker → logs water intake.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000

The browser (or any WebSocket client) connected to
ws://localhost:8000/ws?userId=<id>&token=<jwt> receives an
appointment_created event for step 2 and appointment_reminder events
every minute until the appointment starts.
"""

from datetime import datetime, timedelta, timezone

from _common import create_client


def main():
    user_id, client = create_client()

    # ── Doctors ───────────────────────────────────────────────────
    print("\n1. Doctors:")
    doctors = client.get("/doctors").json()
    for d in doctors:
        print(f"   #{d['id']} {d['name']} — {d['specialty']} ({', '.join(d['availableDays'])})")

    # ── Book ──────────────────────────────────────────────────────
    print("\n2. Booking a checkup in 30 minutes...")
    when = datetime.now(timezone.utc) + timedelta(minutes=30)
    resp = client.post("/appointments", json={
        "doctorId": doctors[0]["id"],
        "date": when.isoformat(),
        "reason": "checkup",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    appt = resp.json()
    print(f"   Appointment #{appt['id']} at {appt['date']} ({appt['status']})")

    # ── Symptom checker ───────────────────────────────────────────
    print("\n3. Symptom checker:")
    for symptoms in ("mild tiredness", "fever and chills", "sudden chest pain"):
        advice = client.post("/health-advice", json={"symptoms": symptoms}).json()
        print(f"   {symptoms!r}: {advice['severity']}"
              f"{' — see a doctor' if advice['seekMedicalAttention'] else ''}")

    # ── Water ─────────────────────────────────────────────────────
    print("\n4. Water intake:")
    for amount in (250, 500, 330):
        client.post("/water-intake", json={"amount": amount})
    progress = client.get("/water-intake/advice").json()
    print(f"   {progress['todayTotal']} / {progress['target']} ml — {progress['advice']}")

    print(f"\nDone. Tip of the day: {client.get('/health-tip').json()['tip']}")
    print(f"Connect ws://localhost:8000/ws?userId={user_id}&token=... to see reminders.")


if __name__ == "__main__":
    main()
