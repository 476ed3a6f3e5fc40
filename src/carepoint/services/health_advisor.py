"""Rule-based health advice — symptom keywords, tips, water intake.

Learn: This is a fixed lookup table, not a diagnostic engine. Symptoms
are matched by case-insensitive substring:
1. Any emergency keyword → "high", seek attention immediately
2. First matching moderate condition → "medium" + condition advice + a tip
3. Nothing matched → "low", rest and monitor + a tip

No medical accuracy is claimed.
"""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Literal, Optional

from carepoint.store.models import WaterIntake

Severity = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class HealthAdvice:
    advice: str
    severity: Severity
    seek_medical_attention: bool


HEALTH_TIPS = (
    "Take breaks every hour when working at a desk to reduce eye strain and improve circulation.",
    "Practice deep breathing exercises to reduce stress and improve focus.",
    "Maintain good posture throughout the day to prevent back pain.",
    "Stay hydrated! Aim to drink water before you feel thirsty.",
    "Get at least 7-8 hours of sleep each night for optimal health.",
    "Take a short walk after meals to aid digestion and maintain blood sugar levels.",
    "Practice mindfulness or meditation to improve mental well-being.",
    "Eat a variety of colorful fruits and vegetables daily.",
    "Stretch regularly to maintain flexibility and prevent muscle tension.",
    "Regular hand washing is one of the best ways to prevent illness.",
)

EMERGENCY_KEYWORDS = (
    "chest pain",
    "difficulty breathing",
    "unconscious",
    "severe bleeding",
    "stroke",
    "heart attack",
    "seizure",
)

EMERGENCY_ADVICE = (
    "URGENT: Your symptoms suggest a potentially serious condition. Please seek "
    "immediate medical attention or call emergency services. While waiting for "
    "help: stay calm, rest, and have someone stay with you if possible."
)

# (keywords, advice) — order matters, first match wins
MODERATE_CONDITIONS = (
    (
        ("fever", "chills", "body ache"),
        "You may have a viral infection. Rest, stay hydrated, and take over-the-counter "
        "fever reducers if needed. Monitor your temperature and seek medical attention "
        "if fever persists over 3 days or exceeds 103°F (39.4°C).",
    ),
    (
        ("headache", "migraine", "vision"),
        "For headaches, rest in a quiet, dark room. Try over-the-counter pain relievers. "
        "If you experience severe headaches with vision changes or persistent migraines, "
        "consult a healthcare provider.",
    ),
    (
        ("cough", "sore throat", "congestion"),
        "You may have an upper respiratory infection. Get plenty of rest, stay hydrated, "
        "use throat lozenges, and consider over-the-counter cold medications. If symptoms "
        "worsen or persist beyond a week, see a doctor.",
    ),
    (
        ("nausea", "vomiting", "diarrhea"),
        "Focus on staying hydrated with small sips of water or electrolyte solutions. "
        "Stick to bland foods like bananas, rice, and toast. If symptoms persist beyond "
        "24 hours or you show signs of dehydration, seek medical care.",
    ),
    (
        ("rash", "itching", "skin"),
        "Avoid scratching and use calamine lotion or hydrocortisone cream. Take an "
        "antihistamine if allergies are suspected. If the rash spreads or is accompanied "
        "by fever, consult a healthcare provider.",
    ),
)

ACTIVITY_MULTIPLIERS = {"low": 1.0, "moderate": 1.2, "high": 1.4}

DEFAULT_WATER_TARGET_ML = 2500


def random_tip(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(HEALTH_TIPS)


def analyze_symptoms(symptoms: str, rng: Optional[random.Random] = None) -> HealthAdvice:
    """Classify free-text symptoms into advice and a severity."""
    text = symptoms.lower()

    if any(keyword in text for keyword in EMERGENCY_KEYWORDS):
        return HealthAdvice(
            advice=EMERGENCY_ADVICE,
            severity="high",
            seek_medical_attention=True,
        )

    for keywords, advice in MODERATE_CONDITIONS:
        if any(keyword in text for keyword in keywords):
            return HealthAdvice(
                advice=f"{advice}\n\n{random_tip(rng)}",
                severity="medium",
                seek_medical_attention=True,
            )

    return HealthAdvice(
        advice=(
            f"Based on your symptoms ({symptoms}), your condition appears mild. Rest, "
            "stay hydrated, and monitor your symptoms. If they persist or worsen after "
            "24-48 hours, consult a healthcare provider.\n\n"
            f"Health Tip: {random_tip(rng)}"
        ),
        severity="low",
        seek_medical_attention=False,
    )


def daily_water_target(weight_kg: float, activity: str = "low") -> int:
    """Daily water target in ml: 30 ml per kg, scaled by activity level."""
    if activity not in ACTIVITY_MULTIPLIERS:
        raise ValueError(f"Unknown activity level: {activity}")
    return round(weight_kg * 30 * ACTIVITY_MULTIPLIERS[activity])


def todays_total(records: Iterable[WaterIntake], now: datetime) -> int:
    today = now.date()
    return sum(r.amount for r in records if r.timestamp.astimezone(now.tzinfo).date() == today)


def water_intake_advice(
    records: Iterable[WaterIntake],
    now: datetime,
    target: int = DEFAULT_WATER_TARGET_ML,
) -> str:
    progress = todays_total(records, now) / target * 100

    if progress < 30:
        return "You're significantly behind on your water intake. Try to drink a glass of water now."
    if progress < 60:
        return "You're about halfway to your daily water goal. Keep drinking regularly!"
    if progress < 90:
        return "Good progress on water intake! A few more glasses to reach your goal."
    return "Excellent! You've met your daily water intake goal."


class RuleBasedAdvisor:
    """Advisor backed by the keyword tables above."""

    async def advise(self, symptoms: str) -> HealthAdvice:
        return analyze_symptoms(symptoms)
