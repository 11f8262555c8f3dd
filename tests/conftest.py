from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def coaching_snapshot() -> dict[str, Any]:
    """Motivation gap 0.7, opportunity 0.4, capability 0.2 across three pillars."""
    return {
        "motivation": 30,
        "opportunity": 60,
        "capability": 80,
        "pillarMetrics": [
            {"id": "sleep", "score": 30},
            {"id": "diet", "score": 50},
            {"id": "finances", "score": 70},
        ],
    }


@pytest.fixture
def screened_user() -> dict[str, Any]:
    return {
        "id": "user-1",
        "assessments": {
            "phq9": {
                "severity": "moderately severe",
                "interpretation": "Low mood most days.",
                "recommendations": ["Book a check-in", "Walk outside", "Call a friend"],
                "completedAt": "2026-10-01T09:30:00Z",
            },
            "sleep_hygiene": {"severity": "mild"},
        },
    }
