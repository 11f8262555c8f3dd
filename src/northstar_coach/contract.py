"""Adaptive coaching engine contract (pure, deterministic, advisory-only)."""

from __future__ import annotations

from typing import Any

from .adaptive import (
    ACTION_ALERT_WEIGHT,
    ACTION_DEFICIT_WEIGHT,
    ALERT_ONLY_DEFICIT_WEIGHT,
    ALERT_ONLY_SEVERITY_WEIGHT,
    CONTEXT_SCHEMA_VERSION,
    DEEP_ALERT_SCORE,
    LEAD_ACTION_BONUS,
)
from .catalog import FOCUS_AREAS, default_tables
from .com_b import GAP_PENALTY_CAP_DAYS, GAP_PENALTY_WEIGHT, HABIT_DRAG_WEIGHT, LOW_SCORE_WEIGHT


def adaptive_coaching_contract_v1() -> dict[str, Any]:
    """Return the machine-readable contract of the coaching engine.

    Values are read from the live defaults so the contract cannot drift from
    the scorer and the profile builder.
    """
    tables = default_tables()
    return {
        "schema_version": CONTEXT_SCHEMA_VERSION,
        "policy_role": "advisory_only",
        "focus_areas": list(FOCUS_AREAS),
        "tie_break_order": list(FOCUS_AREAS),
        "default_scores": dict(tables.default_scores),
        "risk_weights": {
            "low_score": LOW_SCORE_WEIGHT,
            "habit_drag": HABIT_DRAG_WEIGHT,
            "logging_gap": GAP_PENALTY_WEIGHT,
            "logging_gap_cap_days": GAP_PENALTY_CAP_DAYS,
        },
        "intensity_thresholds": {
            "deep_above": tables.deep_intensity_deficit,
            "medium_above": tables.medium_intensity_deficit,
        },
        "priority_weights": {
            "recommended_action": {
                "alert": ACTION_ALERT_WEIGHT,
                "deficit": ACTION_DEFICIT_WEIGHT,
                "lead_action_bonus": LEAD_ACTION_BONUS,
            },
            "alert_only": {
                "alert": ALERT_ONLY_SEVERITY_WEIGHT,
                "deficit": ALERT_ONLY_DEFICIT_WEIGHT,
                "deep_above": DEEP_ALERT_SCORE,
            },
        },
        "severity_weights": dict(tables.severity_weights),
        "unknown_severity_weight": tables.unknown_severity_weight,
        "alert_threshold": tables.alert_threshold,
        "caps": {
            "recommended_actions": tables.max_actions,
            "constraints": tables.max_constraints,
            "micro_actions": tables.max_micro_actions,
            "priority_pillars": tables.max_priority_pillars,
            "watchouts": tables.max_watchouts,
        },
        "sentinels": {
            "no_pillar_metrics": "empty_recommendations",
            "no_signal": "null_profile",
        },
        "non_goals": [
            "No natural-language generation inside the engine.",
            "No persistence, caching or network I/O.",
        ],
    }
