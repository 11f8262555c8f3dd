"""Assemble scorer snapshots from user documents, journal entries and habits.

The engine itself never fetches data. These helpers are the caller-side glue
that turns stored documents into a ``ComBSnapshot``. Pass ``today`` explicitly
to get a reproducible snapshot.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from .catalog import FOCUS_AREAS, CoachingTables, PillarInfo, default_tables
from .models import BehavioralScores, ComBSnapshot, PillarMetric, sanitize_pillar_metrics
from .utils import as_float, as_text, clamp, clamp_score, pick, round_half_up

HABIT_STREAK_TARGET_DAYS = 21.0

# Extra per-driver aliases from older behavior profiles.
_LEGACY_PROFILE_KEYS: dict[str, tuple[str, ...]] = {
    "motivation": (),
    "opportunity": ("environment",),
    "capability": ("skill",),
}


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = as_text(value)
    if text is None:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def resolve_behavioral_scores(
    user: Mapping[str, Any] | None,
    tables: CoachingTables | None = None,
) -> BehavioralScores:
    """Pick each driver score from the most authoritative document that has it.

    Order: stored COM-B scores, behavior profile, onboarding profile, the flat
    ``<driver>_score`` field, then legacy behavior-profile aliases.
    """
    tables = tables or default_tables()
    user = _mapping(user)
    stored = _mapping(pick(user, "com_b_scores", "comB"))
    profile = _mapping(pick(user, "behavior_profile", "behaviorProfile"))
    onboarding = _mapping(user.get("onboarding_profile"))

    values: dict[str, float] = {}
    for area in FOCUS_AREAS:
        candidate = pick(stored, area)
        if candidate is None:
            candidate = pick(profile, area)
        if candidate is None:
            candidate = pick(onboarding, area)
        if candidate is None:
            candidate = user.get(f"{area}_score")
        if candidate is None:
            candidate = pick(profile, *_LEGACY_PROFILE_KEYS[area])
        values[area] = clamp_score(candidate, float(tables.default_scores[area]))
    return BehavioralScores(**values)


def latest_entry_by_pillar(entries: Sequence[Mapping[str, Any]] | None) -> dict[str, date]:
    """Most recent entry date per pillar; entries without a pillar or a parsable date are skipped."""
    latest: dict[str, date] = {}
    for entry in entries or ():
        if not isinstance(entry, Mapping):
            continue
        pillar_id = as_text(entry.get("pillar"))
        entry_date = _as_date(entry.get("date"))
        if pillar_id is None or entry_date is None:
            continue
        existing = latest.get(pillar_id)
        if existing is None or entry_date > existing:
            latest[pillar_id] = entry_date
    return latest


def _habit_value(habit: Mapping[str, Any]) -> float:
    """Percent in [0, 100]; non-finite values are skipped like missing ones."""
    for key in ("consistency", "completionRate", "completion_rate", "progress"):
        value = habit.get(key)
        if isinstance(value, str):
            continue
        numeric = as_float(value)
        if numeric is not None:
            return clamp(numeric, 0.0, 100.0)
    streak = as_float(habit.get("streak"))
    if streak:
        return clamp(streak / HABIT_STREAK_TARGET_DAYS * 100, 0.0, 100.0)
    return 0.0


def habit_consistency_by_pillar(habits: Sequence[Mapping[str, Any]] | None) -> dict[str, int]:
    """Average habit consistency per pillar, rounded half-up to a whole percent."""
    totals: dict[str, list[float]] = {}
    for habit in habits or ():
        if not isinstance(habit, Mapping):
            continue
        pillar_id = as_text(pick(habit, "pillar", "pillarId", "pillar_id"))
        if pillar_id is None:
            continue
        totals.setdefault(pillar_id, []).append(_habit_value(habit))
    return {
        pillar_id: round_half_up(sum(values) / len(values))
        for pillar_id, values in totals.items()
    }


def _pillar_identity(pillar: Any, tables: CoachingTables) -> tuple[str, str, float | None] | None:
    if isinstance(pillar, PillarInfo):
        return pillar.id, pillar.name, None
    if isinstance(pillar, Mapping):
        pillar_id = as_text(pillar.get("id"))
        if pillar_id is None:
            return None
        name = as_text(pillar.get("name")) or tables.pillars.name_for(pillar_id)
        return pillar_id, name, as_float(pillar.get("score"))
    return None


def build_pillar_metrics(
    pillars: Sequence[PillarInfo | Mapping[str, Any]] | None = None,
    *,
    pillar_scores: Mapping[str, Any] | None = None,
    entries: Sequence[Mapping[str, Any]] | None = None,
    habits: Sequence[Mapping[str, Any]] | None = None,
    today: date | None = None,
    tables: CoachingTables | None = None,
) -> list[PillarMetric]:
    tables = tables or default_tables()
    today = today or date.today()
    pillars = pillars or tables.pillars.as_list()
    pillar_scores = _mapping(pillar_scores)
    latest = latest_entry_by_pillar(entries)
    consistency = habit_consistency_by_pillar(habits)

    raw_metrics: list[dict[str, Any]] = []
    for pillar in pillars:
        identity = _pillar_identity(pillar, tables)
        if identity is None:
            continue
        pillar_id, name, fallback_score = identity
        scored = pillar_scores.get(pillar_id)
        if not isinstance(scored, Mapping):
            scored = {"score": scored} if scored is not None else {}
        score = as_float(scored.get("score"))
        if score is None:
            score = fallback_score if fallback_score is not None else 0.0

        last_entry_days: float | None = None
        if pillar_id in latest:
            last_entry_days = clamp(float((today - latest[pillar_id]).days), 0.0, 365.0)

        raw_metrics.append(
            {
                "id": pillar_id,
                "name": name,
                "score": score,
                "trend": pick(scored, "trend_score", "trendScore"),
                "trend_label": as_text(pick(scored, "trend_label", "trendLabel"))
                or as_text(scored.get("trend")),
                "last_entry_days": last_entry_days,
                "habit_consistency": consistency.get(pillar_id),
                "blockers": scored.get("blockers"),
                "focus": scored.get("focus"),
            }
        )
    return sanitize_pillar_metrics(raw_metrics, tables)


def build_com_b_snapshot(
    user: Mapping[str, Any] | None,
    pillars: Sequence[PillarInfo | Mapping[str, Any]] | None = None,
    *,
    pillar_scores: Mapping[str, Any] | None = None,
    entries: Sequence[Mapping[str, Any]] | None = None,
    habits: Sequence[Mapping[str, Any]] | None = None,
    today: date | None = None,
    focus_pillar_id: str | None = None,
    tables: CoachingTables | None = None,
) -> ComBSnapshot:
    tables = tables or default_tables()
    return ComBSnapshot(
        scores=resolve_behavioral_scores(user, tables),
        pillar_metrics=tuple(
            build_pillar_metrics(
                pillars,
                pillar_scores=pillar_scores,
                entries=entries,
                habits=habits,
                today=today,
                tables=tables,
            )
        ),
        focus_pillar_id=focus_pillar_id,
    )
