"""Boundary models for COM-B snapshots and assessment signals.

Raw snapshots arrive loosely shaped (camelCase from the app, snake_case from
Python callers, numbers as strings, missing or out-of-range values). The models
here coerce every field into range instead of rejecting the document, so the
scorer and the profile builder only ever see well-formed values.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .catalog import DEFAULT_SCORES, FOCUS_AREAS, CoachingTables, default_tables
from .utils import as_float, as_text, clamp, clamp_score, pick

DEFAULT_PILLAR_SCORE = 50.0
MAX_LAST_ENTRY_DAYS = 365.0


class _EngineModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


def _text_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(text for text in (as_text(item) for item in value) if text is not None)


class BehavioralScores(_EngineModel):
    """The three COM-B driver scores, each in [0, 100]."""

    motivation: float = DEFAULT_SCORES["motivation"]
    opportunity: float = DEFAULT_SCORES["opportunity"]
    capability: float = DEFAULT_SCORES["capability"]

    @field_validator("motivation", "opportunity", "capability", mode="before")
    @classmethod
    def _clamp_driver(cls, v: Any, info: ValidationInfo) -> float:
        return clamp_score(v, DEFAULT_SCORES[info.field_name])

    def get(self, area: str) -> float:
        return float(getattr(self, area))


class PillarMetric(_EngineModel):
    id: str
    name: str
    score: float = DEFAULT_PILLAR_SCORE
    trend: float = 0.0
    trend_label: str | None = None
    last_entry_days: float | None = None
    habit_consistency: float | None = None
    blockers: tuple[str, ...] = ()
    focus: str | None = None

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, v: Any) -> float:
        return clamp_score(v, DEFAULT_PILLAR_SCORE)

    @field_validator("trend", mode="before")
    @classmethod
    def _coerce_trend(cls, v: Any) -> float:
        numeric = as_float(v)
        return 0.0 if numeric is None else numeric

    @field_validator("last_entry_days", mode="before")
    @classmethod
    def _clamp_last_entry_days(cls, v: Any) -> float | None:
        numeric = as_float(v)
        return None if numeric is None else clamp(numeric, 0.0, MAX_LAST_ENTRY_DAYS)

    @field_validator("habit_consistency", mode="before")
    @classmethod
    def _clamp_habit_consistency(cls, v: Any) -> float | None:
        numeric = as_float(v)
        return None if numeric is None else clamp(numeric, 0.0, 100.0)

    @field_validator("trend_label", "focus", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> str | None:
        return as_text(v)

    @field_validator("blockers", mode="before")
    @classmethod
    def _blocker_list(cls, v: Any) -> tuple[str, ...]:
        return _text_tuple(v)


class ComBSnapshot(_EngineModel):
    """Fully defaulted scorer input."""

    scores: BehavioralScores = BehavioralScores()
    pillar_metrics: tuple[PillarMetric, ...] = ()
    focus_pillar_id: str | None = None


class AssessmentSignal(_EngineModel):
    id: str | None = None
    name: str
    domain: str
    severity_label: str | None = None
    severity_score: float
    percentile: float | None = None
    interpretation: str | None = None
    recommendations: tuple[str, ...] = ()
    completed_at: str | None = None

    @field_validator("severity_score", mode="before")
    @classmethod
    def _clamp_severity(cls, v: Any) -> float:
        numeric = as_float(v)
        return 0.0 if numeric is None else clamp(numeric, 0.0, 1.0)

    @field_validator("percentile", mode="before")
    @classmethod
    def _percentile(cls, v: Any) -> float | None:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        return as_float(v)

    @field_validator("severity_label", "interpretation", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> str | None:
        return as_text(v)

    @field_validator("recommendations", mode="before")
    @classmethod
    def _recommendation_list(cls, v: Any) -> tuple[str, ...]:
        return _text_tuple(v)

    @field_validator("completed_at", mode="before")
    @classmethod
    def _completed_at(cls, v: Any) -> str | None:
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        return as_text(v)


def _pillar_id(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    return as_text(value)


def sanitize_scores(raw: Mapping[str, Any] | None, tables: CoachingTables | None = None) -> BehavioralScores:
    """Resolve driver scores from top-level keys first, then a nested ``scores`` mapping."""
    tables = tables or default_tables()
    raw = raw if isinstance(raw, Mapping) else {}
    nested = raw.get("scores")
    if isinstance(nested, BehavioralScores):
        nested = nested.model_dump()
    if not isinstance(nested, Mapping):
        nested = {}

    values: dict[str, float] = {}
    for area in FOCUS_AREAS:
        candidate = raw.get(area)
        if candidate is None:
            candidate = nested.get(area)
        values[area] = clamp_score(candidate, float(tables.default_scores[area]))
    return BehavioralScores(**values)


def sanitize_pillar_metrics(raw: Any, tables: CoachingTables | None = None) -> list[PillarMetric]:
    """Sanitize each metric independently; entries without an id are dropped.

    Duplicate ids keep the first occurrence.
    """
    tables = tables or default_tables()
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        return []

    metrics: list[PillarMetric] = []
    seen: set[str] = set()
    for entry in raw:
        if isinstance(entry, PillarMetric):
            metric = entry
        elif isinstance(entry, Mapping):
            pillar_id = _pillar_id(entry.get("id"))
            if pillar_id is None:
                continue
            name = (
                as_text(entry.get("name"))
                or as_text(entry.get("label"))
                or tables.pillars.name_for(pillar_id)
            )
            metric = PillarMetric.model_validate({**entry, "id": pillar_id, "name": name})
        else:
            continue
        if metric.id in seen:
            continue
        seen.add(metric.id)
        metrics.append(metric)
    return metrics


def create_com_b_input(raw: Any = None, tables: CoachingTables | None = None) -> ComBSnapshot:
    """Build the fully defaulted snapshot every scoring step works from."""
    if isinstance(raw, ComBSnapshot):
        return raw
    tables = tables or default_tables()
    raw = raw if isinstance(raw, Mapping) else {}
    return ComBSnapshot(
        scores=sanitize_scores(raw, tables),
        pillar_metrics=tuple(
            sanitize_pillar_metrics(pick(raw, "pillar_metrics", "pillarMetrics"), tables)
        ),
        focus_pillar_id=_pillar_id(pick(raw, "focus_pillar_id", "focusPillarId")),
    )
