"""Assessment normalization and per-domain alert consolidation."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .catalog import GENERAL_DOMAIN, CoachingTables, FocusArea, default_tables
from .models import AssessmentSignal
from .utils import as_text

# Keyed by assessment id (dict or any Mapping), or a list of payloads carrying their own id.
AssessmentCollection = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]

_NON_LETTERS_RE = re.compile(r"[^a-z]")


@dataclass(frozen=True)
class Alert:
    id: str
    domain: str
    label: str
    severity_label: str
    score: float
    interpretation: str | None
    recommendations: tuple[str, ...]
    pillar_ids: tuple[str, ...]
    focus_area: FocusArea

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "domain": self.domain,
            "label": self.label,
            "severity_label": self.severity_label,
            "score": self.score,
            "interpretation": self.interpretation,
            "recommendations": list(self.recommendations),
            "pillar_ids": list(self.pillar_ids),
            "focus_area": self.focus_area,
        }


def _safe_lower(value: Any) -> str:
    if isinstance(value, str):
        return value.lower()
    return str(value or "").lower()


def severity_key(label: Any) -> str:
    """``"Moderately Severe"`` -> ``"moderatelysevere"``."""
    return _NON_LETTERS_RE.sub("", _safe_lower(label))


def severity_weight(label: Any, tables: CoachingTables | None = None) -> float:
    tables = tables or default_tables()
    return tables.severity_weights.get(severity_key(label), tables.unknown_severity_weight)


def _assessment_entries(raw: Any) -> list[dict[str, Any]]:
    if isinstance(raw, Mapping):
        return [
            {"id": key, **(payload if isinstance(payload, Mapping) else {})}
            for key, payload in raw.items()
        ]
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return [dict(payload) if isinstance(payload, Mapping) else {} for payload in raw]
    return []


def normalize_assessments(raw: Any, tables: CoachingTables | None = None) -> list[AssessmentSignal]:
    """Flatten any accepted assessment collection into canonical signals."""
    tables = tables or default_tables()
    signals: list[AssessmentSignal] = []
    for entry in _assessment_entries(raw):
        assessment_id = entry.get("id")
        assessment_id = str(assessment_id) if assessment_id not in (None, "") else None
        domain = _safe_lower(
            entry.get("domain")
            or tables.assessment_domains.get(assessment_id or "")
            or GENERAL_DOMAIN
        )
        severity_label = entry.get("severity")
        if severity_label is None:
            severity_label = entry.get("severity_label", entry.get("severityLabel"))
        signals.append(
            AssessmentSignal(
                id=assessment_id,
                name=(
                    as_text(entry.get("name"))
                    or tables.domain_labels.get(domain)
                    or assessment_id
                    or domain
                ),
                domain=domain,
                severity_label=severity_label if isinstance(severity_label, str) else None,
                severity_score=severity_weight(severity_label, tables),
                percentile=entry.get("percentile"),
                interpretation=entry.get("interpretation"),
                recommendations=entry.get("recommendations"),
                completed_at=entry.get("completed_at", entry.get("completedAt")),
            )
        )
    return signals


def consolidate_alerts(
    signals: Sequence[AssessmentSignal],
    tables: CoachingTables | None = None,
) -> list[Alert]:
    """One alert per domain, keeping the highest severity (first wins on ties)."""
    tables = tables or default_tables()
    by_domain: dict[str, AssessmentSignal] = {}
    for signal in signals:
        existing = by_domain.get(signal.domain)
        if existing is None or signal.severity_score > existing.severity_score:
            by_domain[signal.domain] = signal

    return [
        Alert(
            id=f"{domain}-{signal.id or domain}",
            domain=domain,
            label=tables.domain_labels.get(domain) or signal.name or domain,
            severity_label=signal.severity_label or "Unknown",
            score=signal.severity_score,
            interpretation=signal.interpretation,
            recommendations=signal.recommendations,
            pillar_ids=tables.pillars_for_domain(domain),
            focus_area=tables.focus_area_for_domain(domain),
        )
        for domain, signal in by_domain.items()
    ]
