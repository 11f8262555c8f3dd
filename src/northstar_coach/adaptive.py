"""Adaptive coaching profile builder.

Merges screening results (assessments) with the COM-B scorer's recommended
actions into a single coaching profile: a dominant persona, up to three
priority pillars with copy-ready micro-actions, and up to three watchout
alerts. Returns None when there is no signal of any kind.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .assessments import Alert, consolidate_alerts, normalize_assessments
from .catalog import (
    FOCUS_AREAS,
    CoachingTables,
    FocusArea,
    Intensity,
    PersonaDescriptor,
    PillarInfo,
    default_tables,
)
from .com_b import ComBRecommendations, Deficits, MicroAction, RecommendedAction
from .models import AssessmentSignal
from .utils import as_float, as_text, clamp, pick, round_half_up, round_to

CONTEXT_SCHEMA_VERSION = "adaptive_coaching.v1"

# priority = alert * 0.6 + deficit * 0.4 (+ 0.05 for the lead action)
ACTION_ALERT_WEIGHT = 0.6
ACTION_DEFICIT_WEIGHT = 0.4
LEAD_ACTION_BONUS = 0.05
# alert-only priority = alert * 0.7 + deficit * 0.3
ALERT_ONLY_SEVERITY_WEIGHT = 0.7
ALERT_ONLY_DEFICIT_WEIGHT = 0.3
DEEP_ALERT_SCORE = 0.6
ALERT_MICRO_ACTIONS = 2

_INTENSITIES: tuple[Intensity, ...] = ("Light", "Medium", "Deep")

PillarLookup = Callable[[str], tuple[str, str | None]]


@dataclass(frozen=True)
class PriorityPillar:
    id: str
    name: str
    color: str | None
    focus_area: FocusArea
    intensity: Intensity
    com_b_gap: int
    priority_score: float
    summary: str
    micro_actions: tuple[MicroAction, ...]
    alert: Alert | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "focus_area": self.focus_area,
            "intensity": self.intensity,
            "com_b_gap": self.com_b_gap,
            "priority_score": self.priority_score,
            "summary": self.summary,
            "micro_actions": [micro.to_dict() for micro in self.micro_actions],
            "alert": self.alert.to_dict() if self.alert else None,
        }


@dataclass(frozen=True)
class AdaptiveProfile:
    persona: str
    persona_tagline: str
    focus_area: FocusArea
    focus_area_label: str
    summary: str
    com_b_deficits: Deficits
    priority_pillars: tuple[PriorityPillar, ...]
    alerts: tuple[Alert, ...]
    assessments: tuple[AssessmentSignal, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "persona": self.persona,
            "persona_tagline": self.persona_tagline,
            "focus_area": self.focus_area,
            "focus_area_label": self.focus_area_label,
            "summary": self.summary,
            "com_b_deficits": self.com_b_deficits.to_dict(),
            "priority_pillars": [pillar.to_dict() for pillar in self.priority_pillars],
            "alerts": [alert.to_dict() for alert in self.alerts],
            "assessments": [signal.model_dump() for signal in self.assessments],
        }


# --- Input coercion ---


def _coerce_deficits(raw: Any) -> Deficits:
    if isinstance(raw, Deficits):
        return raw
    raw = raw if isinstance(raw, Mapping) else {}
    values: dict[str, float] = {}
    for area in FOCUS_AREAS:
        numeric = as_float(raw.get(area))
        values[area] = 0.0 if numeric is None else clamp(numeric, 0.0, 1.0)
    return Deficits(**values)


def _coerce_micro_action(raw: Any, index: int) -> MicroAction | None:
    if isinstance(raw, MicroAction):
        return raw
    if not isinstance(raw, Mapping):
        return None
    label = as_text(raw.get("label")) or ""
    return MicroAction(
        id=as_text(raw.get("id")) or f"micro-{index}",
        label=label,
        description=as_text(raw.get("description")) or label,
        rationale=as_text(raw.get("rationale")),
    )


def _coerce_action(raw: Any) -> RecommendedAction | None:
    if isinstance(raw, RecommendedAction):
        return raw
    if not isinstance(raw, Mapping):
        return None
    pillar_id = as_text(pick(raw, "pillar_id", "pillarId"))
    if pillar_id is None:
        return None
    focus_area = pick(raw, "focus_area", "focusArea")
    if focus_area not in FOCUS_AREAS:
        focus_area = "motivation"
    intensity = raw.get("intensity")
    if intensity not in _INTENSITIES:
        intensity = "Light"
    micro_raw = pick(raw, "micro_actions", "microActions")
    micro_actions = (
        tuple(
            micro
            for micro in (_coerce_micro_action(item, i) for i, item in enumerate(micro_raw))
            if micro is not None
        )
        if isinstance(micro_raw, (list, tuple))
        else ()
    )
    return RecommendedAction(
        id=as_text(raw.get("id")) or f"{pillar_id}-{focus_area}",
        pillar_id=pillar_id,
        focus_area=focus_area,
        label=as_text(raw.get("label")) or pillar_id,
        description=as_text(raw.get("description")) or "",
        rationale=as_text(raw.get("rationale")) or "",
        intensity=intensity,
        micro_actions=micro_actions,
    )


def _coerce_insights(raw: Any) -> tuple[Deficits, list[RecommendedAction]]:
    if isinstance(raw, ComBRecommendations):
        return raw.deficits, list(raw.recommended_actions)
    if not isinstance(raw, Mapping):
        return _coerce_deficits(None), []
    actions_raw = pick(raw, "recommended_actions", "recommendedActions")
    actions: list[RecommendedAction] = []
    if isinstance(actions_raw, (list, tuple)):
        for item in actions_raw:
            action = _coerce_action(item)
            if action is not None:
                actions.append(action)
    return _coerce_deficits(raw.get("deficits")), actions


def _pillar_lookup(accessible_pillars: Any, tables: CoachingTables) -> PillarLookup:
    """Resolve a pillar id to (name, color): accessible pillars, then the catalog, then the id."""
    accessible: dict[str, tuple[str, str | None]] = {}
    if isinstance(accessible_pillars, (list, tuple)):
        for pillar in accessible_pillars:
            if isinstance(pillar, PillarInfo):
                accessible.setdefault(pillar.id, (pillar.name, pillar.color))
            elif isinstance(pillar, Mapping):
                pillar_id = as_text(pillar.get("id"))
                if pillar_id is None:
                    continue
                name = (
                    as_text(pillar.get("name"))
                    or as_text(pillar.get("label"))
                    or tables.pillars.name_for(pillar_id)
                )
                color = as_text(pillar.get("color")) or tables.pillars.color_for(pillar_id)
                accessible.setdefault(pillar_id, (name, color))

    def lookup(pillar_id: str) -> tuple[str, str | None]:
        if pillar_id in accessible:
            return accessible[pillar_id]
        return tables.pillars.name_for(pillar_id), tables.pillars.color_for(pillar_id)

    return lookup


# --- Profile pieces ---


def pick_persona(
    deficits: Deficits,
    tables: CoachingTables | None = None,
) -> tuple[FocusArea, PersonaDescriptor]:
    """Largest deficit wins; ties resolve motivation, opportunity, capability."""
    tables = tables or default_tables()
    key = deficits.most_deficient()
    return key, tables.personas[key]


def build_priority_summary(action: RecommendedAction, alert: Alert | None, deficit: float) -> str:
    parts: list[str] = []
    if alert is not None:
        severity = alert.severity_label.lower() if alert.severity_label else "elevated"
        parts.append(f"{alert.label} is {severity}")
    if deficit > 0:
        parts.append(f"{round_half_up(deficit * 100)}% {action.focus_area} gap detected")
    if parts:
        return f"{'. '.join(parts)}."
    return f"Keep nurturing {action.focus_area} inside this pillar."


def _alert_intensity(alert: Alert) -> Intensity:
    return "Deep" if alert.score > DEEP_ALERT_SCORE else "Medium"


def _alert_micro_actions(alert: Alert, suffix: str) -> tuple[MicroAction, ...]:
    return tuple(
        MicroAction(id=f"{alert.id}-{suffix}-{index}", label=text, description=text)
        for index, text in enumerate(alert.recommendations[:ALERT_MICRO_ACTIONS])
    )


def build_priority_pillars(
    recommended_actions: Sequence[RecommendedAction],
    deficits: Deficits,
    alerts: Sequence[Alert],
    pillar_lookup: PillarLookup,
    tables: CoachingTables | None = None,
) -> list[PriorityPillar]:
    """Rank candidate pillars from recommended actions first, then from alerts.

    Entries are keyed by pillar id and the first writer wins, so an alert never
    replaces a pillar already covered by a recommended action. The result is
    sorted by priority score (stable) and not truncated.
    """
    tables = tables or default_tables()
    by_id: dict[str, PriorityPillar] = {}

    for index, action in enumerate(recommended_actions):
        if not action.pillar_id or action.pillar_id in by_id:
            continue
        matching_alert = next(
            (alert for alert in alerts if action.pillar_id in alert.pillar_ids), None
        )
        deficit = deficits.get(action.focus_area)
        alert_score = matching_alert.score if matching_alert is not None else 0.0
        priority_score = round_to(
            alert_score * ACTION_ALERT_WEIGHT
            + deficit * ACTION_DEFICIT_WEIGHT
            + (LEAD_ACTION_BONUS if index == 0 else 0.0),
            2,
        )
        name, color = pillar_lookup(action.pillar_id)
        by_id[action.pillar_id] = PriorityPillar(
            id=action.pillar_id,
            name=name,
            color=color,
            focus_area=action.focus_area,
            intensity=action.intensity,
            com_b_gap=round_half_up(deficit * 100),
            priority_score=priority_score,
            summary=build_priority_summary(action, matching_alert, deficit),
            micro_actions=tuple(action.micro_actions[: tables.max_micro_actions]),
            alert=matching_alert,
        )

    for alert in alerts:
        if alert.score < tables.alert_threshold:
            continue
        for pillar_id in alert.pillar_ids:
            if pillar_id in by_id:
                continue
            deficit = deficits.get(alert.focus_area)
            name, color = pillar_lookup(pillar_id)
            by_id[pillar_id] = PriorityPillar(
                id=pillar_id,
                name=name,
                color=color,
                focus_area=alert.focus_area,
                intensity=_alert_intensity(alert),
                com_b_gap=round_half_up(deficit * 100),
                priority_score=round_to(
                    alert.score * ALERT_ONLY_SEVERITY_WEIGHT
                    + deficit * ALERT_ONLY_DEFICIT_WEIGHT,
                    2,
                ),
                summary=(
                    alert.interpretation
                    or f"{alert.label} needs nurturing before momentum slips."
                ),
                micro_actions=_alert_micro_actions(alert, "rec"),
                alert=alert,
            )

    return sorted(by_id.values(), key=lambda pillar: -pillar.priority_score)


def select_watchouts(alerts: Sequence[Alert], tables: CoachingTables | None = None) -> list[Alert]:
    tables = tables or default_tables()
    eligible = [alert for alert in alerts if alert.score >= tables.alert_threshold]
    eligible.sort(key=lambda alert: -alert.score)
    return eligible[: tables.max_watchouts]


# --- Public entry points ---


def build_adaptive_coach_profile(
    user: Mapping[str, Any] | None = None,
    com_b_insights: ComBRecommendations | Mapping[str, Any] | None = None,
    accessible_pillars: Sequence[PillarInfo | Mapping[str, Any]] | None = None,
    *,
    tables: CoachingTables | None = None,
) -> AdaptiveProfile | None:
    """Build the user-facing coaching profile, or None when there is nothing to show."""
    tables = tables or default_tables()
    raw_assessments = user.get("assessments") if isinstance(user, Mapping) else None
    assessments = normalize_assessments(raw_assessments, tables)
    alerts = consolidate_alerts(assessments, tables)
    deficits, recommended_actions = _coerce_insights(com_b_insights)
    persona_key, persona = pick_persona(deficits, tables)

    priority_pillars = build_priority_pillars(
        recommended_actions,
        deficits,
        alerts,
        _pillar_lookup(accessible_pillars, tables),
        tables,
    )[: tables.max_priority_pillars]
    watchouts = select_watchouts(alerts, tables)

    if not priority_pillars and not watchouts and not assessments and com_b_insights is None:
        return None

    summary_parts = [persona.summary]
    if watchouts:
        top = watchouts[0]
        severity = top.severity_label.lower() if top.severity_label else "high"
        summary_parts.append(f"{top.label} scores {severity}. Blend calming rituals into the week.")

    return AdaptiveProfile(
        persona=persona.label,
        persona_tagline=persona.tagline,
        focus_area=persona_key,
        focus_area_label=persona.focus_area_label,
        summary=" ".join(summary_parts).strip(),
        com_b_deficits=deficits,
        priority_pillars=tuple(priority_pillars),
        alerts=tuple(watchouts),
        assessments=tuple(assessments),
    )


def build_adaptive_coach_context(profile: AdaptiveProfile | None) -> dict[str, Any] | None:
    """Reshape a profile for the prompt layer, keeping only label/severity/domain of alerts."""
    if profile is None:
        return None
    return {
        "schema_version": CONTEXT_SCHEMA_VERSION,
        "persona": profile.persona,
        "persona_tagline": profile.persona_tagline,
        "focus_area": profile.focus_area,
        "focus_area_label": profile.focus_area_label,
        "summary": profile.summary,
        "deficits": profile.com_b_deficits.to_dict(),
        "priority_pillars": [
            {
                "id": pillar.id,
                "name": pillar.name,
                "focus_area": pillar.focus_area,
                "intensity": pillar.intensity,
                "summary": pillar.summary,
                "micro_actions": [micro.to_dict() for micro in pillar.micro_actions],
                "alert": (
                    {
                        "label": pillar.alert.label,
                        "severity": pillar.alert.severity_label,
                        "domain": pillar.alert.domain,
                    }
                    if pillar.alert
                    else None
                ),
            }
            for pillar in profile.priority_pillars
        ],
        "watchouts": [
            {
                "label": alert.label,
                "severity": alert.severity_label,
                "description": alert.interpretation,
                "domain": alert.domain,
            }
            for alert in profile.alerts
        ],
    }


def get_adaptive_pillar_plan(
    pillar_id: str | None,
    profile: AdaptiveProfile | None,
    *,
    tables: CoachingTables | None = None,
) -> PriorityPillar | None:
    """Plan for one pillar: its priority entry, else one synthesized from a watchout."""
    if not pillar_id or profile is None:
        return None
    tables = tables or default_tables()
    for pillar in profile.priority_pillars:
        if pillar.id == pillar_id:
            return pillar

    alert = next((alert for alert in profile.alerts if pillar_id in alert.pillar_ids), None)
    if alert is None:
        return None
    deficit = profile.com_b_deficits.get(alert.focus_area)
    severity = alert.severity_label.lower() if alert.severity_label else "elevated"
    return PriorityPillar(
        id=pillar_id,
        name=tables.pillars.name_for(pillar_id),
        color=tables.pillars.color_for(pillar_id),
        focus_area=alert.focus_area,
        intensity=_alert_intensity(alert),
        com_b_gap=round_half_up(deficit * 100),
        priority_score=round_to(
            alert.score * ALERT_ONLY_SEVERITY_WEIGHT + deficit * ALERT_ONLY_DEFICIT_WEIGHT,
            2,
        ),
        summary=alert.interpretation or f"{alert.label} indicates {severity} risk.",
        micro_actions=_alert_micro_actions(alert, "alert"),
        alert=alert,
    )
