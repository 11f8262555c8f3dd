"""COM-B behavioral scorer.

Turns a snapshot of driver scores (capability, opportunity, motivation) and
per-pillar metrics into driver deficits, a risk-ranked pillar list and a small
set of recommended actions. Pure and deterministic: identical input always
yields identical output, and malformed input degrades to defaults instead of
raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .catalog import FOCUS_AREAS, CoachingTables, FocusArea, Intensity, default_tables
from .models import BehavioralScores, ComBSnapshot, PillarMetric, create_com_b_input
from .utils import as_float, format_number, round_half_up, round_to

# Risk weights
LOW_SCORE_WEIGHT = 0.6
HABIT_DRAG_WEIGHT = 0.25
GAP_PENALTY_WEIGHT = 0.5
GAP_PENALTY_CAP_DAYS = 30.0


@dataclass(frozen=True)
class Deficits:
    motivation: float
    opportunity: float
    capability: float

    def get(self, area: str) -> float:
        if area not in FOCUS_AREAS:
            return 0.0
        return float(getattr(self, area))

    def ordered_areas(self) -> list[FocusArea]:
        """Focus areas by deficit, largest first; ties keep FOCUS_AREAS order."""
        return sorted(FOCUS_AREAS, key=lambda area: -self.get(area))

    def most_deficient(self) -> FocusArea:
        return self.ordered_areas()[0]

    def to_dict(self) -> dict[str, float]:
        return {area: self.get(area) for area in FOCUS_AREAS}


@dataclass(frozen=True)
class RankedPillar:
    metric: PillarMetric
    risk: float

    @property
    def id(self) -> str:
        return self.metric.id

    @property
    def name(self) -> str:
        return self.metric.name

    def to_dict(self) -> dict[str, Any]:
        return {**self.metric.model_dump(), "risk": self.risk}


@dataclass(frozen=True)
class MicroAction:
    id: str
    label: str
    description: str
    rationale: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "rationale": self.rationale,
        }


@dataclass(frozen=True)
class RecommendedAction:
    id: str
    pillar_id: str
    focus_area: FocusArea
    label: str
    description: str
    rationale: str
    intensity: Intensity
    micro_actions: tuple[MicroAction, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pillar_id": self.pillar_id,
            "focus_area": self.focus_area,
            "label": self.label,
            "description": self.description,
            "rationale": self.rationale,
            "intensity": self.intensity,
            "micro_actions": [micro.to_dict() for micro in self.micro_actions],
        }


@dataclass(frozen=True)
class Constraint:
    id: str
    label: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "label": self.label, "description": self.description}


@dataclass(frozen=True)
class PrimaryFocus:
    pillar_id: str
    pillar_name: str
    focus_area: FocusArea
    reasoning: str
    micro_actions: tuple[MicroAction, ...]
    constraints: tuple[Constraint, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "pillar_id": self.pillar_id,
            "pillar_name": self.pillar_name,
            "focus_area": self.focus_area,
            "reasoning": self.reasoning,
            "micro_actions": [micro.to_dict() for micro in self.micro_actions],
            "constraints": [constraint.to_dict() for constraint in self.constraints],
        }


@dataclass(frozen=True)
class ComBRecommendations:
    primary_focus: PrimaryFocus | None
    recommended_actions: tuple[RecommendedAction, ...]
    deficits: Deficits
    constraints: tuple[Constraint, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary_focus": self.primary_focus.to_dict() if self.primary_focus else None,
            "recommended_actions": [action.to_dict() for action in self.recommended_actions],
            "deficits": self.deficits.to_dict(),
            "constraints": [constraint.to_dict() for constraint in self.constraints],
        }


def calculate_deficits(scores: BehavioralScores) -> Deficits:
    return Deficits(
        motivation=round_to(1 - scores.motivation / 100, 2),
        opportunity=round_to(1 - scores.opportunity / 100, 2),
        capability=round_to(1 - scores.capability / 100, 2),
    )


def pillar_risk(metric: PillarMetric) -> float:
    low_score_pressure = (100 - metric.score) * LOW_SCORE_WEIGHT
    habit_drag = (
        (100 - metric.habit_consistency) * HABIT_DRAG_WEIGHT
        if metric.habit_consistency is not None
        else 0.0
    )
    gap_penalty = (
        min(GAP_PENALTY_CAP_DAYS, metric.last_entry_days) * GAP_PENALTY_WEIGHT
        if metric.last_entry_days is not None
        else 0.0
    )
    return round_to(low_score_pressure + habit_drag + gap_penalty, 1)


def rank_pillars(metrics: list[PillarMetric] | tuple[PillarMetric, ...]) -> list[RankedPillar]:
    """Highest risk first. ``sorted`` is stable, so equal risks keep input order."""
    ranked = [RankedPillar(metric=metric, risk=pillar_risk(metric)) for metric in metrics]
    return sorted(ranked, key=lambda pillar: -pillar.risk)


def intensity_for(severity: float, tables: CoachingTables) -> Intensity:
    if severity > tables.deep_intensity_deficit:
        return "Deep"
    if severity > tables.medium_intensity_deficit:
        return "Medium"
    return "Light"


def personalize(template: str, pillar_name: str | None) -> str:
    return template.replace("{pillar}", pillar_name or "this pillar")


def select_micro_actions(
    area: FocusArea,
    pillar_name: str | None,
    tables: CoachingTables,
    limit: int | None = None,
) -> tuple[MicroAction, ...]:
    limit = tables.max_micro_actions if limit is None else limit
    templates = tables.micro_action_templates.get(area, ())[:limit]
    return tuple(
        MicroAction(
            id=f"{area}-micro-{index}",
            label=personalize(template.label, pillar_name),
            description=personalize(template.description, pillar_name),
            rationale=template.rationale,
        )
        for index, template in enumerate(templates)
    )


def build_action(
    pillar: RankedPillar,
    area: FocusArea,
    severity: float,
    tables: CoachingTables | None = None,
) -> RecommendedAction:
    tables = tables or default_tables()
    message = tables.area_messages[area]
    return RecommendedAction(
        id=f"{pillar.id}-{area}",
        pillar_id=pillar.id,
        focus_area=area,
        label=f"{pillar.name or pillar.id}: boost {area}",
        description=personalize(message, pillar.name),
        rationale=message,
        intensity=intensity_for(severity, tables),
        micro_actions=select_micro_actions(area, pillar.name, tables),
    )


def build_constraints(
    pillar: RankedPillar,
    deficits: Deficits,
    tables: CoachingTables | None = None,
) -> tuple[Constraint, ...]:
    tables = tables or default_tables()
    metric = pillar.metric
    constraints: list[Constraint] = []
    if metric.last_entry_days is not None and metric.last_entry_days > tables.logging_gap_days:
        constraints.append(
            Constraint(
                id=f"{metric.id}-logging",
                label="Logging gap",
                description=(
                    f"No log in {format_number(metric.last_entry_days)} days for {metric.name}."
                ),
            )
        )
    if metric.habit_consistency is not None and metric.habit_consistency < tables.consistency_floor:
        constraints.append(
            Constraint(
                id=f"{metric.id}-consistency",
                label="Habit consistency",
                description=(
                    f"{metric.name} habits averaged {format_number(metric.habit_consistency)}%."
                ),
            )
        )
    for area in FOCUS_AREAS:
        value = deficits.get(area)
        if value <= tables.constraint_deficit:
            continue
        constraints.append(
            Constraint(
                id=f"{metric.id}-{area}",
                label=f"{area.capitalize()} gap",
                description=f"{round_half_up(value * 100)}% deficit detected in {area}.",
            )
        )
    return tuple(constraints[: tables.max_constraints])


def resolve_limit(limit: Any, tables: CoachingTables | None = None) -> int:
    """Clamp a requested action count into [1, max_actions]; junk means the maximum."""
    tables = tables or default_tables()
    numeric = as_float(limit)
    if numeric is None:
        return tables.max_actions
    return max(1, min(int(numeric), tables.max_actions))


def compute_recommendations(
    snapshot: ComBSnapshot | dict[str, Any] | None = None,
    *,
    limit: Any = None,
    focus_pillar_id: str | None = None,
    tables: CoachingTables | None = None,
) -> ComBRecommendations:
    """Score a snapshot and return the primary focus plus recommended actions.

    With no usable pillar metrics the result is empty but well formed:
    ``primary_focus`` is None, there are no actions or constraints, and the
    deficits are still computed from the driver scores.
    """
    tables = tables or default_tables()
    sanitized = create_com_b_input(snapshot, tables)
    deficits = calculate_deficits(sanitized.scores)

    if not sanitized.pillar_metrics:
        return ComBRecommendations(
            primary_focus=None,
            recommended_actions=(),
            deficits=deficits,
            constraints=(),
        )

    ranked = rank_pillars(sanitized.pillar_metrics)
    deficit_order = deficits.ordered_areas()
    action_limit = resolve_limit(limit, tables)

    actions: list[RecommendedAction] = []
    for index, pillar in enumerate(ranked[:action_limit]):
        area = deficit_order[index % len(deficit_order)]
        actions.append(build_action(pillar, area, deficits.get(area), tables))

    wanted_focus = focus_pillar_id or sanitized.focus_pillar_id
    focus_pillar = next((pillar for pillar in ranked if pillar.id == wanted_focus), ranked[0])
    focus_area = deficits.most_deficient()
    constraints = build_constraints(focus_pillar, deficits, tables)

    primary_focus = PrimaryFocus(
        pillar_id=focus_pillar.id,
        pillar_name=focus_pillar.name,
        focus_area=focus_area,
        reasoning=(
            focus_pillar.metric.trend_label
            or f"Biggest gap right now is {focus_area}. Direct attention to {focus_pillar.name}."
        ),
        micro_actions=actions[0].micro_actions if actions else (),
        constraints=constraints,
    )

    return ComBRecommendations(
        primary_focus=primary_focus,
        recommended_actions=tuple(actions),
        deficits=deficits,
        constraints=constraints,
    )
