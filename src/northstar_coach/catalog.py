"""Read-only pillar catalog and coaching lookup tables.

Everything the scorer and the profile builder look up by key lives here:
pillar metadata, micro-action templates, persona descriptors, assessment
domain routing and the severity vocabulary. Tables are immutable and are
passed into the engine entry points; ``default_tables()`` returns the shared
default instance.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Literal

FocusArea = Literal["motivation", "opportunity", "capability"]
Intensity = Literal["Light", "Medium", "Deep"]

# Fixed key order; every tie-break between drivers follows it.
FOCUS_AREAS: tuple[FocusArea, ...] = ("motivation", "opportunity", "capability")

GENERAL_DOMAIN = "general"


@dataclass(frozen=True)
class PillarInfo:
    id: str
    name: str
    long_name: str = ""
    color: str | None = None
    category: str = ""
    order: int = 0
    description: str = ""


@dataclass(frozen=True)
class PillarCatalog:
    """Lookup of pillar id -> display metadata."""

    pillars: tuple[PillarInfo, ...]

    def get(self, pillar_id: str | None) -> PillarInfo | None:
        for pillar in self.pillars:
            if pillar.id == pillar_id:
                return pillar
        return None

    def name_for(self, pillar_id: str) -> str:
        pillar = self.get(pillar_id)
        return pillar.name if pillar is not None else pillar_id

    def color_for(self, pillar_id: str) -> str | None:
        pillar = self.get(pillar_id)
        return pillar.color if pillar is not None else None

    def ids(self) -> tuple[str, ...]:
        return tuple(pillar.id for pillar in self.as_list())

    def as_list(self) -> list[PillarInfo]:
        return sorted(self.pillars, key=lambda pillar: pillar.order)


@dataclass(frozen=True)
class MicroActionTemplate:
    label: str
    description: str
    rationale: str


@dataclass(frozen=True)
class PersonaDescriptor:
    label: str
    tagline: str
    summary: str
    focus_area_label: str


def _freeze(mapping: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CoachingTables:
    """Immutable configuration injected into the scorer and profile builder."""

    pillars: PillarCatalog
    micro_action_templates: Mapping[FocusArea, tuple[MicroActionTemplate, ...]]
    area_messages: Mapping[FocusArea, str]
    personas: Mapping[FocusArea, PersonaDescriptor]
    default_scores: Mapping[FocusArea, float]
    assessment_domains: Mapping[str, str] = field(default_factory=dict)
    domain_labels: Mapping[str, str] = field(default_factory=dict)
    domain_pillars: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    domain_focus_areas: Mapping[str, FocusArea] = field(default_factory=dict)
    severity_weights: Mapping[str, float] = field(default_factory=dict)
    unknown_severity_weight: float = 0.2
    alert_threshold: float = 0.35
    deep_intensity_deficit: float = 0.45
    medium_intensity_deficit: float = 0.25
    constraint_deficit: float = 0.25
    logging_gap_days: float = 4.0
    consistency_floor: float = 60.0
    max_actions: int = 4
    max_constraints: int = 4
    max_micro_actions: int = 3
    max_priority_pillars: int = 3
    max_watchouts: int = 3

    def __post_init__(self) -> None:
        per_area = {
            "micro_action_templates": self.micro_action_templates,
            "area_messages": self.area_messages,
            "personas": self.personas,
            "default_scores": self.default_scores,
        }
        for table_name, table in per_area.items():
            missing = [area for area in FOCUS_AREAS if area not in table]
            if missing:
                raise ValueError(f"{table_name} is missing focus areas: {', '.join(missing)}")
        for area, templates in self.micro_action_templates.items():
            if not templates:
                raise ValueError(f"micro_action_templates[{area!r}] must not be empty")
        for domain, area in self.domain_focus_areas.items():
            if area not in FOCUS_AREAS:
                raise ValueError(f"domain_focus_areas[{domain!r}] is not a focus area: {area!r}")
        if self.max_actions < 1:
            raise ValueError("max_actions must be at least 1")

        for name in (
            "micro_action_templates",
            "area_messages",
            "personas",
            "default_scores",
            "assessment_domains",
            "domain_labels",
            "domain_pillars",
            "domain_focus_areas",
            "severity_weights",
        ):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    def pillars_for_domain(self, domain: str) -> tuple[str, ...]:
        """Pillar ids a screening domain touches; unmapped domains touch every pillar."""
        mapped = self.domain_pillars.get(domain)
        if mapped is None:
            return self.pillars.ids()
        return tuple(mapped)

    def focus_area_for_domain(self, domain: str) -> FocusArea:
        return self.domain_focus_areas.get(domain, "motivation")


DEFAULT_PILLARS: tuple[PillarInfo, ...] = (
    PillarInfo(
        id="sleep",
        name="Sleep",
        long_name="Sleep & Rest",
        color="#6B46C1",
        category="Health",
        order=1,
        description="Consistent sleep schedules and sleep hygiene.",
    ),
    PillarInfo(
        id="diet",
        name="Diet",
        long_name="Nutrition & Diet",
        color="#52B788",
        category="Health",
        order=2,
        description="Balanced nutrition for energy and mental clarity.",
    ),
    PillarInfo(
        id="exercise",
        name="Exercise",
        long_name="Physical Activity",
        color="#FF5733",
        category="Health",
        order=3,
        description="Regular movement for strength, endurance and mood.",
    ),
    PillarInfo(
        id="physical_health",
        name="Physical Health",
        long_name="Physical Health & Wellness",
        color="#FF7F50",
        category="Health",
        order=4,
        description="Preventive care and overall physical wellbeing.",
    ),
    PillarInfo(
        id="mental_health",
        name="Mental Health",
        long_name="Mental Health & Mindfulness",
        color="#4CC9F0",
        category="Wellness",
        order=5,
        description="Emotional resilience, mindfulness and reflection.",
    ),
    PillarInfo(
        id="finances",
        name="Finances",
        long_name="Financial Health",
        color="#2E8B57",
        category="Lifestyle",
        order=6,
        description="Budgeting, saving and investing for stability.",
    ),
    PillarInfo(
        id="social",
        name="Social",
        long_name="Social Connections",
        color="#FFD700",
        category="Relationships",
        order=7,
        description="Meaningful relationships and social connection.",
    ),
    PillarInfo(
        id="spirituality",
        name="Spirituality",
        long_name="Spirituality & Purpose",
        color="#7C3AED",
        category="Purpose",
        order=8,
        description="Meaning, purpose and alignment with personal values.",
    ),
)

_MICRO_ACTION_TEMPLATES: dict[FocusArea, tuple[MicroActionTemplate, ...]] = {
    "motivation": (
        MicroActionTemplate(
            label="Reconnect to your why",
            description=(
                "Write down one sentence on why {pillar} matters for the person "
                "you want to become."
            ),
            rationale="Reaffirming purpose raises intrinsic motivation.",
        ),
        MicroActionTemplate(
            label="Visualize the win",
            description="Spend two minutes imagining how life feels once {pillar} is thriving.",
            rationale="Visualization turns abstract goals into near-term energy.",
        ),
        MicroActionTemplate(
            label="Set a micro-celebration",
            description="Pick a tiny reward for completing the next {pillar} habit today.",
            rationale="Celebrations reinforce the motivational loop.",
        ),
    ),
    "opportunity": (
        MicroActionTemplate(
            label="Design the environment",
            description=(
                "Place a visible cue (sticky note, alarm, laid-out gear) that nudges "
                "your next {pillar} action."
            ),
            rationale="Environmental cues reduce reliance on willpower.",
        ),
        MicroActionTemplate(
            label="Ask for a quick assist",
            description=(
                "Message someone in your circle to hold you accountable for one "
                "{pillar} action this week."
            ),
            rationale="Social opportunity boosts follow-through.",
        ),
        MicroActionTemplate(
            label="Schedule a protected block",
            description="Block 20 distraction-free minutes for {pillar} on your calendar today.",
            rationale="Time-boxing creates practical space for action.",
        ),
    ),
    "capability": (
        MicroActionTemplate(
            label="Shrink the next action",
            description="Break your next {pillar} habit into the smallest possible first step.",
            rationale="Reducing difficulty makes capability feel attainable.",
        ),
        MicroActionTemplate(
            label="Collect a quick win",
            description="Repeat a skill you already know inside {pillar} to rebuild confidence.",
            rationale="Proof of competence lifts perceived capability.",
        ),
        MicroActionTemplate(
            label="Learn a micro-technique",
            description=(
                "Watch or read one short resource that upgrades how you approach {pillar}."
            ),
            rationale="Micro learning compounds skill over time.",
        ),
    ),
}

_AREA_MESSAGES: dict[FocusArea, str] = {
    "motivation": (
        "Energy and excitement dipped. Reconnecting to purpose keeps this pillar "
        "from stalling."
    ),
    "opportunity": (
        "Environment or support gaps are blocking momentum. Create lighter friction to act."
    ),
    "capability": (
        "Confidence in the skills behind this pillar is shaky. Stack simple reps to "
        "rebuild trust."
    ),
}

_PERSONAS: dict[FocusArea, PersonaDescriptor] = {
    "motivation": PersonaDescriptor(
        label="Momentum Rebuilder",
        tagline="Reignite purpose to drive action",
        summary=(
            "Energy dipped recently. Reconnect actions to purpose and celebrate small "
            "wins to restart momentum."
        ),
        focus_area_label="Motivation gap",
    ),
    "opportunity": PersonaDescriptor(
        label="Environment Architect",
        tagline="Remove friction and design better cues",
        summary=(
            "Systems or surroundings are blocking progress. Simplify the path and add "
            "accountability touchpoints."
        ),
        focus_area_label="Opportunity gap",
    ),
    "capability": PersonaDescriptor(
        label="Skill Builder",
        tagline="Stack tiny reps to grow confidence",
        summary=(
            "Confidence in the skills behind your habits is shaky. Break habits into "
            "smaller steps and prove competence through quick wins."
        ),
        focus_area_label="Capability gap",
    ),
}

_ASSESSMENT_DOMAINS: dict[str, str] = {
    "phq9": "mental_health",
    "gad7": "mental_health",
    "adhd": "neurodiversity",
    "aq10": "neurodiversity",
    "sleep_hygiene": "sleep",
    "diet_quality": "nutrition",
    "exercise_readiness": "fitness",
    "social_support": "relationships",
}

_DOMAIN_LABELS: dict[str, str] = {
    "mental_health": "Mental health",
    "neurodiversity": "Neurodiversity",
    "sleep": "Sleep hygiene",
    "nutrition": "Nutrition",
    "fitness": "Fitness",
    "relationships": "Relationships",
    "physical_health": "Physical health",
    GENERAL_DOMAIN: "Wellbeing",
}

# "general" is absent: unmapped domains fan out to every pillar.
_DOMAIN_PILLARS: dict[str, tuple[str, ...]] = {
    "mental_health": ("mental_health", "sleep", "social", "spirituality"),
    "neurodiversity": ("mental_health", "social"),
    "sleep": ("sleep", "mental_health"),
    "nutrition": ("diet", "physical_health"),
    "fitness": ("exercise", "physical_health"),
    "relationships": ("social", "mental_health"),
    "physical_health": ("physical_health", "exercise"),
}

_DOMAIN_FOCUS_AREAS: dict[str, FocusArea] = {
    "mental_health": "motivation",
    "neurodiversity": "opportunity",
    "sleep": "opportunity",
    "nutrition": "capability",
    "fitness": "capability",
    "relationships": "opportunity",
    "physical_health": "capability",
    GENERAL_DOMAIN: "motivation",
}

_SEVERITY_WEIGHTS: dict[str, float] = {
    "none": 0.0,
    "minimal": 0.15,
    "mild": 0.25,
    "moderate": 0.45,
    "moderatelysevere": 0.6,
    "severe": 0.75,
    "extremelysevere": 0.85,
}

DEFAULT_SCORES: dict[FocusArea, float] = {
    "motivation": 58.0,
    "opportunity": 55.0,
    "capability": 57.0,
}


@lru_cache(maxsize=1)
def default_tables() -> CoachingTables:
    """Return the shared default coaching tables."""
    return CoachingTables(
        pillars=PillarCatalog(pillars=DEFAULT_PILLARS),
        micro_action_templates=_MICRO_ACTION_TEMPLATES,
        area_messages=_AREA_MESSAGES,
        personas=_PERSONAS,
        default_scores=DEFAULT_SCORES,
        assessment_domains=_ASSESSMENT_DOMAINS,
        domain_labels=_DOMAIN_LABELS,
        domain_pillars=_DOMAIN_PILLARS,
        domain_focus_areas=_DOMAIN_FOCUS_AREAS,
        severity_weights=_SEVERITY_WEIGHTS,
    )
