"""NorthStar adaptive coaching engine: COM-B scoring and coaching profiles."""

from .adaptive import (
    AdaptiveProfile,
    PriorityPillar,
    build_adaptive_coach_context,
    build_adaptive_coach_profile,
    get_adaptive_pillar_plan,
)
from .assessments import Alert, consolidate_alerts, normalize_assessments
from .catalog import CoachingTables, PillarCatalog, PillarInfo, default_tables
from .com_b import ComBRecommendations, RecommendedAction, compute_recommendations
from .models import AssessmentSignal, BehavioralScores, ComBSnapshot, PillarMetric, create_com_b_input
from .service import CoachingService

__all__ = [
    "AdaptiveProfile",
    "Alert",
    "AssessmentSignal",
    "BehavioralScores",
    "CoachingService",
    "CoachingTables",
    "ComBRecommendations",
    "ComBSnapshot",
    "PillarCatalog",
    "PillarInfo",
    "PillarMetric",
    "PriorityPillar",
    "RecommendedAction",
    "build_adaptive_coach_context",
    "build_adaptive_coach_profile",
    "compute_recommendations",
    "consolidate_alerts",
    "create_com_b_input",
    "default_tables",
    "get_adaptive_pillar_plan",
    "normalize_assessments",
]
