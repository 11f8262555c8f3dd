"""Stateless coaching service wrapping the scorer and the profile builder.

The service holds injected configuration only; every call works on its own
arguments, so one instance can serve concurrent requests.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .adaptive import (
    AdaptiveProfile,
    PriorityPillar,
    build_adaptive_coach_context,
    build_adaptive_coach_profile,
    get_adaptive_pillar_plan,
)
from .catalog import CoachingTables, PillarInfo, default_tables
from .com_b import ComBRecommendations, compute_recommendations, resolve_limit
from .config import Config
from .models import ComBSnapshot, create_com_b_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoachingEvaluation:
    insights: ComBRecommendations
    profile: AdaptiveProfile | None
    context: dict[str, Any] | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "insights": self.insights.to_dict(),
            "profile": self.profile.to_dict() if self.profile else None,
            "context": self.context,
        }


class CoachingService:
    def __init__(self, tables: CoachingTables | None = None, action_limit: int | None = None):
        self.tables = tables or default_tables()
        self.action_limit = resolve_limit(action_limit, self.tables)

    @classmethod
    def from_config(cls, config: Config, tables: CoachingTables | None = None) -> "CoachingService":
        return cls(tables=tables, action_limit=config.action_limit)

    def recommend(
        self,
        snapshot: ComBSnapshot | Mapping[str, Any] | None,
        *,
        focus_pillar_id: str | None = None,
        limit: int | None = None,
    ) -> ComBRecommendations:
        sanitized = create_com_b_input(snapshot, self.tables)
        if not sanitized.pillar_metrics:
            logger.debug("Snapshot has no usable pillar metrics; returning empty recommendations")
        return compute_recommendations(
            sanitized,
            limit=self.action_limit if limit is None else limit,
            focus_pillar_id=focus_pillar_id,
            tables=self.tables,
        )

    def build_profile(
        self,
        user: Mapping[str, Any] | None,
        insights: ComBRecommendations | Mapping[str, Any] | None,
        accessible_pillars: Sequence[PillarInfo | Mapping[str, Any]] | None = None,
    ) -> AdaptiveProfile | None:
        profile = build_adaptive_coach_profile(
            user, insights, accessible_pillars, tables=self.tables
        )
        if profile is None:
            logger.debug("No coaching signal available; profile omitted")
        return profile

    def evaluate(
        self,
        user: Mapping[str, Any] | None,
        snapshot: ComBSnapshot | Mapping[str, Any] | None,
        accessible_pillars: Sequence[PillarInfo | Mapping[str, Any]] | None = None,
        *,
        focus_pillar_id: str | None = None,
        limit: int | None = None,
    ) -> CoachingEvaluation:
        """Score the snapshot, build the profile and its prompt context in one step."""
        started = time.perf_counter()
        insights = self.recommend(snapshot, focus_pillar_id=focus_pillar_id, limit=limit)
        profile = self.build_profile(user, insights, accessible_pillars)
        context = build_adaptive_coach_context(profile)
        user_id = user.get("id") if isinstance(user, Mapping) else None
        logger.info(
            "Coaching evaluation complete",
            extra={
                "northstar_user_id": user_id,
                "northstar_action_count": len(insights.recommended_actions),
                "northstar_persona": profile.persona if profile else None,
                "northstar_priority_pillars": (
                    [pillar.id for pillar in profile.priority_pillars] if profile else []
                ),
                "northstar_duration_ms": round((time.perf_counter() - started) * 1000, 3),
            },
        )
        return CoachingEvaluation(insights=insights, profile=profile, context=context)

    def pillar_plan(self, pillar_id: str, profile: AdaptiveProfile | None) -> PriorityPillar | None:
        return get_adaptive_pillar_plan(pillar_id, profile, tables=self.tables)
