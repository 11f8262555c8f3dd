from __future__ import annotations

import logging
from typing import Any

import pytest

from northstar_coach.config import Config
from northstar_coach.service import CoachingService


def test_service_limit_comes_from_config(coaching_snapshot: dict[str, Any]) -> None:
    service = CoachingService.from_config(Config(action_limit=2))

    assert service.action_limit == 2
    assert len(service.recommend(coaching_snapshot).recommended_actions) == 2
    assert len(service.recommend(coaching_snapshot, limit=3).recommended_actions) == 3


def test_service_clamps_configured_limit() -> None:
    assert CoachingService(action_limit=99).action_limit == 4
    assert CoachingService(action_limit=0).action_limit == 1


def test_evaluate_logs_summary_extras(
    coaching_snapshot: dict[str, Any],
    screened_user: dict[str, Any],
    caplog: pytest.LogCaptureFixture,
) -> None:
    service = CoachingService()
    with caplog.at_level(logging.INFO, logger="northstar_coach.service"):
        evaluation = service.evaluate(screened_user, coaching_snapshot)

    assert evaluation.profile is not None
    assert evaluation.context is not None
    assert evaluation.context["persona"] == evaluation.profile.persona

    [record] = [r for r in caplog.records if r.getMessage() == "Coaching evaluation complete"]
    assert record.northstar_user_id == "user-1"
    assert record.northstar_action_count == 3
    assert record.northstar_persona == "Momentum Rebuilder"
    assert record.northstar_priority_pillars == ["sleep", "mental_health", "social"]
    assert record.northstar_duration_ms >= 0


def test_evaluate_empty_snapshot_still_profiles_deficits(caplog: pytest.LogCaptureFixture) -> None:
    service = CoachingService()
    with caplog.at_level(logging.DEBUG, logger="northstar_coach.service"):
        evaluation = service.evaluate(None, None)

    assert evaluation.insights.recommended_actions == ()
    # empty insights are still insights, so a profile is built from deficits alone
    assert evaluation.profile is not None
    assert evaluation.profile.priority_pillars == ()
    assert evaluation.to_dict()["context"]["priority_pillars"] == []
    assert "no usable pillar metrics" in caplog.text


def test_build_profile_logs_when_nothing_to_show(caplog: pytest.LogCaptureFixture) -> None:
    service = CoachingService()
    with caplog.at_level(logging.DEBUG, logger="northstar_coach.service"):
        assert service.build_profile(None, None) is None
    assert "profile omitted" in caplog.text


def test_pillar_plan_delegates_to_profile(
    coaching_snapshot: dict[str, Any],
    screened_user: dict[str, Any],
) -> None:
    service = CoachingService()
    evaluation = service.evaluate(screened_user, coaching_snapshot)

    plan = service.pillar_plan("spirituality", evaluation.profile)
    assert plan is not None
    assert plan.micro_actions[0].label == "Book a check-in"
    assert service.pillar_plan("finances", evaluation.profile) is None
