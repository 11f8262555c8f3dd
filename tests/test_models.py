from __future__ import annotations

import math

from northstar_coach.models import (
    BehavioralScores,
    ComBSnapshot,
    PillarMetric,
    create_com_b_input,
    sanitize_pillar_metrics,
    sanitize_scores,
)


def test_sanitize_scores_clamps_and_defaults() -> None:
    scores = sanitize_scores({"motivation": "140", "opportunity": "n/a", "capability": -12})
    assert scores == BehavioralScores(motivation=100.0, opportunity=55.0, capability=0.0)


def test_top_level_scores_win_over_nested_scores() -> None:
    scores = sanitize_scores({"motivation": 20, "scores": {"motivation": 90, "capability": 35}})
    assert scores.motivation == 20.0
    assert scores.capability == 35.0
    assert scores.opportunity == 55.0


def test_behavioral_scores_model_clamps_direct_construction() -> None:
    scores = BehavioralScores.model_validate({"motivation": math.nan, "opportunity": 300})
    assert scores.motivation == 58.0
    assert scores.opportunity == 100.0
    assert scores.capability == 57.0


def test_pillar_metric_fields_are_clamped_and_defaulted() -> None:
    [metric] = sanitize_pillar_metrics(
        [
            {
                "id": "sleep",
                "score": "abc",
                "trend": "up",
                "lastEntryDays": 1000,
                "habitConsistency": "-20",
                "blockers": ["late shifts", "", 7, "  noisy street  "],
                "trendLabel": "  ",
            }
        ]
    )

    assert metric.name == "Sleep"
    assert metric.score == 50.0
    assert metric.trend == 0.0
    assert metric.last_entry_days == 365.0
    assert metric.habit_consistency == 0.0
    assert metric.blockers == ("late shifts", "noisy street")
    assert metric.trend_label is None


def test_non_numeric_optional_fields_become_none() -> None:
    [metric] = sanitize_pillar_metrics(
        [{"id": "diet", "last_entry_days": True, "habit_consistency": float("inf")}]
    )
    assert metric.last_entry_days is None
    assert metric.habit_consistency is None


def test_metrics_without_id_are_dropped_and_duplicates_keep_first() -> None:
    metrics = sanitize_pillar_metrics(
        [
            {"score": 10},
            None,
            "sleep",
            {"id": "", "score": 20},
            {"id": "social", "score": 30},
            {"id": "social", "score": 99},
            {"id": 7, "label": "Custom"},
        ]
    )
    assert [(m.id, m.name, m.score) for m in metrics] == [
        ("social", "Social", 30.0),
        ("7", "Custom", 50.0),
    ]


def test_unknown_pillar_name_falls_back_to_id() -> None:
    [metric] = sanitize_pillar_metrics([{"id": "gardening"}])
    assert metric.name == "gardening"


def test_non_list_metrics_sanitize_to_empty() -> None:
    assert sanitize_pillar_metrics(None) == []
    assert sanitize_pillar_metrics({"id": "sleep"}) == []
    assert sanitize_pillar_metrics("sleep") == []


def test_create_com_b_input_accepts_both_key_styles() -> None:
    camel = create_com_b_input(
        {"pillarMetrics": [{"id": "sleep", "lastEntryDays": 3}], "focusPillarId": "sleep"}
    )
    snake = create_com_b_input(
        {"pillar_metrics": [{"id": "sleep", "last_entry_days": 3}], "focus_pillar_id": "sleep"}
    )
    assert camel == snake
    assert camel.focus_pillar_id == "sleep"
    assert camel.pillar_metrics[0].last_entry_days == 3.0


def test_sanitizing_a_snapshot_is_a_no_op() -> None:
    snapshot = create_com_b_input({"motivation": 12, "pillar_metrics": [{"id": "diet", "score": 61}]})
    assert create_com_b_input(snapshot) is snapshot
    assert create_com_b_input(snapshot.model_dump()) == snapshot


def test_empty_input_builds_default_snapshot() -> None:
    assert create_com_b_input(None) == ComBSnapshot()
    assert create_com_b_input(["not", "a", "mapping"]) == ComBSnapshot()


def test_pillar_metric_dump_uses_camel_case_aliases() -> None:
    metric = PillarMetric(id="sleep", name="Sleep", last_entry_days=4)
    dumped = metric.model_dump(by_alias=True)
    assert dumped["lastEntryDays"] == 4.0
    assert dumped["habitConsistency"] is None
