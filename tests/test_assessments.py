from __future__ import annotations

from collections import OrderedDict
from types import MappingProxyType

import pytest

from northstar_coach.assessments import consolidate_alerts, normalize_assessments, severity_weight
from northstar_coach.catalog import default_tables


def test_plain_object_assessment_normalizes_to_signal() -> None:
    [signal] = normalize_assessments({"phq9": {"severity": "moderate"}})

    assert signal.id == "phq9"
    assert signal.domain == "mental_health"
    assert signal.severity_score == 0.45
    assert signal.severity_label == "moderate"
    assert signal.name == "Mental health"
    assert signal.recommendations == ()


def test_array_and_keyed_map_shapes_are_equivalent() -> None:
    payload = {"severity": "Severe", "percentile": 91, "completedAt": "2026-09-30"}
    from_list = normalize_assessments([{"id": "gad7", **payload}])
    from_map = normalize_assessments(OrderedDict([("gad7", payload)]))
    from_proxy = normalize_assessments(MappingProxyType({"gad7": payload}))

    assert from_list == from_map == from_proxy
    assert from_list[0].severity_score == 0.75
    assert from_list[0].percentile == 91.0
    assert from_list[0].completed_at == "2026-09-30"


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("none", 0.0),
        ("Minimal", 0.15),
        ("Moderately Severe", 0.6),
        ("moderately-severe", 0.6),
        ("Extremely severe", 0.85),
        ("borderline", 0.2),
        (None, 0.2),
        (3, 0.2),
    ],
)
def test_severity_weight_lookup(label, expected: float) -> None:
    assert severity_weight(label) == expected


def test_explicit_domain_wins_and_unmapped_defaults_to_general() -> None:
    signals = normalize_assessments(
        {
            "custom_sleep": {"domain": "Sleep", "severity": "mild"},
            "mystery": {"severity": "moderate", "name": "Mystery screen"},
        }
    )
    assert [(s.domain, s.name) for s in signals] == [
        ("sleep", "Sleep hygiene"),
        ("general", "Mystery screen"),
    ]


def test_malformed_payload_fields_degrade() -> None:
    [signal] = normalize_assessments(
        {
            "aq10": {
                "severity": "moderate",
                "percentile": True,
                "recommendations": "not a list",
                "interpretation": 12,
            }
        }
    )
    assert signal.domain == "neurodiversity"
    assert signal.percentile is None
    assert signal.recommendations == ()
    assert signal.interpretation is None


@pytest.mark.parametrize("raw", [None, "phq9", 42, b"bytes"])
def test_unsupported_collections_normalize_to_empty(raw) -> None:
    assert normalize_assessments(raw) == []


def test_non_mapping_payloads_keep_their_key() -> None:
    [signal] = normalize_assessments({"phq9": "moderate"})
    assert signal.id == "phq9"
    assert signal.severity_label is None
    assert signal.severity_score == 0.2


def test_alerts_keep_highest_severity_per_domain() -> None:
    signals = normalize_assessments(
        {
            "phq9": {"severity": "moderate"},
            "gad7": {"severity": "severe", "interpretation": "Frequent worry."},
            "sleep_hygiene": {"severity": "mild"},
        }
    )

    alerts = consolidate_alerts(signals)
    assert [alert.domain for alert in alerts] == ["mental_health", "sleep"]

    mental = alerts[0]
    assert mental.id == "mental_health-gad7"
    assert mental.score == 0.75
    assert mental.label == "Mental health"
    assert mental.interpretation == "Frequent worry."
    assert mental.pillar_ids == ("mental_health", "sleep", "social", "spirituality")
    assert mental.focus_area == "motivation"
    assert alerts[1].focus_area == "opportunity"


def test_alert_ties_keep_first_signal() -> None:
    signals = normalize_assessments(
        [
            {"id": "adhd", "severity": "mild"},
            {"id": "aq10", "severity": "mild"},
        ]
    )
    [alert] = consolidate_alerts(signals)
    assert alert.id == "neurodiversity-adhd"


def test_general_domain_alert_covers_every_pillar() -> None:
    [alert] = consolidate_alerts(normalize_assessments({"wellbeing_check": {}}))
    assert alert.domain == "general"
    assert alert.label == "Wellbeing"
    assert alert.severity_label == "Unknown"
    assert alert.pillar_ids == default_tables().pillars.ids()
    assert len(alert.pillar_ids) == 8
