from __future__ import annotations

import dataclasses

import pytest

from northstar_coach.catalog import (
    DEFAULT_PILLARS,
    FOCUS_AREAS,
    GENERAL_DOMAIN,
    CoachingTables,
    PillarCatalog,
    default_tables,
)


def test_default_tables_are_shared() -> None:
    assert default_tables() is default_tables()


def test_default_tables_cover_every_focus_area() -> None:
    tables = default_tables()
    for area in FOCUS_AREAS:
        assert len(tables.micro_action_templates[area]) >= tables.max_micro_actions
        assert tables.area_messages[area]
        assert tables.personas[area].label
        assert 0 <= tables.default_scores[area] <= 100


def test_tables_are_read_only() -> None:
    tables = default_tables()
    with pytest.raises(TypeError):
        tables.severity_weights["mild"] = 1.0  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        tables.alert_threshold = 0.9  # type: ignore[misc]


def test_missing_focus_area_is_rejected() -> None:
    tables = default_tables()
    with pytest.raises(ValueError, match="personas is missing focus areas: capability"):
        dataclasses.replace(
            tables,
            personas={k: v for k, v in tables.personas.items() if k != "capability"},
        )


def test_empty_template_list_is_rejected() -> None:
    tables = default_tables()
    with pytest.raises(ValueError, match="must not be empty"):
        dataclasses.replace(
            tables,
            micro_action_templates={**tables.micro_action_templates, "opportunity": ()},
        )


def test_unknown_domain_focus_area_is_rejected() -> None:
    tables = default_tables()
    with pytest.raises(ValueError, match="is not a focus area"):
        dataclasses.replace(tables, domain_focus_areas={"sleep": "willpower"})


def test_general_domain_fans_out_to_every_pillar() -> None:
    tables = default_tables()
    assert tables.pillars_for_domain(GENERAL_DOMAIN) == tables.pillars.ids()
    assert tables.pillars_for_domain("sleep") == ("sleep", "mental_health")
    assert tables.focus_area_for_domain("unheard_of") == "motivation"


def test_pillar_catalog_lookup_and_ordering() -> None:
    catalog = PillarCatalog(pillars=tuple(reversed(DEFAULT_PILLARS)))

    assert catalog.ids()[0] == "sleep"
    assert catalog.ids() == default_tables().pillars.ids()
    assert catalog.name_for("mental_health") == "Mental Health"
    assert catalog.name_for("gardening") == "gardening"
    assert catalog.color_for("gardening") is None
    assert catalog.get("finances") is not None
    assert catalog.get(None) is None
    assert catalog.color_for("sleep") == "#6B46C1"


def test_custom_tables_can_be_built_from_defaults() -> None:
    tables = dataclasses.replace(default_tables(), max_actions=2, alert_threshold=0.5)
    assert isinstance(tables, CoachingTables)
    assert tables.max_actions == 2
    assert tables.personas == default_tables().personas
