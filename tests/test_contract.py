from __future__ import annotations

import json

from northstar_coach.catalog import default_tables
from northstar_coach.contract import adaptive_coaching_contract_v1


def test_contract_is_json_serializable_and_stable() -> None:
    contract = adaptive_coaching_contract_v1()
    assert json.loads(json.dumps(contract)) == contract
    assert adaptive_coaching_contract_v1() == contract


def test_contract_mirrors_live_defaults() -> None:
    contract = adaptive_coaching_contract_v1()
    tables = default_tables()

    assert contract["schema_version"] == "adaptive_coaching.v1"
    assert contract["policy_role"] == "advisory_only"
    assert contract["tie_break_order"] == ["motivation", "opportunity", "capability"]
    assert contract["default_scores"] == {"motivation": 58.0, "opportunity": 55.0, "capability": 57.0}
    assert contract["intensity_thresholds"] == {"deep_above": 0.45, "medium_above": 0.25}
    assert contract["alert_threshold"] == tables.alert_threshold
    assert contract["severity_weights"]["moderatelysevere"] == 0.6
    assert contract["caps"] == {
        "recommended_actions": 4,
        "constraints": 4,
        "micro_actions": 3,
        "priority_pillars": 3,
        "watchouts": 3,
    }
    assert contract["priority_weights"]["recommended_action"]["lead_action_bonus"] == 0.05
