"""
Test the usage guard for shared reference entities

- Active -> Inactive only with zero dependents
- Inactive -> Active always allowed
"""

import pytest

from models.catalog import RecordStatus
from services.usage_guard import (
    EntityInUseError,
    check_status_transition,
    count_dependents,
    guard_status_change,
    usage_counts,
)

ORGANIZATIONS = [
    {"_id": "org-1", "name": "Iberia CAMO", "type_id": "org-type-1"},
    {"_id": "org-2", "name": "Lufthansa Technik", "type_id": "org-type-2"},
    {"_id": "org-3", "name": "Air Nostrum CAMO", "type_id": "org-type-1"},
    {"_id": "org-4", "name": "Unassigned"},
]

FLEETS = [
    {"_id": "f-1", "custom_factors": [{"factor_id": "FH"}, {"factor_id": "CYC"}, {"factor_id": "FH"}]},
    {"_id": "f-2", "custom_factors": [{"factor_id": "CYC"}]},
    {"_id": "f-3"},
]


def factor_ids(fleet):
    return [cf["factor_id"] for cf in fleet.get("custom_factors", [])]


class TestCountDependents:

    def test_single_foreign_key(self):
        assert count_dependents("org-type-1", ORGANIZATIONS, lambda org: org.get("type_id")) == 2
        assert count_dependents("org-type-3", ORGANIZATIONS, lambda org: org.get("type_id")) == 0

    def test_list_foreign_key_counts_each_dependent_once(self):
        assert count_dependents("FH", FLEETS, factor_ids) == 1
        assert count_dependents("CYC", FLEETS, factor_ids) == 2

    def test_recomputed_from_current_snapshot(self):
        organizations = list(ORGANIZATIONS)
        foreign_key = lambda org: org.get("type_id")
        assert count_dependents("org-type-2", organizations, foreign_key) == 1
        organizations.pop(1)
        assert count_dependents("org-type-2", organizations, foreign_key) == 0

    def test_usage_counts_single_pass(self):
        counts = usage_counts(FLEETS, factor_ids)
        assert counts["FH"] == 1
        assert counts["CYC"] == 2
        assert counts["DAYS"] == 0


class TestStatusTransition:

    def test_unused_entity_can_be_deactivated(self):
        decision = check_status_transition(RecordStatus.ACTIVE, RecordStatus.INACTIVE, 0)
        assert decision.allowed

    def test_used_entity_cannot_be_deactivated(self):
        decision = check_status_transition(RecordStatus.ACTIVE, RecordStatus.INACTIVE, 2)
        assert not decision.allowed
        assert decision.usage_count == 2
        assert "2" in decision.reason

    @pytest.mark.parametrize("usage_count", [0, 1, 50])
    def test_reactivation_always_allowed(self, usage_count):
        assert check_status_transition(RecordStatus.INACTIVE, RecordStatus.ACTIVE, usage_count).allowed

    def test_guard_raises_with_count(self):
        with pytest.raises(EntityInUseError) as exc_info:
            guard_status_change("org-type-1", RecordStatus.ACTIVE, RecordStatus.INACTIVE, 2, "organization(s)")
        assert exc_info.value.usage_count == 2
        assert "2 organization(s)" in str(exc_info.value)
