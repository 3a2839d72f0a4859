"""
Test catalog listing and guarded status changes

- Deactivation blocked while organizations/documents/fleets reference the entry
- Operation types report usage without blocking
- Non-status edits always allowed
"""

import asyncio

import pytest

from models.catalog import CatalogEntryCreate, CatalogEntryUpdate, CatalogKind, RecordStatus
from models.organization import Organization
from services.catalog_service import CatalogService
from services.record_store import FACTORY_DEFAULTS, RecordNotFoundError, to_document
from services.usage_guard import EntityInUseError
from services.validation import RecordValidationError


@pytest.fixture
def service(fake_db, store):
    for name, records in FACTORY_DEFAULTS.items():
        for record in records:
            fake_db[name].docs[record["_id"]] = dict(record)
    for organization in (
        Organization(_id="org-1", name="Iberia CAMO", type_id="org-type-1", approval="ES.CAMO.001"),
        Organization(_id="org-2", name="Air Nostrum CAMO", type_id="org-type-1"),
    ):
        fake_db["organizations"].docs[organization.id] = to_document(organization)
    fake_db["document_types"].docs["type-amm"] = {
        "_id": "type-amm", "code": "AMM", "name": "Aircraft Maintenance Manual", "description": "", "status": "Active",
    }
    fake_db["factor_definitions"].docs["factor-fh"] = {
        "_id": "factor-fh", "code": "FHX", "name": "Flight Hours (fleet)", "description": "", "value_type": "float", "status": "Active",
    }
    return CatalogService(store)


class TestListing:

    def test_usage_counts_and_can_deactivate(self, service):
        entries = asyncio.run(service.list_entries(CatalogKind.ORGANIZATION_TYPES))
        by_code = {entry.code: entry for entry in entries}
        assert by_code["CAMO"].usage_count == 2
        assert not by_code["CAMO"].can_deactivate
        assert by_code["MRO"].usage_count == 0
        assert by_code["MRO"].can_deactivate

    def test_inactive_entries_hidden_by_default(self, service, fake_db):
        fake_db["organization_types"].docs["org-type-3"]["status"] = "Inactive"
        active = asyncio.run(service.list_entries(CatalogKind.ORGANIZATION_TYPES))
        everything = asyncio.run(service.list_entries(CatalogKind.ORGANIZATION_TYPES, include_inactive=True))
        assert "org-type-3" not in [entry.id for entry in active]
        assert len(everything) == 3

    def test_document_type_usage(self, service):
        assert asyncio.run(service.usage_count(CatalogKind.DOCUMENT_TYPES, "type-amm")) == 2

    def test_factor_usage_from_fleet_custom_factors(self, service):
        assert asyncio.run(service.usage_count(CatalogKind.FACTOR_DEFINITIONS, "factor-fh")) == 1


class TestStatusChange:

    def test_deactivate_in_use_rejected_and_unchanged(self, service, fake_db):
        with pytest.raises(EntityInUseError) as exc_info:
            asyncio.run(service.change_status(CatalogKind.ORGANIZATION_TYPES, "org-type-1", RecordStatus.INACTIVE))
        assert exc_info.value.usage_count == 2
        assert fake_db["organization_types"].docs["org-type-1"]["status"] == "Active"

    def test_deactivate_unused_succeeds(self, service, fake_db):
        entry = asyncio.run(service.change_status(CatalogKind.ORGANIZATION_TYPES, "org-type-2", RecordStatus.INACTIVE))
        assert entry.status == RecordStatus.INACTIVE
        assert fake_db["organization_types"].docs["org-type-2"]["status"] == "Inactive"

    def test_reactivate_in_use_allowed(self, service, fake_db):
        fake_db["organization_types"].docs["org-type-1"]["status"] = "Inactive"
        entry = asyncio.run(service.change_status(CatalogKind.ORGANIZATION_TYPES, "org-type-1", RecordStatus.ACTIVE))
        assert entry.status == RecordStatus.ACTIVE

    def test_deactivation_allowed_after_dependents_removed(self, service, fake_db):
        fake_db["organizations"].docs.clear()
        entry = asyncio.run(service.change_status(CatalogKind.ORGANIZATION_TYPES, "org-type-1", RecordStatus.INACTIVE))
        assert entry.status == RecordStatus.INACTIVE

    def test_operation_types_are_not_guarded(self, service, fake_db):
        fake_db["aircrafts"].docs["ac-1"]["operation_type_ids"] = ["aaaa-aaaa-aaaa-aaaa"]
        entry = asyncio.run(service.change_status(CatalogKind.OPERATION_TYPES, "aaaa-aaaa-aaaa-aaaa", RecordStatus.INACTIVE))
        assert entry.status == RecordStatus.INACTIVE

    def test_unknown_key(self, service):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(service.change_status(CatalogKind.DOCUMENT_TYPES, "nope", RecordStatus.INACTIVE))


class TestEdits:

    def test_create_uppercases_code(self, service, fake_db):
        entry = asyncio.run(service.create_entry(
            CatalogKind.DOCUMENT_TYPES, CatalogEntryCreate(code=" sb ", name="Service Bulletin"),
        ))
        assert entry.code == "SB"
        assert fake_db["document_types"].docs[entry.id]["code"] == "SB"

    def test_create_requires_code_and_name(self, service):
        with pytest.raises(RecordValidationError) as exc_info:
            asyncio.run(service.create_entry(CatalogKind.DOCUMENT_TYPES, CatalogEntryCreate(code="", name=" ")))
        assert set(exc_info.value.errors) == {"code", "name"}

    def test_rename_in_use_entry_allowed(self, service):
        entry = asyncio.run(service.update_entry(
            CatalogKind.ORGANIZATION_TYPES, "org-type-1", CatalogEntryUpdate(name="CAMO (Part-CAMO)"),
        ))
        assert entry.name == "CAMO (Part-CAMO)"
        assert entry.status == RecordStatus.ACTIVE
