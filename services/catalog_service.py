"""
Catalog Service

Listing, editing and status changes of shared reference entities. Status
changes go through the usage guard with a usage count computed fresh from
the dependent collection on every call.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type

from models.catalog import (
    CatalogEntry,
    CatalogEntryCreate,
    CatalogEntryResponse,
    CatalogEntryUpdate,
    CatalogKind,
    DocumentType,
    FactorDefinition,
    OperationType,
    OrganizationType,
    RecordStatus,
)
from services.record_store import RecordStore
from services.usage_guard import ForeignKey, count_dependents, guard_status_change, usage_counts
from services.validation import ensure_valid, validate_catalog_entry

logger = logging.getLogger(__name__)


@dataclass
class CatalogUsage:
    """Where a catalog entry is referenced from"""
    dependents_kind: str
    foreign_key: Callable[[Dict[str, Any]], ForeignKey]
    dependent_label: str
    guarded: bool = True


CATALOG_MODELS: Dict[CatalogKind, Type[CatalogEntry]] = {
    CatalogKind.ORGANIZATION_TYPES: OrganizationType,
    CatalogKind.DOCUMENT_TYPES: DocumentType,
    CatalogKind.OPERATION_TYPES: OperationType,
    CatalogKind.FACTOR_DEFINITIONS: FactorDefinition,
}

CATALOG_USAGE: Dict[CatalogKind, CatalogUsage] = {
    CatalogKind.ORGANIZATION_TYPES: CatalogUsage(
        "organizations", lambda org: org.get("type_id"), "organization(s)",
    ),
    CatalogKind.DOCUMENT_TYPES: CatalogUsage(
        "documents", lambda doc: doc.get("doc_type"), "document(s)",
    ),
    CatalogKind.FACTOR_DEFINITIONS: CatalogUsage(
        "fleets",
        lambda fleet: [cf.get("factor_id") for cf in fleet.get("custom_factors", [])],
        "fleet(s)",
    ),
    # Reported only: operation types can be switched off while in use
    CatalogKind.OPERATION_TYPES: CatalogUsage(
        "aircrafts", lambda ac: ac.get("operation_type_ids", []), "aircraft", guarded=False,
    ),
}


class CatalogService:

    def __init__(self, store: RecordStore):
        self.store = store

    async def usage_count(self, kind: CatalogKind, key: str) -> int:
        usage = CATALOG_USAGE[kind]
        dependents = await self.store.list_dependents(usage.dependents_kind)
        return count_dependents(key, dependents, usage.foreign_key)

    async def list_entries(self, kind: CatalogKind, include_inactive: bool = False) -> List[CatalogEntryResponse]:
        usage = CATALOG_USAGE[kind]
        model = CATALOG_MODELS[kind]
        entries = [model.model_validate(doc) for doc in await self.store.list_items(kind.value)]
        counts = usage_counts(await self.store.list_dependents(usage.dependents_kind), usage.foreign_key)

        response = []
        for entry in sorted(entries, key=lambda e: e.id):
            if not include_inactive and entry.status != RecordStatus.ACTIVE:
                continue
            count = counts.get(entry.id, 0)
            response.append(
                CatalogEntryResponse(
                    id=entry.id,
                    code=entry.code,
                    name=entry.name,
                    description=entry.description,
                    status=entry.status,
                    usage_count=count,
                    can_deactivate=entry.status == RecordStatus.ACTIVE and (count == 0 or not usage.guarded),
                )
            )
        return response

    async def create_entry(self, kind: CatalogKind, data: CatalogEntryCreate) -> CatalogEntry:
        model = CATALOG_MODELS[kind]
        ensure_valid(validate_catalog_entry(data))
        payload = data.model_dump(exclude_none=True)
        if kind != CatalogKind.FACTOR_DEFINITIONS:
            payload.pop("value_type", None)
        payload["code"] = data.code.strip().upper()
        payload["_id"] = str(uuid.uuid4())
        entry = model.model_validate(payload)
        await self.store.save_entity(kind.value, entry)
        logger.info(f"Created {kind.value} entry {entry.code} ({entry.id})")
        return entry

    async def update_entry(self, kind: CatalogKind, key: str, update: CatalogEntryUpdate) -> CatalogEntry:
        """Edit non-status fields; allowed whatever the usage count"""
        model = CATALOG_MODELS[kind]
        current = model.model_validate(await self.store.require_item(kind.value, key))
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if "value_type" in changes and kind != CatalogKind.FACTOR_DEFINITIONS:
            changes.pop("value_type")
        if "code" in changes:
            changes["code"] = changes["code"].strip().upper()

        updated = current.model_copy(update=changes)
        ensure_valid(validate_catalog_entry(updated))
        await self.store.save_entity(kind.value, updated)
        return updated

    async def change_status(self, kind: CatalogKind, key: str, new_status: RecordStatus) -> CatalogEntry:
        """
        Switch an entry's status.

        Raises EntityInUseError (nothing saved) when deactivating a guarded
        entry that still has dependents.
        """
        model = CATALOG_MODELS[kind]
        usage = CATALOG_USAGE[kind]
        current = model.model_validate(await self.store.require_item(kind.value, key))
        if current.status == new_status:
            return current

        if usage.guarded:
            count = await self.usage_count(kind, key)
            guard_status_change(current.id, current.status, new_status, count, usage.dependent_label)

        updated = current.model_copy(update={"status": new_status})
        await self.store.save_entity(kind.value, updated)
        logger.info(f"{kind.value} {key}: {current.status.value} -> {new_status.value}")
        return updated
