"""
Record Store - MongoDB collaborator for the AMP engine

The engine never talks to MongoDB directly. It reads snapshots through
list_items(), hands fully resolved records to save_entity() (one atomic
replace-or-insert per save) and reads dependents for usage counts.

Also owns the whole-dataset operations: export, import (restore as-is, no id
migration) and factory reset.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from database.mongodb import get_database
from models.dataset import DUMP_COLLECTIONS, AppSettings, DatabaseDump

logger = logging.getLogger(__name__)

SETTINGS_COLLECTION = "settings"
SETTINGS_ID = "app"


class RecordNotFoundError(ValueError):
    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} record {key} not found")


class DatasetImportError(ValueError):
    """Dump rejected before any collection was touched"""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("Invalid dataset dump: " + "; ".join(problems))


# ============================================================
# FACTORY DEFAULTS
# ============================================================

DEFAULT_FACTOR_DEFINITIONS = [
    {"_id": "11111111-1111-4111-a111-111111111111", "code": "FH", "name": "Flight Hours", "description": "", "value_type": "float", "status": "Active"},
    {"_id": "22222222-2222-4222-a222-222222222222", "code": "CYC", "name": "Cycles / Landings", "description": "", "value_type": "integer", "status": "Active"},
    {"_id": "33333333-3333-4333-a333-333333333333", "code": "DAYS", "name": "Calendar Days", "description": "", "value_type": "integer", "status": "Active"},
    {"_id": "44444444-4444-4444-a444-444444444444", "code": "RIN", "name": "RIN Factor", "description": "", "value_type": "integer", "status": "Active"},
]

DEFAULT_OPERATION_TYPES = [
    {"_id": "aaaa-aaaa-aaaa-aaaa", "code": "AOC", "name": "Air Operator Certificate", "description": "Scheduled commercial operations", "status": "Active"},
    {"_id": "bbbb-bbbb-bbbb-bbbb", "code": "SPO", "name": "Specialised Operations", "description": "Specialised operations", "status": "Active"},
]

DEFAULT_ORGANIZATION_TYPES = [
    {"_id": "org-type-1", "code": "CAMO", "name": "Continuing Airworthiness Management Organisation", "description": "CAMO organisation", "status": "Active"},
    {"_id": "org-type-2", "code": "MRO", "name": "Maintenance, Repair & Overhaul", "description": "Maintenance organisation", "status": "Active"},
    {"_id": "org-type-3", "code": "OWNER", "name": "Owner / Lessor", "description": "Owner or lessor", "status": "Active"},
]

FACTORY_DEFAULTS = {
    "factor_definitions": DEFAULT_FACTOR_DEFINITIONS,
    "operation_types": DEFAULT_OPERATION_TYPES,
    "organization_types": DEFAULT_ORGANIZATION_TYPES,
}


def to_document(entity: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """Plain MongoDB document for a model (dates as ISO strings, id as _id)"""
    if isinstance(entity, BaseModel):
        return entity.model_dump(mode="json", by_alias=True)
    return dict(entity)


class RecordStore:
    """Async storage collaborator over one MongoDB database"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    # --------------------------------------------------------
    # READ
    # --------------------------------------------------------

    async def list_items(self, kind: str) -> List[Dict[str, Any]]:
        cursor = self.db[kind].find({})
        return await cursor.to_list(length=None)

    async def get_item(self, kind: str, key: str) -> Optional[Dict[str, Any]]:
        return await self.db[kind].find_one({"_id": key})

    async def require_item(self, kind: str, key: str) -> Dict[str, Any]:
        item = await self.get_item(kind, key)
        if item is None:
            raise RecordNotFoundError(kind, key)
        return item

    async def list_dependents(self, kind: str) -> List[Dict[str, Any]]:
        return await self.list_items(kind)

    # --------------------------------------------------------
    # WRITE
    # --------------------------------------------------------

    async def save_entity(self, kind: str, entity: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
        document = to_document(entity)
        await self.db[kind].replace_one({"_id": document["_id"]}, document, upsert=True)
        logger.info(f"Saved {kind} record {document['_id']}")
        return document

    # --------------------------------------------------------
    # DATASET
    # --------------------------------------------------------

    async def get_settings(self) -> AppSettings:
        doc = await self.db[SETTINGS_COLLECTION].find_one({"_id": SETTINGS_ID})
        if not doc:
            return AppSettings()
        doc.pop("_id", None)
        return AppSettings(**doc)

    async def save_settings(self, settings: AppSettings):
        await self.db[SETTINGS_COLLECTION].replace_one(
            {"_id": SETTINGS_ID},
            {"_id": SETTINGS_ID, **settings.model_dump()},
            upsert=True,
        )

    async def export_dump(self) -> DatabaseDump:
        collections = {}
        for name in DUMP_COLLECTIONS:
            collections[name] = await self.list_items(name)
        dump = DatabaseDump(settings=await self.get_settings(), timestamp=datetime.utcnow(), **collections)
        logger.info(f"Dataset exported: {sum(len(v) for v in collections.values())} records")
        return dump

    def check_dump(self, dump: DatabaseDump):
        """Every record needs a unique _id per collection; raises DatasetImportError"""
        problems = []
        for name in DUMP_COLLECTIONS:
            seen = set()
            for index, record in enumerate(getattr(dump, name) or []):
                key = record.get("_id")
                if key is None:
                    problems.append(f"{name}[{index}] has no _id")
                elif key in seen:
                    problems.append(f"{name}[{index}] duplicates _id {key}")
                seen.add(key)
        if problems:
            logger.warning(f"Dataset import rejected: {len(problems)} problem(s)")
            raise DatasetImportError(problems)

    async def restore_dump(self, dump: DatabaseDump) -> Dict[str, int]:
        """Replace every collection with the dump contents"""
        self.check_dump(dump)
        restored = {}
        for name in DUMP_COLLECTIONS:
            records = getattr(dump, name) or []
            await self.db[name].delete_many({})
            if records:
                await self.db[name].insert_many([dict(record) for record in records])
            restored[name] = len(records)
        await self.save_settings(dump.settings)
        logger.info(f"Dataset restored from dump version {dump.version}: {restored}")
        return restored

    async def reset(self):
        """Factory reset: empty every collection and reseed the default catalogs"""
        for name in DUMP_COLLECTIONS:
            await self.db[name].delete_many({})
        await self.db[SETTINGS_COLLECTION].delete_many({})
        for name, records in FACTORY_DEFAULTS.items():
            await self.db[name].insert_many([dict(record) for record in records])
        logger.warning("Dataset reset to factory defaults")


async def get_record_store(db: AsyncIOMotorDatabase = Depends(get_database)) -> RecordStore:
    return RecordStore(db)
