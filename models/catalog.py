"""
Catalog Models - shared reference entities

Organization types, document types, operation types and factor definitions
are referenced by id from other records. Their status can only be switched
off while nothing references them (see services/usage_guard.py).
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class RecordStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ValueType(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"


class CatalogKind(str, Enum):
    """Catalog collections exposed under /api/catalogs/{kind}"""
    ORGANIZATION_TYPES = "organization_types"
    DOCUMENT_TYPES = "document_types"
    OPERATION_TYPES = "operation_types"
    FACTOR_DEFINITIONS = "factor_definitions"


class CatalogEntryBase(BaseModel):
    code: str  # Business key, e.g. CAMO, AMM, AOC (always UPPERCASE)
    name: str
    description: str = ""
    status: RecordStatus = RecordStatus.ACTIVE


class CatalogEntry(CatalogEntryBase):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True


class OrganizationType(CatalogEntry):
    pass


class DocumentType(CatalogEntry):
    pass


class OperationType(CatalogEntry):
    pass


class FactorDefinition(CatalogEntry):
    value_type: ValueType = ValueType.FLOAT


class CatalogEntryCreate(CatalogEntryBase):
    value_type: Optional[ValueType] = None  # Factor definitions only


class CatalogEntryUpdate(BaseModel):
    """Non-status edits, always permitted even while in use"""
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    value_type: Optional[ValueType] = None


class CatalogStatusUpdate(BaseModel):
    status: RecordStatus


class CatalogEntryResponse(BaseModel):
    id: str
    code: str
    name: str
    description: str
    status: RecordStatus
    usage_count: int
    can_deactivate: bool
