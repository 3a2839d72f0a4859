"""
AMP Models - Aircraft Maintenance Program

An AMP is scoped to one fleet, a subset of that fleet's aircraft (by serial
number) and a set of documents, each pinned to the revision the programme was
built against. next_review_date is derived from the included documents'
implementation deadlines when the programme is saved.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from enum import Enum


class AmpStatus(str, Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    SUPERSEDED = "Superseded"


class AmpIncludedDocument(BaseModel):
    document_id: str  # Link to Document.id
    revision_used: str  # Revision pinned by the AMP, may lag Document.revision


class AmpBase(BaseModel):
    name: str = ""
    fleet_id: Optional[str] = None  # Link to Fleet.id (1-to-1)
    revision: str = ""
    status: AmpStatus = AmpStatus.DRAFT
    revision_date: Optional[date] = None
    description: Optional[str] = None
    notes: str = ""
    last_modified_by: Optional[str] = None
    last_modified_date: Optional[date] = None
    official_link: Optional[str] = None
    internal_link: Optional[str] = None
    included_aircraft_sns: List[str] = []
    included_documents: List[AmpIncludedDocument] = []
    next_review_date: Optional[date] = None


class AmpDraft(AmpBase):
    """Editable AMP as sent by the client (no id yet when creating)"""
    id: Optional[str] = None


class Amp(AmpBase):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True


# ============================================================
# EDIT SESSION REQUESTS / RESPONSES
# ============================================================

class AmpDraftRequest(BaseModel):
    """
    One round of edits applied to an AMP draft.

    fleet_id is only applied when it is explicitly present in the payload,
    so an explicit null means "unlink the fleet".
    """
    amp: AmpDraft
    fleet_id: Optional[str] = None
    selected_aircraft_sns: Optional[List[str]] = None
    selected_document_ids: Optional[List[str]] = None
    filter_documents_by_fleet: bool = True


class RevisionMismatch(BaseModel):
    document_id: str
    revision_used: str
    current_revision: str


class AmpDraftResponse(BaseModel):
    amp: AmpDraft
    linked_fleet_name: Optional[str] = None
    eligible_aircraft_sns: List[str]
    eligible_document_ids: List[str]
    revision_mismatches: List[RevisionMismatch]


class AmpListItem(BaseModel):
    id: str
    name: str
    revision: str
    status: AmpStatus
    fleet_id: Optional[str] = None
    next_review_date: Optional[date] = None
    aircraft_count: int
    document_count: int
    color: str


class AmpSaveRequest(BaseModel):
    amp: AmpDraft
    filter_documents_by_fleet: bool = True
