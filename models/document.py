from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from enum import Enum


class DocumentStatus(str, Enum):
    ACTIVE = "Active"
    SUPERSEDED = "Superseded"
    DRAFT = "Draft"


class DocumentBase(BaseModel):
    doc_type: str = ""  # Link to DocumentType.id
    title: str = ""
    revision: str = ""  # Current authoritative revision
    revision_date: Optional[date] = None
    last_web_check_date: Optional[date] = None
    analysis_form_ref: Optional[str] = None  # e.g. RT35A-2024-012
    implementation_deadline: Optional[date] = None  # Drives AMP next review date
    status: DocumentStatus = DocumentStatus.ACTIVE
    superseded_by_doc_id: Optional[str] = None  # Mandatory when SUPERSEDED
    certificate_ids: List[str] = []  # Link to Certificate.id (many-to-many)
    notes: str = ""
    official_link: Optional[str] = None
    internal_link: Optional[str] = None
    last_modified_by: str = ""
    last_modified_date: str = ""


class Document(DocumentBase):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True
