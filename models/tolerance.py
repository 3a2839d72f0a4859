from pydantic import BaseModel, Field
from typing import Optional, List

from models.catalog import RecordStatus


class ToleranceBase(BaseModel):
    title: str = ""
    description: str = ""
    tolerance: str = ""  # Free text, e.g. "10%", "50 FH", "10% or 300h (whichever first)"
    source_document_ids: List[str] = []  # Link to Document.id
    applicable_amp_ids: List[str] = []  # Link to AMP.id
    status: RecordStatus = RecordStatus.ACTIVE
    notes: str = ""
    last_modified_by: str = ""
    last_modified_date: str = ""


class ToleranceDraft(ToleranceBase):
    id: Optional[str] = None


class Tolerance(ToleranceBase):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True


class ToleranceOptionsResponse(BaseModel):
    """Candidates offered by the tolerance editor selectors"""
    document_ids: List[str]
    amp_ids: List[str]
