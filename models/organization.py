from pydantic import BaseModel, Field
from typing import Optional

from models.catalog import RecordStatus


class Organization(BaseModel):
    id: str = Field(alias="_id")
    name: str
    type_id: str  # Link to OrganizationType.id
    approval: str = ""  # e.g. ES.MG.123
    approval_link: Optional[str] = None
    notes: str = ""
    link_tlb: Optional[str] = None
    status: RecordStatus = RecordStatus.ACTIVE

    class Config:
        populate_by_name = True
