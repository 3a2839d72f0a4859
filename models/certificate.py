from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from models.catalog import RecordStatus


class CertificateType(str, Enum):
    TC = "TC"  # Type Certificate
    STC = "STC"  # Supplemental Type Certificate


class CertificateBase(BaseModel):
    type: CertificateType = CertificateType.TC
    holder: str = ""  # e.g. Airbus S.A.S.
    tcds: str = ""  # e.g. EASA.A.064
    applicable_fleet_ids: List[str] = []  # Link to Fleet.id
    revision: str = ""
    revision_date: Optional[str] = None
    last_web_check_date: Optional[str] = None
    notes: str = ""
    official_link: Optional[str] = None
    internal_link: Optional[str] = None
    last_modified_by: str = ""
    last_modified_date: str = ""
    status: RecordStatus = RecordStatus.ACTIVE


class Certificate(CertificateBase):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True
