from pydantic import BaseModel, Field
from typing import Optional, List

from models.catalog import RecordStatus


class CustomFactor(BaseModel):
    factor_id: str  # Link to FactorDefinition.id
    value: str = ""


class FleetBase(BaseModel):
    name: str
    type_certificate_id: Optional[str] = None  # Governing TC (Certificate.type == TC)
    num_motors: int = 0
    custom_factors: List[CustomFactor] = []
    notes: str = ""
    last_modified_by: str = ""
    last_modified_date: str = ""
    status: RecordStatus = RecordStatus.ACTIVE


class Fleet(FleetBase):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True
