from pydantic import BaseModel, Field
from typing import Optional, List, Dict

from models.catalog import RecordStatus


class AircraftBase(BaseModel):
    serial_number: str  # Business key (manufacturer S/N), used by AMP scope
    registration: str  # Format: EC-ABC (always UPPERCASE)
    model: str = ""
    owner_id: str = ""  # Link to Organization.id
    camo_id: str = ""  # Link to Organization.id
    fleet_id: str = ""  # Link to Fleet.id
    status: RecordStatus = RecordStatus.ACTIVE
    notes: str = ""
    operation_start_date: Optional[str] = None
    contract_end_date: Optional[str] = None
    operation_type_ids: List[str] = []  # Link to OperationType.id
    counters: Dict[str, float] = {}
    manufacture_date: Optional[str] = None
    last_modified_by: str = ""
    last_modified_date: str = ""


class Aircraft(AircraftBase):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True
