"""
Dataset Dump Model

Full export of every collection. Records are carried as raw documents:
the dump is restored as-is, no legacy id migration is attempted.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List
from datetime import datetime

DUMP_VERSION = "1.0.0"


class AppSettings(BaseModel):
    server_url: str = "https://demo.aerocontrol.local"
    organization_name: str = "AeroControl Systems Demo"


class DatabaseDump(BaseModel):
    settings: AppSettings = Field(default_factory=AppSettings)
    fleets: List[Dict[str, Any]] = []
    aircrafts: List[Dict[str, Any]] = []
    organizations: List[Dict[str, Any]] = []
    organization_types: List[Dict[str, Any]] = []
    operation_types: List[Dict[str, Any]] = []
    factor_definitions: List[Dict[str, Any]] = []
    certificates: List[Dict[str, Any]] = []
    documents: List[Dict[str, Any]] = []
    document_types: List[Dict[str, Any]] = []
    amps: List[Dict[str, Any]] = []
    tolerances: List[Dict[str, Any]] = []
    work_orders: List[Dict[str, Any]] = []
    flight_logs: List[Dict[str, Any]] = []
    inspections: List[Dict[str, Any]] = []
    components: List[Dict[str, Any]] = []
    component_assets: List[Dict[str, Any]] = []
    system_alerts: List[Dict[str, Any]] = []
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    version: str = DUMP_VERSION


# Collections carried by a dump, in restore order
DUMP_COLLECTIONS = [
    "fleets",
    "aircrafts",
    "organizations",
    "organization_types",
    "operation_types",
    "factor_definitions",
    "certificates",
    "documents",
    "document_types",
    "amps",
    "tolerances",
    "work_orders",
    "flight_logs",
    "inspections",
    "components",
    "component_assets",
    "system_alerts",
]


class DatasetImportResponse(BaseModel):
    restored: Dict[str, int]
    version: str
