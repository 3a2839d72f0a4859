"""
Catalog Routes - shared reference entities

Deactivating an entry that is still referenced answers 409 with the usage
count; the entry is left untouched.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from models.catalog import (
    CatalogEntry,
    CatalogEntryCreate,
    CatalogEntryResponse,
    CatalogEntryUpdate,
    CatalogKind,
    CatalogStatusUpdate,
)
from services.catalog_service import CatalogService
from services.record_store import RecordNotFoundError, RecordStore, get_record_store
from services.usage_guard import EntityInUseError
from services.validation import RecordValidationError

router = APIRouter(prefix="/api/catalogs", tags=["catalogs"])
logger = logging.getLogger(__name__)


def get_catalog_service(store: RecordStore = Depends(get_record_store)) -> CatalogService:
    return CatalogService(store)


@router.get("/{kind}", response_model=List[CatalogEntryResponse])
async def list_catalog(
    kind: CatalogKind,
    include_inactive: bool = False,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.list_entries(kind, include_inactive=include_inactive)


@router.post("/{kind}", response_model=CatalogEntry, status_code=status.HTTP_201_CREATED)
async def create_catalog_entry(
    kind: CatalogKind,
    data: CatalogEntryCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.create_entry(kind, data)
    except RecordValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Validation failed", "errors": e.errors},
        )


@router.put("/{kind}/{key}", response_model=CatalogEntry)
async def update_catalog_entry(
    kind: CatalogKind,
    key: str,
    update: CatalogEntryUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.update_entry(kind, key, update)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except RecordValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Validation failed", "errors": e.errors},
        )


@router.patch("/{kind}/{key}/status", response_model=CatalogEntry)
async def change_catalog_status(
    kind: CatalogKind,
    key: str,
    update: CatalogStatusUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.change_status(kind, key, update.status)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EntityInUseError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "usage_count": e.usage_count},
        )
