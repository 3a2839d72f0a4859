"""
Dataset Routes - whole-database export, import and factory reset
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from models.dataset import DatabaseDump, DatasetImportResponse
from services.record_store import DatasetImportError, RecordStore, get_record_store

router = APIRouter(prefix="/api/dataset", tags=["dataset"])
logger = logging.getLogger(__name__)


@router.get("/export", response_model=DatabaseDump)
async def export_dataset(store: RecordStore = Depends(get_record_store)):
    return await store.export_dump()


@router.post("/import", response_model=DatasetImportResponse)
async def import_dataset(dump: DatabaseDump, store: RecordStore = Depends(get_record_store)):
    """Replace the whole dataset with the dump, records restored as-is"""
    try:
        restored = await store.restore_dump(dump)
    except DatasetImportError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Invalid dataset dump", "problems": e.problems},
        )
    return DatasetImportResponse(restored=restored, version=dump.version)


@router.post("/reset")
async def reset_dataset(store: RecordStore = Depends(get_record_store)):
    await store.reset()
    return {"status": "reset"}
