"""
Tolerance Routes

Tolerances cite ACTIVE source documents and apply to ACTIVE/DRAFT AMPs.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from config import Settings, get_settings
from models.amp import Amp
from models.document import Document
from models.tolerance import Tolerance, ToleranceBase, ToleranceDraft, ToleranceOptionsResponse
from services.record_store import RecordStore, get_record_store
from services.tolerance_editor import ToleranceEditSession
from services.validation import RecordValidationError

router = APIRouter(prefix="/api/tolerances", tags=["tolerances"])
logger = logging.getLogger(__name__)

TOLERANCES = "tolerances"


async def open_session(seed: ToleranceBase, store: RecordStore, settings: Settings) -> ToleranceEditSession:
    return ToleranceEditSession(
        seed,
        documents=[Document.model_validate(doc) for doc in await store.list_items("documents")],
        amps=[Amp.model_validate(doc) for doc in await store.list_items("amps")],
        max_selections=settings.tolerance_max_selections,
        modified_by=settings.default_modified_by,
    )


@router.get("", response_model=List[Tolerance])
async def list_tolerances(store: RecordStore = Depends(get_record_store)):
    return [Tolerance.model_validate(doc) for doc in await store.list_items(TOLERANCES)]


@router.get("/options", response_model=ToleranceOptionsResponse)
async def get_tolerance_options(
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    """Documents and AMPs a tolerance may reference"""
    session = await open_session(ToleranceDraft(), store, settings)
    return ToleranceOptionsResponse(document_ids=session.document_ids, amp_ids=session.amp_ids)


async def save_tolerance(seed: ToleranceBase, edited: ToleranceDraft, store: RecordStore, settings: Settings) -> Tolerance:
    session = await open_session(seed, store, settings)
    session.apply_edits(edited)
    try:
        tolerance = session.resolve()
    except RecordValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Validation failed", "errors": e.errors},
        )
    await store.save_entity(TOLERANCES, tolerance)
    return tolerance


@router.post("", response_model=Tolerance, status_code=status.HTTP_201_CREATED)
async def create_tolerance(
    tolerance: ToleranceDraft,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    if tolerance.id and await store.get_item(TOLERANCES, tolerance.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tolerance {tolerance.id} already exists"
        )
    return await save_tolerance(ToleranceDraft(id=tolerance.id), tolerance, store, settings)


@router.put("/{tolerance_id}", response_model=Tolerance)
async def update_tolerance(
    tolerance_id: str,
    tolerance: ToleranceDraft,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    doc = await store.get_item(TOLERANCES, tolerance_id)
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tolerance not found")
    return await save_tolerance(Tolerance.model_validate(doc), tolerance, store, settings)
