"""
AMP Routes - Aircraft Maintenance Program editing

The client keeps the draft; every call replays it into a fresh edit session
built from the latest committed snapshot, so eligibility, cascade-clear and
derived fields are always computed server-side.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import List
import logging

from config import Settings, get_settings
from models.aircraft import Aircraft
from models.amp import (
    Amp,
    AmpBase,
    AmpDraft,
    AmpDraftRequest,
    AmpDraftResponse,
    AmpListItem,
    AmpSaveRequest,
)
from models.certificate import Certificate
from models.document import Document
from models.fleet import Fleet
from services.amp_editor import AmpEditSession
from services.color_registry import ColorRegistry
from services.record_store import RecordStore, get_record_store
from services.relational_filter import RelationalFilter
from services.validation import RecordValidationError

router = APIRouter(prefix="/api/amps", tags=["amps"])
logger = logging.getLogger(__name__)

AMPS = "amps"


def get_amp_colors(request: Request) -> ColorRegistry:
    """Colour registry owned by the app (initialised in server.py)"""
    return request.app.state.amp_colors


async def load_relational_filter(store: RecordStore) -> RelationalFilter:
    return RelationalFilter(
        fleets=[Fleet.model_validate(doc) for doc in await store.list_items("fleets")],
        aircraft=[Aircraft.model_validate(doc) for doc in await store.list_items("aircrafts")],
        certificates=[Certificate.model_validate(doc) for doc in await store.list_items("certificates")],
        documents=[Document.model_validate(doc) for doc in await store.list_items("documents")],
    )


def open_session(
    amp: AmpBase,
    relational_filter: RelationalFilter,
    settings: Settings,
    filter_documents_by_fleet: bool = True,
) -> AmpEditSession:
    """
    Session over `amp` with the document filter applied. The session starts
    unfiltered so that switching the filter on prunes seeded documents that
    are not eligible for the fleet.
    """
    session = AmpEditSession(
        amp,
        relational_filter,
        filter_documents_by_fleet=False,
        aircraft_max_selections=settings.aircraft_max_selections,
        document_max_selections=settings.document_max_selections,
        modified_by=settings.default_modified_by,
    )
    session.set_filter_documents_by_fleet(filter_documents_by_fleet)
    return session


def draft_response(session: AmpEditSession) -> AmpDraftResponse:
    fleet = session.linked_fleet
    return AmpDraftResponse(
        amp=session.draft,
        linked_fleet_name=fleet.name if fleet else None,
        eligible_aircraft_sns=[ac.serial_number for ac in session.eligible_aircraft()],
        eligible_document_ids=[doc.id for doc in session.eligible_documents()],
        revision_mismatches=session.revision_mismatches(),
    )


def validation_failed(error: RecordValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": "Validation failed", "errors": error.errors},
    )


# ============================================================
# READ
# ============================================================

@router.get("", response_model=List[AmpListItem])
async def list_amps(
    store: RecordStore = Depends(get_record_store),
    colors: ColorRegistry = Depends(get_amp_colors),
):
    """List AMPs with their scope sizes and display colour"""
    amps = [Amp.model_validate(doc) for doc in await store.list_items(AMPS)]
    return [
        AmpListItem(
            id=amp.id,
            name=amp.name,
            revision=amp.revision,
            status=amp.status,
            fleet_id=amp.fleet_id,
            next_review_date=amp.next_review_date,
            aircraft_count=len(amp.included_aircraft_sns),
            document_count=len(amp.included_documents),
            color=colors.color_for(amp.id),
        )
        for amp in sorted(amps, key=lambda a: a.name)
    ]


@router.get("/{amp_id}", response_model=Amp)
async def get_amp(amp_id: str, store: RecordStore = Depends(get_record_store)):
    doc = await store.get_item(AMPS, amp_id)
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="AMP not found")
    return Amp.model_validate(doc)


# ============================================================
# DRAFT EDITING
# ============================================================

@router.post("/draft", response_model=AmpDraftResponse)
async def resolve_draft(
    request: AmpDraftRequest,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    """
    Apply one round of edits to a draft: fleet change (with cascade-clear),
    document filter toggle and new selections. Returns the updated draft,
    the eligible sets and revision mismatch flags. Nothing is persisted.
    """
    session = open_session(
        request.amp, await load_relational_filter(store), settings, request.filter_documents_by_fleet,
    )

    if "fleet_id" in request.model_fields_set:
        session.set_fleet(request.fleet_id)
    if request.selected_aircraft_sns is not None:
        session.set_aircraft_selection(request.selected_aircraft_sns)
    if request.selected_document_ids is not None:
        session.set_document_selection(request.selected_document_ids)

    return draft_response(session)


# ============================================================
# SAVE
# ============================================================

async def save_amp(seed: AmpBase, request: AmpSaveRequest, store: RecordStore, settings: Settings) -> Amp:
    session = open_session(seed, await load_relational_filter(store), settings, request.filter_documents_by_fleet)
    session.apply_edits(request.amp)
    try:
        amp = session.resolve()
    except RecordValidationError as e:
        logger.warning(f"AMP save rejected: {e.errors}")
        raise validation_failed(e)

    await store.save_entity(AMPS, amp)
    logger.info(f"AMP {amp.name} rev {amp.revision} saved ({len(amp.included_aircraft_sns)} aircraft, {len(amp.included_documents)} documents)")
    return amp


@router.post("", response_model=Amp, status_code=status.HTTP_201_CREATED)
async def create_amp(
    request: AmpSaveRequest,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    if request.amp.id and await store.get_item(AMPS, request.amp.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"AMP {request.amp.id} already exists"
        )
    return await save_amp(AmpDraft(id=request.amp.id), request, store, settings)


@router.put("/{amp_id}", response_model=Amp)
async def update_amp(
    amp_id: str,
    request: AmpSaveRequest,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    doc = await store.get_item(AMPS, amp_id)
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="AMP not found")

    request.amp.id = amp_id
    return await save_amp(Amp.model_validate(doc), request, store, settings)
