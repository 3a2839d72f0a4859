"""
AMP Edit Session

Holds the private draft of one AMP while it is being edited and keeps its
cross-references consistent:

1. Changing the fleet recomputes the eligible aircraft/documents and drops
   every selected key that is no longer eligible (cascade-clear, silent).
2. Selection changes go through the bounded selectors and re-derive
   next_review_date immediately.
3. resolve() validates, recomputes the derived fields one last time and
   returns the plain AMP to persist.

Nothing here performs I/O; snapshots are handed in by the caller.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional, Sequence

from models.aircraft import Aircraft
from models.amp import Amp, AmpBase, AmpDraft, AmpIncludedDocument, RevisionMismatch
from models.document import Document
from models.fleet import Fleet
from services.derived_fields import DerivedFieldCalculator
from services.relational_filter import RelationalFilter, cascade_clear
from services.selection_list import SelectionConfig, SelectionEvent, SelectionList
from services.validation import ensure_valid, validate_amp

logger = logging.getLogger(__name__)

DEFAULT_AIRCRAFT_MAX_SELECTIONS = 100
DEFAULT_DOCUMENT_MAX_SELECTIONS = 1000
DEFAULT_MODIFIED_BY = "user.edit"

# Pinned revision for a document missing from the snapshot
UNKNOWN_REVISION = "N/A"

# Fields managed by the session itself rather than set_field()
MANAGED_FIELDS = {"id", "fleet_id", "included_aircraft_sns", "included_documents"}


@dataclass
class CascadeResult:
    """Selections dropped by a context change"""
    dropped_aircraft_sns: List[str] = field(default_factory=list)
    dropped_document_ids: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.dropped_aircraft_sns or self.dropped_document_ids)


class AmpEditSession:

    def __init__(
        self,
        amp: AmpBase,
        relational_filter: RelationalFilter,
        filter_documents_by_fleet: bool = True,
        aircraft_max_selections: int = DEFAULT_AIRCRAFT_MAX_SELECTIONS,
        document_max_selections: int = DEFAULT_DOCUMENT_MAX_SELECTIONS,
        modified_by: str = DEFAULT_MODIFIED_BY,
    ):
        self.draft = AmpDraft.model_validate(amp.model_dump())
        self.relational_filter = relational_filter
        self.calculator = DerivedFieldCalculator(relational_filter.documents_by_id)
        self.filter_documents_by_fleet = filter_documents_by_fleet
        self.modified_by = modified_by

        self.aircraft_selector: SelectionList[Aircraft] = SelectionList(
            key=lambda ac: ac.serial_number,
            config=SelectionConfig(max_selections=aircraft_max_selections, placeholder="Search by registration..."),
        )
        self.document_selector: SelectionList[Document] = SelectionList(
            key=lambda doc: doc.id,
            config=SelectionConfig(max_selections=document_max_selections, placeholder="Filter manuals, ADs, SBs..."),
        )
        self._refresh_selectors()

    # --------------------------------------------------------
    # ELIGIBILITY
    # --------------------------------------------------------

    @property
    def linked_fleet(self) -> Optional[Fleet]:
        return self.relational_filter.find_fleet(self.draft.fleet_id)

    def eligible_aircraft(self) -> List[Aircraft]:
        return self.relational_filter.eligible_aircraft(self.draft.fleet_id)

    def eligible_documents(self) -> List[Document]:
        return self.relational_filter.eligible_documents(self.draft.fleet_id, self.filter_documents_by_fleet)

    def _refresh_selectors(self):
        self.aircraft_selector.set_items(self.eligible_aircraft())
        self.document_selector.set_items(self.eligible_documents())

    @property
    def selected_aircraft_sns(self) -> List[str]:
        return list(self.draft.included_aircraft_sns)

    @property
    def selected_document_ids(self) -> List[str]:
        return [included.document_id for included in self.draft.included_documents]

    # --------------------------------------------------------
    # GENERAL FIELDS & FLEET LINK
    # --------------------------------------------------------

    def set_field(self, name: str, value: Any):
        if name == "fleet_id":
            self.set_fleet(value)
            return
        if name in MANAGED_FIELDS or name not in AmpDraft.model_fields:
            raise ValueError(f"Field '{name}' cannot be edited directly")
        data = self.draft.model_dump()
        data[name] = value
        self.draft = AmpDraft.model_validate(data)

    def set_fleet(self, fleet_id: Optional[str]) -> CascadeResult:
        fleet_id = fleet_id or None
        if fleet_id == self.draft.fleet_id:
            return CascadeResult()

        previous_fleet_id = self.draft.fleet_id
        self.draft = self.draft.model_copy(update={"fleet_id": fleet_id})
        self._refresh_selectors()
        result = self._prune_selections()
        if result.changed:
            logger.info(
                f"Fleet {previous_fleet_id} -> {fleet_id}: dropped aircraft {result.dropped_aircraft_sns}, "
                f"documents {result.dropped_document_ids}"
            )
        return result

    def set_filter_documents_by_fleet(self, enabled: bool) -> CascadeResult:
        if enabled == self.filter_documents_by_fleet:
            return CascadeResult()
        self.filter_documents_by_fleet = enabled
        self._refresh_selectors()
        if not enabled:
            return CascadeResult()
        return self._prune_selections()

    def _prune_selections(self) -> CascadeResult:
        kept_sns, dropped_sns = cascade_clear(
            self.draft.included_aircraft_sns,
            self.relational_filter.eligible_aircraft_sns(self.draft.fleet_id),
        )
        kept_doc_ids, dropped_doc_ids = cascade_clear(
            self.selected_document_ids,
            self.relational_filter.eligible_document_ids(self.draft.fleet_id, self.filter_documents_by_fleet),
        )
        if dropped_sns or dropped_doc_ids:
            kept = set(kept_doc_ids)
            self.draft = self.draft.model_copy(update={
                "included_aircraft_sns": kept_sns,
                "included_documents": [d for d in self.draft.included_documents if d.document_id in kept],
            })
            self._recompute()
        return CascadeResult(dropped_aircraft_sns=dropped_sns, dropped_document_ids=dropped_doc_ids)

    # --------------------------------------------------------
    # SELECTIONS
    # --------------------------------------------------------

    def _accept_keys(self, keys: Sequence[str], eligible: Sequence[str], current: Sequence[str], max_selections: int) -> List[str]:
        """New keys must be eligible; keys already selected are kept as-is"""
        allowed = set(eligible) | set(current)
        accepted: List[str] = []
        for key in keys:
            if key in allowed and key not in accepted:
                accepted.append(key)
        return accepted[:max_selections]

    def set_aircraft_selection(self, serial_numbers: Sequence[str]):
        accepted = self._accept_keys(
            serial_numbers,
            self.relational_filter.eligible_aircraft_sns(self.draft.fleet_id),
            self.draft.included_aircraft_sns,
            self.aircraft_selector.config.max_selections,
        )
        self.draft = self.draft.model_copy(update={"included_aircraft_sns": accepted})
        self._recompute()

    def set_document_selection(self, document_ids: Sequence[str]):
        accepted = self._accept_keys(
            document_ids,
            self.relational_filter.eligible_document_ids(self.draft.fleet_id, self.filter_documents_by_fleet),
            self.selected_document_ids,
            self.document_selector.config.max_selections,
        )
        existing = {included.document_id: included for included in self.draft.included_documents}
        included_documents = []
        for document_id in accepted:
            if document_id in existing:
                included_documents.append(existing[document_id])
                continue
            doc = self.relational_filter.find_document(document_id)
            included_documents.append(
                AmpIncludedDocument(
                    document_id=document_id,
                    revision_used=doc.revision if doc is not None and doc.revision else UNKNOWN_REVISION,
                )
            )
        self.draft = self.draft.model_copy(update={"included_documents": included_documents})
        self._recompute()

    def activate_aircraft(self, serial_number: str) -> SelectionEvent:
        event = self.aircraft_selector.activate(serial_number, self.selected_aircraft_sns)
        self.set_aircraft_selection(event.selected_keys)
        return event

    def activate_document(self, document_id: str) -> SelectionEvent:
        event = self.document_selector.activate(document_id, self.selected_document_ids)
        self.set_document_selection(event.selected_keys)
        return event

    def handle_aircraft_key(self, key_name: str) -> Optional[SelectionEvent]:
        event = self.aircraft_selector.handle_key(key_name, self.selected_aircraft_sns)
        if event is not None:
            self.set_aircraft_selection(event.selected_keys)
        return event

    def handle_document_key(self, key_name: str) -> Optional[SelectionEvent]:
        event = self.document_selector.handle_key(key_name, self.selected_document_ids)
        if event is not None:
            self.set_document_selection(event.selected_keys)
        return event

    def set_revision_used(self, document_id: str, revision: str) -> bool:
        """Edit the pinned revision of an included document; False if not included"""
        if document_id not in self.selected_document_ids:
            return False
        included_documents = [
            AmpIncludedDocument(document_id=d.document_id, revision_used=revision) if d.document_id == document_id else d
            for d in self.draft.included_documents
        ]
        self.draft = self.draft.model_copy(update={"included_documents": included_documents})
        return True

    # --------------------------------------------------------
    # DERIVED FIELDS
    # --------------------------------------------------------

    def _recompute(self):
        self.draft = self.calculator.recompute(self.draft)

    def revision_mismatches(self) -> List[RevisionMismatch]:
        return self.calculator.mismatches(self.draft)

    # --------------------------------------------------------
    # BULK EDITS & SAVE
    # --------------------------------------------------------

    def apply_edits(self, edited: AmpDraft):
        """
        Replay a client-side draft onto the session: general fields, then the
        fleet link (with cascade-clear), then selections and pinned revisions.
        """
        general = edited.model_dump(exclude=MANAGED_FIELDS)
        data = self.draft.model_dump()
        data.update(general)
        self.draft = AmpDraft.model_validate(data)

        self.set_fleet(edited.fleet_id)
        self.set_aircraft_selection(edited.included_aircraft_sns)
        self.set_document_selection([d.document_id for d in edited.included_documents])
        for included in edited.included_documents:
            self.set_revision_used(included.document_id, included.revision_used)

    def validate(self) -> dict:
        return validate_amp(self.draft)

    def resolve(self, today: Optional[date] = None) -> Amp:
        """Validated, fully derived AMP ready for the storage collaborator"""
        ensure_valid(self.validate())
        self._recompute()

        data = self.draft.model_dump(exclude={"id"})
        data["_id"] = self.draft.id or str(uuid.uuid4())
        data["last_modified_date"] = today or date.today()
        data["last_modified_by"] = self.modified_by
        return Amp.model_validate(data)
