"""
Tolerance Edit Session

A tolerance cites its source documents (ACTIVE documents only) and lists the
AMPs it applies to (ACTIVE or DRAFT programmes). Both lists are bounded
multi-selections.
"""

import logging
import uuid
from datetime import date
from typing import Any, List, Optional, Sequence

from models.amp import Amp, AmpStatus
from models.document import Document, DocumentStatus
from models.tolerance import Tolerance, ToleranceBase, ToleranceDraft
from services.selection_list import SelectionConfig, SelectionEvent, SelectionList
from services.validation import ensure_valid, validate_tolerance

logger = logging.getLogger(__name__)

DEFAULT_MAX_SELECTIONS = 1000
SELECTABLE_AMP_STATUSES = {AmpStatus.ACTIVE, AmpStatus.DRAFT}


class ToleranceEditSession:

    def __init__(
        self,
        tolerance: ToleranceBase,
        documents: Sequence[Document],
        amps: Sequence[Amp],
        max_selections: int = DEFAULT_MAX_SELECTIONS,
        modified_by: str = "user.edit",
    ):
        self.draft = ToleranceDraft.model_validate(tolerance.model_dump())
        self.modified_by = modified_by
        self.documents = [doc for doc in documents if doc.status == DocumentStatus.ACTIVE]
        self.amps = [amp for amp in amps if amp.status in SELECTABLE_AMP_STATUSES]

        self.document_selector: SelectionList[Document] = SelectionList(
            key=lambda doc: doc.id,
            config=SelectionConfig(max_selections=max_selections, placeholder="Search source documents..."),
            items=self.documents,
        )
        self.amp_selector: SelectionList[Amp] = SelectionList(
            key=lambda amp: amp.id,
            config=SelectionConfig(max_selections=max_selections, placeholder="Search AMPs..."),
            items=self.amps,
        )

    @property
    def document_ids(self) -> List[str]:
        return [doc.id for doc in self.documents]

    @property
    def amp_ids(self) -> List[str]:
        return [amp.id for amp in self.amps]

    def selected_documents(self) -> List[Document]:
        selected = set(self.draft.source_document_ids)
        return [doc for doc in self.documents if doc.id in selected]

    def set_field(self, name: str, value: Any):
        if name in {"id", "source_document_ids", "applicable_amp_ids"} or name not in ToleranceDraft.model_fields:
            raise ValueError(f"Field '{name}' cannot be edited directly")
        data = self.draft.model_dump()
        data[name] = value
        self.draft = ToleranceDraft.model_validate(data)

    def _accept(self, keys: Sequence[str], candidates: Sequence[str], current: Sequence[str], max_selections: int) -> List[str]:
        allowed = set(candidates) | set(current)
        accepted: List[str] = []
        for key in keys:
            if key in allowed and key not in accepted:
                accepted.append(key)
        return accepted[:max_selections]

    def set_source_documents(self, document_ids: Sequence[str]):
        accepted = self._accept(
            document_ids, self.document_ids, self.draft.source_document_ids,
            self.document_selector.config.max_selections,
        )
        self.draft = self.draft.model_copy(update={"source_document_ids": accepted})

    def set_applicable_amps(self, amp_ids: Sequence[str]):
        accepted = self._accept(
            amp_ids, self.amp_ids, self.draft.applicable_amp_ids,
            self.amp_selector.config.max_selections,
        )
        self.draft = self.draft.model_copy(update={"applicable_amp_ids": accepted})

    def activate_document(self, document_id: str) -> SelectionEvent:
        event = self.document_selector.activate(document_id, self.draft.source_document_ids)
        self.set_source_documents(event.selected_keys)
        return event

    def activate_amp(self, amp_id: str) -> SelectionEvent:
        event = self.amp_selector.activate(amp_id, self.draft.applicable_amp_ids)
        self.set_applicable_amps(event.selected_keys)
        return event

    def apply_edits(self, edited: ToleranceDraft):
        data = self.draft.model_dump()
        data.update(edited.model_dump(exclude={"id", "source_document_ids", "applicable_amp_ids"}))
        self.draft = ToleranceDraft.model_validate(data)
        self.set_source_documents(edited.source_document_ids)
        self.set_applicable_amps(edited.applicable_amp_ids)

    def resolve(self, today: Optional[date] = None) -> Tolerance:
        ensure_valid(validate_tolerance(self.draft))
        data = self.draft.model_dump(exclude={"id"})
        data["_id"] = self.draft.id or str(uuid.uuid4())
        data["last_modified_date"] = (today or date.today()).isoformat()
        data["last_modified_by"] = self.modified_by
        return Tolerance.model_validate(data)
