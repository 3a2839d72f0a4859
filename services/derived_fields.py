"""
Derived Field Calculator

Pure functions of an AMP's current selection and the referenced documents:

- next review date = earliest implementation deadline among included documents
  (previous value kept when none of them carries a deadline);
- revision mismatch = pinned revision_used differs from the document's current
  revision (plain string inequality, advisory only).

Included documents missing from the snapshot are ignored.
"""

import logging
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence

from models.amp import AmpBase, AmpIncludedDocument, RevisionMismatch
from models.document import Document

logger = logging.getLogger(__name__)


def next_review_date(
    included_documents: Sequence[AmpIncludedDocument],
    documents_by_id: Mapping[str, Document],
    previous: Optional[date] = None,
) -> Optional[date]:
    deadlines = []
    for included in included_documents:
        doc = documents_by_id.get(included.document_id)
        if doc is not None and doc.implementation_deadline is not None:
            deadlines.append(doc.implementation_deadline)

    if not deadlines:
        return previous
    return min(deadlines)


def is_revision_mismatch(revision_used: str, current_revision: str) -> bool:
    return revision_used != current_revision


def revision_mismatches(
    included_documents: Sequence[AmpIncludedDocument],
    documents_by_id: Mapping[str, Document],
) -> List[RevisionMismatch]:
    mismatches = []
    for included in included_documents:
        doc = documents_by_id.get(included.document_id)
        if doc is None:
            continue
        if is_revision_mismatch(included.revision_used, doc.revision):
            mismatches.append(
                RevisionMismatch(
                    document_id=doc.id,
                    revision_used=included.revision_used,
                    current_revision=doc.revision,
                )
            )
    return mismatches


class DerivedFieldCalculator:
    """Recomputes the derived fields of an AMP against a document snapshot"""

    def __init__(self, documents_by_id: Mapping[str, Document]):
        self.documents_by_id: Dict[str, Document] = dict(documents_by_id)

    def recompute(self, amp: AmpBase) -> AmpBase:
        """Return a copy of `amp` with next_review_date recalculated"""
        review_date = next_review_date(amp.included_documents, self.documents_by_id, amp.next_review_date)
        if review_date != amp.next_review_date:
            logger.debug(f"Next review date {amp.next_review_date} -> {review_date}")
        return amp.model_copy(update={"next_review_date": review_date})

    def mismatches(self, amp: AmpBase) -> List[RevisionMismatch]:
        return revision_mismatches(amp.included_documents, self.documents_by_id)
