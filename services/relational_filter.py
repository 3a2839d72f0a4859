"""
Relational Filter

Derives which aircraft and documents may be attached to an AMP from the fleet
it is linked to.

- Aircraft: same fleet_id as the AMP (all aircraft when no fleet is linked or
  the fleet filter is off).
- Documents: only ACTIVE documents, and with a fleet linked, only those bound
  to a certificate applicable to that fleet.

The document → certificate → fleet join is indexed once per snapshot so a
lookup costs a few set unions instead of nested scans.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from models.aircraft import Aircraft
from models.certificate import Certificate
from models.document import Document, DocumentStatus
from models.fleet import Fleet

logger = logging.getLogger(__name__)


def cascade_clear(selected: Sequence[str], eligible_keys: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Split a selection into (kept, dropped) against the eligible key set.

    Order of the kept keys is preserved.
    """
    eligible = set(eligible_keys)
    kept = [key for key in selected if key in eligible]
    dropped = [key for key in selected if key not in eligible]
    return kept, dropped


class DocumentEligibilityIndex:
    """Precomputed fleet → certificates → documents join over ACTIVE documents"""

    def __init__(self, certificates: Sequence[Certificate], documents: Sequence[Document]):
        self._certificates_by_fleet: Dict[str, Set[str]] = {}
        for certificate in certificates:
            for fleet_id in certificate.applicable_fleet_ids:
                self._certificates_by_fleet.setdefault(fleet_id, set()).add(certificate.id)

        self._active_documents: List[Document] = [
            doc for doc in documents if doc.status == DocumentStatus.ACTIVE
        ]
        self._documents_by_certificate: Dict[str, Set[str]] = {}
        for doc in self._active_documents:
            for certificate_id in doc.certificate_ids:
                self._documents_by_certificate.setdefault(certificate_id, set()).add(doc.id)

    @property
    def active_documents(self) -> List[Document]:
        return list(self._active_documents)

    def document_ids_for_fleet(self, fleet_id: str) -> Set[str]:
        document_ids: Set[str] = set()
        for certificate_id in self._certificates_by_fleet.get(fleet_id, ()):
            document_ids |= self._documents_by_certificate.get(certificate_id, set())
        return document_ids

    def eligible_documents(self, fleet_id: Optional[str], filter_by_fleet: bool = True) -> List[Document]:
        if not filter_by_fleet or not fleet_id:
            return list(self._active_documents)
        document_ids = self.document_ids_for_fleet(fleet_id)
        return [doc for doc in self._active_documents if doc.id in document_ids]


class RelationalFilter:
    """Eligible child collections for a given fleet link"""

    def __init__(
        self,
        fleets: Sequence[Fleet],
        aircraft: Sequence[Aircraft],
        certificates: Sequence[Certificate],
        documents: Sequence[Document],
    ):
        self.fleets = list(fleets)
        self.aircraft = list(aircraft)
        self._fleets_by_id = {fleet.id: fleet for fleet in self.fleets}
        self._documents_by_id = {doc.id: doc for doc in documents}
        self.document_index = DocumentEligibilityIndex(certificates, documents)

    def find_fleet(self, fleet_id: Optional[str]) -> Optional[Fleet]:
        if not fleet_id:
            return None
        return self._fleets_by_id.get(fleet_id)

    def find_document(self, document_id: str) -> Optional[Document]:
        return self._documents_by_id.get(document_id)

    @property
    def documents_by_id(self) -> Dict[str, Document]:
        return self._documents_by_id

    def eligible_aircraft(self, fleet_id: Optional[str], filter_by_fleet: bool = True) -> List[Aircraft]:
        if not fleet_id or not filter_by_fleet:
            return list(self.aircraft)
        return [ac for ac in self.aircraft if ac.fleet_id == fleet_id]

    def eligible_aircraft_sns(self, fleet_id: Optional[str], filter_by_fleet: bool = True) -> List[str]:
        return [ac.serial_number for ac in self.eligible_aircraft(fleet_id, filter_by_fleet)]

    def eligible_documents(self, fleet_id: Optional[str], filter_by_fleet: bool = True) -> List[Document]:
        return self.document_index.eligible_documents(fleet_id, filter_by_fleet)

    def eligible_document_ids(self, fleet_id: Optional[str], filter_by_fleet: bool = True) -> List[str]:
        return [doc.id for doc in self.eligible_documents(fleet_id, filter_by_fleet)]
