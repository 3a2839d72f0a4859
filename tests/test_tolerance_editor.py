"""
Test the tolerance edit session
"""

from datetime import date

import pytest

from models.amp import Amp, AmpStatus
from models.tolerance import ToleranceDraft
from services.tolerance_editor import ToleranceEditSession
from services.validation import RecordValidationError


@pytest.fixture
def amps(a320_amp):
    return [
        a320_amp,
        Amp(_id="amp-atr", name="ATR AMP", revision="2", status=AmpStatus.ACTIVE, fleet_id="fleet-atr"),
        Amp(_id="amp-old", name="A320 AMP rev 4", revision="4", status=AmpStatus.SUPERSEDED),
    ]


@pytest.fixture
def session(documents, amps):
    tolerance = ToleranceDraft(title="Flight hours tolerance", tolerance="10% or 300h (whichever first)")
    return ToleranceEditSession(tolerance, documents, amps)


class TestCandidates:

    def test_only_active_documents_offered(self, session):
        assert "doc-old-amm" not in session.document_ids
        assert len(session.document_ids) == 4

    def test_superseded_amps_not_offered(self, session):
        assert session.amp_ids == ["amp-a320", "amp-atr"]


class TestSelections:

    def test_source_documents_toggle(self, session):
        session.activate_document("doc-amm")
        session.activate_document("doc-ad")
        session.activate_document("doc-amm")
        assert session.draft.source_document_ids == ["doc-ad"]
        assert [doc.id for doc in session.selected_documents()] == ["doc-ad"]

    def test_unknown_keys_ignored(self, session):
        session.set_applicable_amps(["amp-atr", "amp-old", "amp-ghost"])
        assert session.draft.applicable_amp_ids == ["amp-atr"]

    def test_capacity_bound(self, documents, amps):
        session = ToleranceEditSession(ToleranceDraft(title="T"), documents, amps, max_selections=2)
        for document_id in ("doc-amm", "doc-ad", "doc-stc-sup"):
            session.activate_document(document_id)
        assert session.draft.source_document_ids == ["doc-amm", "doc-ad"]


class TestResolve:

    def test_resolve_stamps_and_assigns_id(self, session):
        session.set_source_documents(["doc-amm"])
        tolerance = session.resolve(today=date(2024, 5, 2))
        assert tolerance.id
        assert tolerance.last_modified_date == "2024-05-02"
        assert tolerance.source_document_ids == ["doc-amm"]

    def test_title_required(self, session):
        session.set_field("title", "")
        with pytest.raises(RecordValidationError) as exc_info:
            session.resolve()
        assert "title" in exc_info.value.errors

    def test_apply_edits(self, session):
        edited = ToleranceDraft(title="Cycles", tolerance="50 CYC", applicable_amp_ids=["amp-a320", "amp-old"])
        session.apply_edits(edited)
        assert session.draft.tolerance == "50 CYC"
        assert session.draft.applicable_amp_ids == ["amp-a320"]
