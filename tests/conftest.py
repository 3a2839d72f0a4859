"""
Shared fixtures: a small A320/ATR dataset and an in-memory stand-in for the
motor database so RecordStore and the routes run without MongoDB.
"""

import copy
from datetime import date

import pytest
from fastapi.testclient import TestClient

from models.aircraft import Aircraft
from models.amp import Amp, AmpIncludedDocument
from models.certificate import Certificate, CertificateType
from models.document import Document, DocumentStatus
from models.fleet import CustomFactor, Fleet
from services.record_store import RecordStore, to_document
from services.relational_filter import RelationalFilter


# ============================================================
# IN-MEMORY MOTOR DATABASE
# ============================================================

class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    async def to_list(self, length=None):
        docs = [copy.deepcopy(d) for d in self.docs]
        return docs if length is None else docs[:length]


class FakeCollection:
    def __init__(self):
        self.docs = {}
        self.indexes = []

    def find(self, query=None):
        return FakeCursor(list(self.docs.values()))

    async def find_one(self, query):
        doc = self.docs.get(query["_id"])
        return copy.deepcopy(doc) if doc is not None else None

    async def replace_one(self, query, document, upsert=False):
        if query["_id"] in self.docs or upsert:
            self.docs[query["_id"]] = copy.deepcopy(document)

    async def delete_many(self, query):
        self.docs.clear()

    async def insert_many(self, documents):
        for document in documents:
            self.docs[document["_id"]] = copy.deepcopy(document)

    async def create_index(self, field):
        if field not in self.indexes:
            self.indexes.append(field)
        return f"{field}_1"


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


# ============================================================
# SAMPLE DATA
# ============================================================

@pytest.fixture
def fleets():
    return [
        Fleet(_id="fleet-a320", name="A320 Family", type_certificate_id="cert-a320-tc", num_motors=2,
              custom_factors=[CustomFactor(factor_id="factor-fh", value="1")]),
        Fleet(_id="fleet-atr", name="ATR 72", type_certificate_id="cert-atr-tc", num_motors=2),
    ]


@pytest.fixture
def aircraft():
    return [
        Aircraft(_id="ac-1", serial_number="MX-1", registration="EC-AAA", model="A320-214", fleet_id="fleet-a320"),
        Aircraft(_id="ac-2", serial_number="MX-2", registration="EC-AAB", model="A320-214", fleet_id="fleet-a320"),
        Aircraft(_id="ac-3", serial_number="AT-7", registration="EC-ATR", model="ATR 72-600", fleet_id="fleet-atr"),
    ]


@pytest.fixture
def certificates():
    return [
        Certificate(_id="cert-a320-tc", type=CertificateType.TC, holder="Airbus S.A.S.", tcds="EASA.A.064",
                    applicable_fleet_ids=["fleet-a320"]),
        Certificate(_id="cert-stc-avionics", type=CertificateType.STC, holder="Avionics Ltd",
                    applicable_fleet_ids=["fleet-a320", "fleet-atr"]),
        Certificate(_id="cert-atr-tc", type=CertificateType.TC, holder="ATR", tcds="EASA.A.084",
                    applicable_fleet_ids=["fleet-atr"]),
    ]


@pytest.fixture
def documents():
    return [
        Document(_id="doc-amm", doc_type="type-amm", title="A320 AMM", revision="B",
                 implementation_deadline=date(2024, 3, 1), certificate_ids=["cert-a320-tc"]),
        Document(_id="doc-ad", doc_type="type-ad", title="AD 2023-0123", revision="1",
                 implementation_deadline=date(2024, 1, 15), certificate_ids=["cert-a320-tc"]),
        Document(_id="doc-atr-mpd", doc_type="type-mpd", title="ATR MPD", revision="12",
                 certificate_ids=["cert-atr-tc"]),
        Document(_id="doc-stc-sup", doc_type="type-ica", title="STC ICA supplement", revision="A",
                 certificate_ids=["cert-stc-avionics"]),
        Document(_id="doc-old-amm", doc_type="type-amm", title="A320 AMM (old)", revision="A",
                 status=DocumentStatus.SUPERSEDED, superseded_by_doc_id="doc-amm",
                 certificate_ids=["cert-a320-tc"]),
    ]


@pytest.fixture
def relational_filter(fleets, aircraft, certificates, documents):
    return RelationalFilter(fleets, aircraft, certificates, documents)


@pytest.fixture
def a320_amp():
    return Amp(
        _id="amp-a320",
        name="A320 AMP",
        revision="5",
        fleet_id="fleet-a320",
        included_aircraft_sns=["MX-1", "MX-2"],
        included_documents=[AmpIncludedDocument(document_id="doc-amm", revision_used="A")],
        next_review_date=date(2025, 6, 30),
    )


# ============================================================
# STORE & HTTP CLIENT
# ============================================================

@pytest.fixture
def fake_db(fleets, aircraft, certificates, documents, a320_amp):
    db = FakeDatabase()
    seed = {
        "fleets": fleets,
        "aircrafts": aircraft,
        "certificates": certificates,
        "documents": documents,
        "amps": [a320_amp],
    }
    for name, records in seed.items():
        for record in records:
            document = to_document(record)
            db[name].docs[document["_id"]] = document
    return db


@pytest.fixture
def store(fake_db):
    return RecordStore(fake_db)


@pytest.fixture
def client(store):
    from server import app
    from routes.amps import get_amp_colors
    from services.color_registry import ColorRegistry
    from services.record_store import get_record_store

    colors = ColorRegistry()
    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_amp_colors] = lambda: colors
    yield TestClient(app)
    app.dependency_overrides.clear()
