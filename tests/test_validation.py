import pytest

from models.amp import AmpDraft
from models.catalog import CatalogEntryCreate
from models.tolerance import ToleranceDraft
from services.validation import (
    RecordValidationError,
    ensure_valid,
    validate_amp,
    validate_catalog_entry,
    validate_tolerance,
)


class TestAmpValidation:

    def test_complete_amp_passes(self):
        assert validate_amp(AmpDraft(name="A320 AMP", revision="5")) == {}

    def test_whitespace_counts_as_missing(self):
        assert set(validate_amp(AmpDraft(name="   ", revision="\t"))) == {"name", "revision"}


class TestCatalogEntryValidation:

    def test_code_and_name_required(self):
        errors = validate_catalog_entry(CatalogEntryCreate(code="", name="Service Bulletin"))
        assert list(errors) == ["code"]


class TestEnsureValid:

    def test_reports_every_field(self):
        with pytest.raises(RecordValidationError) as exc_info:
            ensure_valid(validate_amp(AmpDraft()))
        assert set(exc_info.value.errors) == {"name", "revision"}
        assert "name: Programme name is required." in str(exc_info.value)

    def test_empty_map_passes(self):
        ensure_valid(validate_tolerance(ToleranceDraft(title="FH")))
