"""
Save-time validation

Each validator returns a field -> message map; an empty map means the record
can be saved. RecordValidationError carries the map so the caller can report
every failing field at once.
"""

from typing import Any, Dict, Mapping


class RecordValidationError(ValueError):
    def __init__(self, errors: Mapping[str, str]):
        self.errors: Dict[str, str] = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_amp(amp) -> Dict[str, str]:
    errors = {}
    if _blank(amp.name):
        errors["name"] = "Programme name is required."
    if _blank(amp.revision):
        errors["revision"] = "Revision is required."
    return errors


def validate_catalog_entry(entry) -> Dict[str, str]:
    errors = {}
    if _blank(entry.code):
        errors["code"] = "Code is required."
    if _blank(entry.name):
        errors["name"] = "Name is required."
    return errors


def validate_tolerance(tolerance) -> Dict[str, str]:
    errors = {}
    if _blank(tolerance.title):
        errors["title"] = "Title is required."
    return errors


def ensure_valid(errors: Mapping[str, str]):
    if errors:
        raise RecordValidationError(errors)
