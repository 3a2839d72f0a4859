"""
Usage Guard

Shared reference entities (organization types, document types, factor
definitions) may not be switched off while other records point at them.

RULES:
- Usage is counted fresh from the full dependent snapshot on every check.
- Active -> inactive is rejected when usage > 0; nothing is mutated.
- Inactive -> Active is always allowed.
- Non-status edits are always allowed.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Union

from models.catalog import RecordStatus

logger = logging.getLogger(__name__)

ForeignKey = Union[Optional[str], Iterable[Optional[str]]]


class EntityInUseError(ValueError):
    """Raised when deactivating an entity that still has dependents"""

    def __init__(self, entity_key: str, usage_count: int, dependent_label: str = "record(s)"):
        self.entity_key = entity_key
        self.usage_count = usage_count
        self.dependent_label = dependent_label
        super().__init__(
            f"Cannot deactivate {entity_key}: used by {usage_count} {dependent_label}."
        )


def _referenced_keys(foreign_key: ForeignKey) -> List[str]:
    if foreign_key is None:
        return []
    if isinstance(foreign_key, str):
        return [foreign_key]
    return [key for key in foreign_key if key]


def count_dependents(
    entity_key: str,
    dependents: Iterable[Any],
    foreign_key: Callable[[Any], ForeignKey],
) -> int:
    """
    Number of dependents referencing `entity_key`.

    The accessor may return a single key or a list of keys; a dependent that
    references the entity several times counts once.
    """
    count = 0
    for dependent in dependents:
        if entity_key in _referenced_keys(foreign_key(dependent)):
            count += 1
    return count


def usage_counts(dependents: Iterable[Any], foreign_key: Callable[[Any], ForeignKey]) -> Counter:
    """Usage of every referenced key in one pass, for listings"""
    counts: Counter = Counter()
    for dependent in dependents:
        for key in set(_referenced_keys(foreign_key(dependent))):
            counts[key] += 1
    return counts


@dataclass
class GuardDecision:
    allowed: bool
    usage_count: int
    reason: Optional[str] = None


def check_status_transition(
    current_status: RecordStatus,
    new_status: RecordStatus,
    usage_count: int,
) -> GuardDecision:
    if current_status == RecordStatus.ACTIVE and new_status != RecordStatus.ACTIVE and usage_count > 0:
        return GuardDecision(
            allowed=False,
            usage_count=usage_count,
            reason=f"Entity is referenced by {usage_count} record(s)",
        )
    return GuardDecision(allowed=True, usage_count=usage_count)


def guard_status_change(
    entity_key: str,
    current_status: RecordStatus,
    new_status: RecordStatus,
    usage_count: int,
    dependent_label: str = "record(s)",
) -> GuardDecision:
    """Same as check_status_transition but raises EntityInUseError on rejection"""
    decision = check_status_transition(current_status, new_status, usage_count)
    if not decision.allowed:
        logger.warning(f"Status change {current_status.value} -> {new_status.value} rejected for {entity_key}: {usage_count} {dependent_label}")
        raise EntityInUseError(entity_key, usage_count, dependent_label)
    return decision
