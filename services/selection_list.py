"""
Searchable Selection List

Generic chooser over a homogeneous collection of records. The caller supplies
how to read an item's key and how to serialize it for free-text search, so the
same list drives aircraft (keyed by serial number), documents (keyed by id),
AMPs and tolerances.

RULES:
- The list never owns the authoritative selection: every activation returns
  the new key set and the caller decides what to keep.
- max_selections == 1 is exclusive: activating the selected key clears it.
- max_selections > 1 is bounded: at capacity a new key is silently ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_DOWN = "ArrowDown"
KEY_UP = "ArrowUp"
KEY_ENTER = "Enter"

NO_RESULTS_MESSAGE = "No results found."

# Focus cursor value when nothing is focused
NO_FOCUS = -1


def serialize_fields(item: Any) -> Iterable[Any]:
    """Default serialization hook: every field value of the record"""
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json").values()
    if isinstance(item, dict):
        return item.values()
    return vars(item).values()


def matches_search(values: Iterable[Any], search_term: str) -> bool:
    """Case-insensitive substring match against any serialized value"""
    needle = search_term.lower()
    for value in values:
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def toggle_selection(selected: Sequence[str], key: str, max_selections: int) -> List[str]:
    """
    Apply one activation of `key` to the current selection.

    Exclusive mode replaces or clears; bounded mode toggles membership and
    leaves the selection untouched once capacity is reached.
    """
    if max_selections == 1:
        if selected and selected[0] == key:
            return []
        return [key]

    if key in selected:
        return [k for k in selected if k != key]
    if len(selected) < max_selections:
        return [*selected, key]
    return list(selected)


@dataclass
class SelectionConfig:
    max_selections: int = 1
    placeholder: str = ""

    def __post_init__(self):
        if self.max_selections < 1:
            raise ValueError(f"max_selections must be >= 1, got {self.max_selections}")


@dataclass
class SelectionEvent:
    """New key set emitted after an activation"""
    selected_keys: List[str]
    activated_key: str
    changed: bool
    capacity_reached: bool = False


@dataclass
class SelectionRow(Generic[T]):
    item: T
    key: str
    index: int
    is_selected: bool
    is_focused: bool


@dataclass
class SelectionView(Generic[T]):
    rows: List[SelectionRow[T]]
    search_term: str
    placeholder: str
    focused_index: int
    show_checkboxes: bool
    scroll_to_index: Optional[int] = None
    no_results_message: Optional[str] = None

    @property
    def no_results(self) -> bool:
        return not self.rows


@dataclass
class SelectionList(Generic[T]):
    """
    Keyboard-navigable, searchable chooser.

    `key` reads the stable identifier of an item, `serialize` yields the values
    searched by the free-text filter (all fields by default).
    """
    key: Callable[[T], str]
    config: SelectionConfig = field(default_factory=SelectionConfig)
    serialize: Callable[[T], Iterable[Any]] = serialize_fields
    items: List[T] = field(default_factory=list)
    search_term: str = ""
    focused_index: int = NO_FOCUS

    def __post_init__(self):
        self.items = list(self.items)
        self._filtered = self._apply_filter()

    # --------------------------------------------------------
    # ITEMS & FILTER
    # --------------------------------------------------------

    def _apply_filter(self) -> List[T]:
        if not self.search_term:
            return list(self.items)
        return [item for item in self.items if matches_search(self.serialize(item), self.search_term)]

    @property
    def filtered_items(self) -> List[T]:
        return self._filtered

    def set_items(self, items: Sequence[T]):
        """Re-render against a new eligible set, keeping the search term"""
        self.items = list(items)
        self._filtered = self._apply_filter()
        if self.focused_index >= len(self._filtered):
            self.focused_index = len(self._filtered) - 1

    def set_search_term(self, search_term: str):
        self.search_term = search_term
        self._filtered = self._apply_filter()
        self.focused_index = NO_FOCUS

    # --------------------------------------------------------
    # FOCUS & KEYBOARD
    # --------------------------------------------------------

    def move_focus(self, step: int) -> int:
        count = len(self._filtered)
        if count == 0:
            self.focused_index = NO_FOCUS
            return self.focused_index
        self.focused_index = max(0, min(self.focused_index + step, count - 1))
        return self.focused_index

    def hover(self, index: int):
        if 0 <= index < len(self._filtered):
            self.focused_index = index

    def focused_item(self) -> Optional[T]:
        if 0 <= self.focused_index < len(self._filtered):
            return self._filtered[self.focused_index]
        return None

    def handle_key(self, key_name: str, selected: Sequence[str]) -> Optional[SelectionEvent]:
        """Down/Up move the cursor, Enter activates the focused item"""
        if key_name == KEY_DOWN:
            self.move_focus(1)
        elif key_name == KEY_UP:
            self.move_focus(-1)
        elif key_name == KEY_ENTER:
            item = self.focused_item()
            if item is not None:
                return self.activate(self.key(item), selected)
        return None

    # --------------------------------------------------------
    # ACTIVATION
    # --------------------------------------------------------

    def activate(self, item_key: str, selected: Sequence[str]) -> SelectionEvent:
        max_selections = self.config.max_selections
        new_keys = toggle_selection(selected, item_key, max_selections)
        capacity_reached = (
            max_selections > 1
            and item_key not in selected
            and len(selected) >= max_selections
        )
        if capacity_reached:
            logger.debug(f"Selection capacity {max_selections} reached, ignoring {item_key}")

        if max_selections == 1:
            self.set_search_term("")

        return SelectionEvent(
            selected_keys=new_keys,
            activated_key=item_key,
            changed=list(new_keys) != list(selected),
            capacity_reached=capacity_reached,
        )

    # --------------------------------------------------------
    # RENDERING
    # --------------------------------------------------------

    def view(self, selected: Sequence[str]) -> SelectionView[T]:
        selected_set = set(selected)
        rows = [
            SelectionRow(
                item=item,
                key=self.key(item),
                index=index,
                is_selected=self.key(item) in selected_set,
                is_focused=index == self.focused_index,
            )
            for index, item in enumerate(self._filtered)
        ]
        return SelectionView(
            rows=rows,
            search_term=self.search_term,
            placeholder=self.config.placeholder,
            focused_index=self.focused_index,
            show_checkboxes=self.config.max_selections > 1,
            scroll_to_index=self.focused_index if self.focused_index != NO_FOCUS else None,
            no_results_message=None if rows else NO_RESULTS_MESSAGE,
        )


def select(
    items: Sequence[T],
    selected: Sequence[str],
    config: SelectionConfig,
    key: Callable[[T], str],
    search_term: str = "",
    activate: Optional[str] = None,
    serialize: Callable[[T], Iterable[Any]] = serialize_fields,
):
    """
    One-shot form of the list: filter `items`, optionally activate a key and
    return (view, events) against the resulting selection.
    """
    selection_list = SelectionList(key=key, config=config, serialize=serialize, items=list(items))
    selection_list.set_search_term(search_term)
    events: List[SelectionEvent] = []
    current = list(selected)
    if activate is not None:
        event = selection_list.activate(activate, current)
        events.append(event)
        current = event.selected_keys
    return selection_list.view(current), events
