from typing import Dict, Sequence

AMP_PALETTE = [
    "bg-gray-700 text-gray-300",
    "bg-slate-700 text-slate-300",
    "bg-zinc-700 text-zinc-300",
    "bg-neutral-700 text-neutral-300",
]


class ColorRegistry:
    """
    Stable palette assignment per id.

    Ids get palette entries round-robin in first-seen order and keep them
    until reset(). One registry per presentation context; not shared globally.
    """

    def __init__(self, palette: Sequence[str] = AMP_PALETTE):
        if not palette:
            raise ValueError("Palette must not be empty")
        self.palette = list(palette)
        self._assigned: Dict[str, str] = {}
        self._next_index = 0

    def color_for(self, key: str) -> str:
        if key not in self._assigned:
            self._assigned[key] = self.palette[self._next_index % len(self.palette)]
            self._next_index += 1
        return self._assigned[key]

    def reset(self):
        self._assigned.clear()
        self._next_index = 0

    def __len__(self) -> int:
        return len(self._assigned)
