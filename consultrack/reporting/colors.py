"""Stable chart colours per consultant.

A consultant always maps to the same palette entry, derived from a
32-bit string hash of the name. The cache is an ordinary object: build
one per request or session and pass it to whatever renders charts.
"""

from collections.abc import Iterable

CONSULTANT_PALETTE: tuple[str, ...] = (
    "#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6",
    "#06b6d4", "#f97316", "#84cc16", "#ec4899", "#6366f1",
    "#14b8a6", "#eab308", "#dc2626", "#059669", "#d97706",
    "#7c3aed", "#0891b2", "#ea580c", "#65a30d", "#db2777",
)


def name_hash(name: str) -> int:
    """Signed 32-bit ``hash * 31 + char`` over the name's UTF-16 code units."""
    h = 0
    encoded = name.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


class ConsultantColorCache:
    """Memoized name -> colour assignments for one request or session."""

    def __init__(self, palette: Iterable[str] = CONSULTANT_PALETTE) -> None:
        self._palette = tuple(palette)
        if not self._palette:
            msg = "Colour palette must not be empty."
            raise ValueError(msg)
        self._assigned: dict[str, str] = {}

    def color_for(self, name: str) -> str:
        color = self._assigned.get(name)
        if color is None:
            color = self._palette[abs(name_hash(name)) % len(self._palette)]
            self._assigned[name] = color
        return color

    def colors_for(self, names: Iterable[str]) -> dict[str, str]:
        return {name: self.color_for(name) for name in names}

    def snapshot(self) -> dict[str, str]:
        return dict(self._assigned)

    def clear(self) -> None:
        self._assigned.clear()

    def __len__(self) -> int:
        return len(self._assigned)
