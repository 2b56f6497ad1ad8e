"""
Region collection with stable identity, selection state and ordering views.
"""

import threading
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from stickers.region import ExtractedRegion


class SortMode(str, Enum):
    DEFAULT = "default"
    SIZE_DESC = "size-desc"
    SIZE_ASC = "size-asc"


def sort_regions(items: List[Tuple[int, ExtractedRegion]],
                 mode) -> List[Tuple[int, ExtractedRegion]]:
    """
    Order (id, region) pairs for display.

    Size orderings sort by w * h and are stable, so equal areas keep
    creation order.

    Raises:
        ValueError: If mode is not a known SortMode
    """
    mode = SortMode(mode)
    ordered = list(items)

    if mode is SortMode.SIZE_DESC:
        ordered.sort(key=lambda item: item[1].area, reverse=True)
    elif mode is SortMode.SIZE_ASC:
        ordered.sort(key=lambda item: item[1].area)

    return ordered


class RegionCollection:
    """
    Live set of extracted regions for the current atlas.

    Regions are addressed by an integer id assigned at creation (1-based,
    in creation order). Ids are never reused within a collection, so a
    displayed ordering can be driven without reindexing anything.
    Every operation holds one lock.
    """

    def __init__(self, regions: Iterable[ExtractedRegion] = ()):
        self._lock = threading.Lock()
        self._regions: Dict[int, ExtractedRegion] = {}
        self._next_id = 1
        self.extend(regions)

    def extend(self, regions: Iterable[ExtractedRegion]) -> List[int]:
        """Append regions in order and return their new ids."""
        ids = []
        with self._lock:
            for region in regions:
                self._regions[self._next_id] = region
                ids.append(self._next_id)
                self._next_id += 1
        return ids

    def get(self, region_id: int) -> ExtractedRegion:
        with self._lock:
            return self._regions[region_id]

    def ids(self) -> List[int]:
        with self._lock:
            return list(self._regions)

    def regions(self) -> List[ExtractedRegion]:
        """Regions in creation order."""
        with self._lock:
            return list(self._regions.values())

    def items(self) -> List[Tuple[int, ExtractedRegion]]:
        with self._lock:
            return list(self._regions.items())

    def selected(self) -> List[Tuple[int, ExtractedRegion]]:
        """Selected (id, region) pairs in creation order."""
        with self._lock:
            return [(i, r) for i, r in self._regions.items() if r.selected]

    def ordered(self, mode=SortMode.DEFAULT) -> List[Tuple[int, ExtractedRegion]]:
        """Return a sorted view; the collection itself is left untouched."""
        return sort_regions(self.items(), mode)

    @property
    def total(self) -> int:
        with self._lock:
            return len(self._regions)

    @property
    def selected_count(self) -> int:
        with self._lock:
            return sum(1 for r in self._regions.values() if r.selected)

    def toggle_selection(self, region_id: int) -> bool:
        """
        Flip the selection flag of one region.

        Returns:
            The new selection state

        Raises:
            KeyError: If no region has this id
        """
        with self._lock:
            region = self._regions[region_id]
            self._regions[region_id] = region.with_selected(not region.selected)
            return not region.selected

    def select_all(self) -> None:
        self._set_all(True)

    def deselect_all(self) -> None:
        self._set_all(False)

    def _set_all(self, selected: bool) -> None:
        with self._lock:
            for region_id, region in self._regions.items():
                if region.selected != selected:
                    self._regions[region_id] = region.with_selected(selected)

    def delete_selected(self) -> int:
        """
        Remove every selected region.

        Returns:
            Number of regions removed
        """
        with self._lock:
            doomed = [i for i, r in self._regions.items() if r.selected]
            for region_id in doomed:
                del self._regions[region_id]
            return len(doomed)

    def clear(self) -> None:
        """Drop all regions (a new atlas was loaded)."""
        with self._lock:
            self._regions.clear()

    def __len__(self) -> int:
        return self.total

    def __iter__(self):
        return iter(self.regions())

    def __repr__(self) -> str:
        return f"RegionCollection(total={self.total}, selected={self.selected_count})"
