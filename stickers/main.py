"""
Main pipeline for sticker extraction.
Integrates all steps: validation, component scan, shaping, and collection.
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from stickers.config import SliceConfig
from stickers.export import DEFAULT_ARCHIVE_NAME, pack_stickers
from stickers.ordering import RegionCollection
from stickers.raster import Raster, get_opaque_density, load_raster
from stickers.scanner import scan
from stickers.shaper import shape_all


class SliceStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    EMPTY_RASTER = "empty_raster"


@dataclass
class SliceResult:
    """Outcome of one slicing run."""

    status: SliceStatus
    regions: RegionCollection
    component_count: int = 0
    raster: Optional[Raster] = None
    opaque_fraction: float = 0.0

    @property
    def found(self) -> bool:
        return self.status is SliceStatus.FOUND


def slice_atlas(raster: Raster, config: Optional[SliceConfig] = None) -> SliceResult:
    """
    Complete sticker extraction pipeline on a decoded raster.

    Args:
        raster: Atlas raster
        config: Slicing configuration (defaults if omitted)

    Returns:
        SliceResult with status, regions in discovery order and the raw
        component count

    Raises:
        InvalidConfig: If the configuration is out of range; nothing is
            scanned in that case
    """
    config = (config or SliceConfig()).validate()

    print("=" * 60)
    print("STICKER EXTRACTION PIPELINE")
    print("=" * 60)

    if raster.width == 0 or raster.height == 0:
        print("\nEmpty raster, nothing to scan")
        return SliceResult(SliceStatus.EMPTY_RASTER, RegionCollection(), raster=raster)

    # Step 1: Component scan
    print(f"\n[Step 1/2] Scanning components (alpha >= {config.alpha_threshold})...")
    opaque_fraction = get_opaque_density(raster, config.alpha_threshold)
    components = scan(raster, config.alpha_threshold)
    print(f"  Found {len(components)} components")
    print(f"  Opaque coverage: {opaque_fraction:.1%}")

    # Step 2: Shaping
    print("\n[Step 2/2] Shaping regions...")
    regions = shape_all(components, config, raster.width, raster.height)

    collection = RegionCollection(regions)
    status = SliceStatus.FOUND if regions else SliceStatus.NOT_FOUND

    print("\n" + "=" * 60)
    if status is SliceStatus.FOUND:
        print(f"Done! Found {collection.total} stickers")
    else:
        print("No stickers found")
    print("=" * 60)

    return SliceResult(status, collection, len(components), raster, opaque_fraction)


def slice_image(image_path: str, config: Optional[SliceConfig] = None) -> SliceResult:
    """Load an image file and run the pipeline on it."""
    return slice_atlas(load_raster(image_path), config)


class AtlasSession:
    """
    The current atlas and its extracted regions.

    Loading a new atlas drops the previous regions; processing replaces
    them with a fresh scan. Each atlas and each scan starts a new
    collection, so region ids count from 1 again.
    """

    def __init__(self):
        self.raster: Optional[Raster] = None
        self.regions = RegionCollection()
        self.status: Optional[SliceStatus] = None

    def load(self, raster: Raster) -> None:
        self.raster = raster
        self.regions = RegionCollection()
        self.status = None

    def load_file(self, image_path: str) -> None:
        self.load(load_raster(image_path))

    def process(self, config: Optional[SliceConfig] = None) -> SliceResult:
        """
        Slice the loaded atlas.

        Raises:
            RuntimeError: If no atlas is loaded
            InvalidConfig: If the configuration is out of range
        """
        if self.raster is None:
            raise RuntimeError("No atlas loaded")

        result = slice_atlas(self.raster, config)
        self.regions = result.regions
        self.status = result.status

        return result

    def export_selected(self, dest: Union[str, io.BufferedIOBase, None] = DEFAULT_ARCHIVE_NAME):
        """
        Pack the selected regions (creation order) into a zip archive.

        Returns:
            See pack_stickers; None if nothing is selected
        """
        if self.raster is None:
            raise RuntimeError("No atlas loaded")

        selected = [region for _, region in self.regions.selected()]
        if not selected:
            return None

        return pack_stickers(self.raster, selected, dest)

    def clear(self) -> None:
        self.raster = None
        self.regions = RegionCollection()
        self.status = None
