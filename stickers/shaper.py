"""
Region shaping: size filtering, padding and clipping of raw component bounds.
"""

from typing import Iterable, List, Optional

from stickers.config import SliceConfig
from stickers.region import ExtractedRegion, RawBounds


def passes_min_dimension(raw: RawBounds, min_dimension: int) -> bool:
    """
    Check the raw (unpadded) box against the minimum size.

    Width and height are tested separately; this is not an area check.
    """
    return raw.w >= min_dimension and raw.h >= min_dimension


def pad_and_clip(raw: RawBounds, padding: int,
                 width: int, height: int) -> ExtractedRegion:
    """
    Expand a box by padding on every side, then clip it to the raster.

    Each side is clipped on its own; padding lost at one edge is not moved
    to the opposite edge.

    Args:
        raw: Tight component bounds
        padding: Margin in pixels
        width: Raster width
        height: Raster height

    Returns:
        Selected ExtractedRegion inside [0, width) x [0, height)
    """
    x = max(0, raw.min_x - padding)
    y = max(0, raw.min_y - padding)
    x2 = min(width, raw.max_x + 1 + padding)
    y2 = min(height, raw.max_y + 1 + padding)

    return ExtractedRegion(x=x, y=y, w=x2 - x, h=y2 - y, selected=True)


def shape(raw: RawBounds, config: SliceConfig,
          width: int, height: int) -> Optional[ExtractedRegion]:
    """
    Filter, pad and clip one component.

    Returns:
        The shaped region, or None if the raw box is too small
    """
    if not passes_min_dimension(raw, config.min_dimension):
        return None

    return pad_and_clip(raw, config.padding, width, height)


def shape_all(raws: Iterable[RawBounds], config: SliceConfig,
              width: int, height: int) -> List[ExtractedRegion]:
    """
    Shape every component, keeping scanner order.

    Args:
        raws: Components in discovery order
        config: Slicing configuration
        width: Raster width
        height: Raster height

    Returns:
        List of surviving regions in the same relative order
    """
    raws = list(raws)
    print(f"\nShaping regions (min size={config.min_dimension}px, "
          f"padding={config.padding}px)...")
    print(f"  Starting with {len(raws)} components")

    regions = []
    for raw in raws:
        region = shape(raw, config, width, height)
        if region is not None:
            regions.append(region)

    dropped = len(raws) - len(regions)
    if dropped:
        print(f"  Dropped {dropped} components below minimum size")
    print(f"  Final: {len(regions)} regions")

    return regions
