"""
Connected-component scan over a raster's alpha channel.
"""

from typing import List

import numpy as np

from stickers.raster import Raster, VisitedMask
from stickers.region import RawBounds


def find_bounds(seed: int, width: int, height: int,
                opaque: bytearray, visited: VisitedMask) -> RawBounds:
    """
    Flood-fill one component from a seed pixel and return its tight box.

    Uses an explicit stack and 4-connectivity: only pixels sharing an edge
    join the component, so diagonal contact keeps components apart.

    Args:
        seed: Flat index (y * width + x) of an unvisited opaque pixel
        width: Raster width
        height: Raster height
        opaque: Flat buffer, non-zero where alpha >= threshold
        visited: Mask shared across the whole scan

    Returns:
        RawBounds of the component
    """
    flags = visited.flags
    min_x = max_x = seed % width
    min_y = max_y = seed // width

    flags[seed] = 1
    stack = [seed]

    while stack:
        idx = stack.pop()
        y, x = divmod(idx, width)

        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x
        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y

        # Neighbours: left, right, up, down
        if x > 0:
            n = idx - 1
            if not flags[n] and opaque[n]:
                flags[n] = 1
                stack.append(n)
        if x < width - 1:
            n = idx + 1
            if not flags[n] and opaque[n]:
                flags[n] = 1
                stack.append(n)
        if y > 0:
            n = idx - width
            if not flags[n] and opaque[n]:
                flags[n] = 1
                stack.append(n)
        if y < height - 1:
            n = idx + width
            if not flags[n] and opaque[n]:
                flags[n] = 1
                stack.append(n)

    return RawBounds(min_x, min_y, max_x, max_y)


def scan(raster: Raster, threshold: int) -> List[RawBounds]:
    """
    Find every opaque connected component in row-major seed order.

    Args:
        raster: Source raster (not modified)
        threshold: Minimum alpha for a pixel to be opaque

    Returns:
        List of RawBounds, ordered by when each seed pixel was first met
        scanning top-to-bottom, left-to-right
    """
    width, height = raster.width, raster.height
    if width == 0 or height == 0:
        return []

    opaque_plane = raster.alpha_plane >= threshold
    opaque = bytearray(opaque_plane.tobytes())
    visited = VisitedMask(width, height)
    flags = visited.flags

    components = []
    # flatnonzero walks the C-ordered plane, which is row-major
    for seed in np.flatnonzero(opaque_plane):
        seed = int(seed)
        if flags[seed]:
            continue
        components.append(find_bounds(seed, width, height, opaque, visited))

    return components
