"""
Generate synthetic sticker atlases with known ground truth.
"""

import random
from typing import List, Tuple

import cv2
import numpy as np

from stickers.region import RawBounds


def generate_synthetic_atlas(width=400, height=300, count=8, seed=None,
                             min_size=10, max_size=60, gap=2,
                             max_attempts=500) -> Tuple[np.ndarray, List[RawBounds]]:
    """
    Draw non-touching opaque rectangles on a transparent BGRA canvas.

    Rectangles are kept at least gap pixels apart so each one is its own
    4-connected component.

    Returns:
        Tuple of (bgra_image, ground_truth_bounds) with bounds listed in
        row-major order of their top-left corner
    """
    rng = random.Random(seed)
    img = np.zeros((height, width, 4), dtype=np.uint8)
    boxes: List[RawBounds] = []

    attempts = 0
    while len(boxes) < count and attempts < max_attempts:
        attempts += 1
        w = rng.randint(min_size, max_size)
        h = rng.randint(min_size, max_size)
        if w > width or h > height:
            continue
        x = rng.randint(0, width - w)
        y = rng.randint(0, height - h)
        box = RawBounds(x, y, x + w - 1, y + h - 1)

        clash = any(not (box.min_x > b.max_x + gap or b.min_x > box.max_x + gap or
                         box.min_y > b.max_y + gap or b.min_y > box.max_y + gap)
                    for b in boxes)
        if clash:
            continue

        color = (rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255),
                 rng.randint(128, 255))
        cv2.rectangle(img, (box.min_x, box.min_y), (box.max_x, box.max_y), color, -1)
        boxes.append(box)

    boxes.sort(key=lambda b: (b.min_y, b.min_x))
    return img, boxes
