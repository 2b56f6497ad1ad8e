"""
Export helpers: cropping, PNG encoding, zip packaging, overlays and JSON.
"""

import io
import json
import os
import zipfile
from typing import Iterable, List, Union

import cv2
import numpy as np

from stickers.raster import Raster
from stickers.region import ExtractedRegion

DEFAULT_ARCHIVE_NAME = "stickers_pack.zip"


def sticker_filename(n: int) -> str:
    """Archive entry name for the n-th (1-based) sticker."""
    return f"sticker_{n}.png"


def crop_region(raster: Raster, region: ExtractedRegion) -> np.ndarray:
    """
    Copy the BGRA samples under a region.

    Args:
        raster: Source raster
        region: Region inside the raster

    Returns:
        Writable array of shape (region.h, region.w, 4)
    """
    return raster.pixels[region.y:region.y2, region.x:region.x2].copy()


def encode_png(pixels: np.ndarray) -> bytes:
    """
    Encode pixels as PNG bytes.

    Raises:
        ValueError: If encoding fails (e.g. an empty array)
    """
    if pixels.size == 0:
        raise ValueError("Cannot encode an empty image")

    success, buffer = cv2.imencode(".png", pixels)
    if not success:
        raise ValueError("Failed to encode image as PNG")

    return buffer.tobytes()


def save_sticker(raster: Raster, region: ExtractedRegion, output_path: str) -> None:
    """
    Crop a region and save it as a PNG file.

    Non-PNG extensions are replaced so alpha is preserved.
    """
    if not output_path.lower().endswith('.png'):
        output_path = os.path.splitext(output_path)[0] + '.png'

    with open(output_path, 'wb') as f:
        f.write(encode_png(crop_region(raster, region)))


def save_stickers(raster: Raster, regions: Iterable[ExtractedRegion],
                  output_dir: str) -> List[str]:
    """
    Save each region as sticker_<n>.png in a directory.

    Returns:
        Written file paths in order
    """
    os.makedirs(output_dir, exist_ok=True)

    paths = []
    for n, region in enumerate(regions, 1):
        path = os.path.join(output_dir, sticker_filename(n))
        save_sticker(raster, region, path)
        paths.append(path)

    return paths


def pack_stickers(raster: Raster, regions: Iterable[ExtractedRegion],
                  dest: Union[str, io.BufferedIOBase, None] = None) -> Union[str, bytes]:
    """
    Bundle regions into a zip archive of PNG files.

    Entries are named sticker_1.png, sticker_2.png, ... in the order given.

    Args:
        raster: Source raster
        regions: Regions to pack
        dest: Output path, writable binary file object, or None for bytes

    Returns:
        The path written, or the archive bytes when dest is None
    """
    target = io.BytesIO() if dest is None else dest

    with zipfile.ZipFile(target, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
        for n, region in enumerate(regions, 1):
            archive.writestr(sticker_filename(n), encode_png(crop_region(raster, region)))

    if dest is None:
        return target.getvalue()
    return dest


def draw_overlay(raster: Raster, regions: Iterable[ExtractedRegion]) -> np.ndarray:
    """
    Draw region boxes and 1-based indices on a copy of the atlas.

    Selected regions are green, deselected ones gray. Transparent areas
    are flattened onto white so the boxes stay visible.
    """
    bgr = raster.pixels[:, :, :3].astype(np.float32)
    alpha = raster.pixels[:, :, 3:4].astype(np.float32) / 255.0
    out = (bgr * alpha + 255.0 * (1.0 - alpha)).astype(np.uint8)

    for i, r in enumerate(regions, 1):
        c = (50, 180, 50) if r.selected else (160, 160, 160)
        cv2.rectangle(out, (r.x, r.y), (r.x2 - 1, r.y2 - 1), c, 1)
        cv2.putText(out, str(i), (r.x + 2, r.y + 12), cv2.FONT_HERSHEY_SIMPLEX,
                    0.4, c, 1, cv2.LINE_AA)
    return out


def regions_to_json(regions: Iterable[ExtractedRegion], output_path: str = None) -> str:
    """
    Serialize regions as a JSON list of dicts.

    Writes the file when output_path is given; always returns the text.
    """
    text = json.dumps([r.to_dict() for r in regions], indent=2)

    if output_path:
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(text)

    return text
