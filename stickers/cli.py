"""
Command-line entry point: slice an atlas into a zip of sticker PNGs.
"""

import argparse
import os
import sys

import cv2

from stickers.config import (DEFAULT_ALPHA_THRESHOLD, DEFAULT_MIN_DIMENSION,
                             DEFAULT_PADDING, InvalidConfig, SliceConfig)
from stickers.export import (DEFAULT_ARCHIVE_NAME, draw_overlay, pack_stickers,
                             regions_to_json, save_stickers)
from stickers.main import slice_image
from stickers.ordering import SortMode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cut individual stickers out of a transparent atlas image.")
    parser.add_argument("--image", type=str, required=True)
    parser.add_argument("--out", type=str, default=DEFAULT_ARCHIVE_NAME,
                        help="zip archive for the stickers")
    parser.add_argument("--individual", type=str, default=None,
                        help="also write each sticker PNG into this directory")
    parser.add_argument("--threshold", type=int, default=DEFAULT_ALPHA_THRESHOLD,
                        help="minimum alpha (1-255) of a sticker pixel")
    parser.add_argument("--min-size", type=int, default=DEFAULT_MIN_DIMENSION,
                        help="minimum sticker width and height before padding")
    parser.add_argument("--padding", type=int, default=DEFAULT_PADDING)
    parser.add_argument("--sort", choices=[m.value for m in SortMode],
                        default=SortMode.DEFAULT.value,
                        help="order of stickers in the overlay, JSON and individual files")
    parser.add_argument("--save-overlay", type=str, default=None)
    parser.add_argument("--save-json", type=str, default=None)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = SliceConfig(args.threshold, args.min_size, args.padding).validate()
    except InvalidConfig as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2

    result = slice_image(args.image, config)
    if not result.found:
        print("No stickers found. Try lowering the threshold or minimum size.")
        return 1

    raster = result.raster
    # The archive keeps discovery order; --sort applies to the other outputs
    pack_stickers(raster, result.regions.regions(), args.out)
    print(f"Saved {result.regions.total} stickers to {args.out}")

    regions = [r for _, r in result.regions.ordered(args.sort)]

    if args.individual:
        save_stickers(raster, regions, args.individual)
        print(f"Saved individual stickers to {args.individual}")

    if args.save_overlay:
        parent = os.path.dirname(args.save_overlay)
        if parent:
            os.makedirs(parent, exist_ok=True)
        cv2.imwrite(args.save_overlay, draw_overlay(raster, regions))

    if args.save_json:
        regions_to_json(regions, args.save_json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
