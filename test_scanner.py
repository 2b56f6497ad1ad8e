"""Test the connected-component scan."""

import cv2
import numpy as np

from stickers.raster import Raster
from stickers.region import RawBounds
from stickers.scanner import scan
from stickers.synthetic import generate_synthetic_atlas


def make_raster(width, height, blocks, value=255):
    """Transparent raster with opaque (x, y, w, h) blocks."""
    alpha = np.zeros((height, width), dtype=np.uint8)
    for x, y, w, h in blocks:
        alpha[y:y + h, x:x + w] = value
    return Raster.from_alpha(alpha)


def components_by_seed(alpha, threshold):
    """OpenCV 4-connected labels ordered by their first pixel in row-major order."""
    mask = (alpha >= threshold).astype(np.uint8)
    _, labels = cv2.connectedComponents(mask, connectivity=4)
    flat = labels.ravel()
    first = {}
    for idx in np.flatnonzero(flat):
        first.setdefault(int(flat[idx]), int(idx))
    ordered = sorted(first, key=first.get)
    return [np.nonzero(labels == label) for label in ordered]


def test_two_blocks_in_discovery_order():
    raster = make_raster(10, 10, [(1, 1, 2, 2), (6, 6, 2, 2)])

    components = scan(raster, 128)

    assert components == [RawBounds(1, 1, 2, 2), RawBounds(6, 6, 7, 7)]
    assert components[0].w == 2 and components[0].h == 2


def test_seed_order_is_row_major():
    # The right block starts on a higher row, so it is found first
    raster = make_raster(20, 20, [(2, 5, 3, 3), (12, 1, 3, 8)])

    components = scan(raster, 1)

    assert [c.min_x for c in components] == [12, 2]


def test_empty_raster():
    assert scan(Raster.from_alpha(np.zeros((0, 7), dtype=np.uint8)), 1) == []
    assert scan(Raster.from_alpha(np.zeros((7, 0), dtype=np.uint8)), 1) == []


def test_fully_transparent():
    assert scan(make_raster(8, 8, []), 1) == []


def test_threshold_is_inclusive():
    alpha = np.zeros((5, 5), dtype=np.uint8)
    alpha[2, 2] = 128
    alpha[0, 0] = 127
    raster = Raster.from_alpha(alpha)

    assert scan(raster, 128) == [RawBounds(2, 2, 2, 2)]
    assert len(scan(raster, 127)) == 2


def test_checkerboard_is_not_merged():
    alpha = np.zeros((4, 4), dtype=np.uint8)
    alpha[::2, ::2] = 255
    alpha[1::2, 1::2] = 255
    raster = Raster.from_alpha(alpha)

    components = scan(raster, 1)

    assert len(components) == 8
    assert all(c.w == 1 and c.h == 1 for c in components)


def test_diagonal_touch_is_two_components():
    raster = make_raster(6, 6, [(0, 0, 2, 2), (2, 2, 2, 2)])

    assert scan(raster, 1) == [RawBounds(0, 0, 1, 1), RawBounds(2, 2, 3, 3)]


def test_concave_shape_tight_bounds():
    # U shape: the fill must walk back up the right arm
    alpha = np.zeros((10, 10), dtype=np.uint8)
    alpha[2:8, 2] = 255
    alpha[7, 2:8] = 255
    alpha[1:8, 7] = 255
    raster = Raster.from_alpha(alpha)

    assert scan(raster, 1) == [RawBounds(2, 1, 7, 7)]


def test_large_region_does_not_recurse():
    raster = Raster.from_alpha(np.full((400, 400), 255, dtype=np.uint8))

    assert scan(raster, 255) == [RawBounds(0, 0, 399, 399)]


def test_raster_is_not_modified():
    raster = make_raster(10, 10, [(1, 1, 3, 3)])
    before = raster.pixels.copy()

    scan(raster, 1)

    assert np.array_equal(raster.pixels, before)


def test_repeated_scans_are_identical():
    img, _ = generate_synthetic_atlas(120, 90, count=6, seed=3)
    raster = Raster(img)

    assert scan(raster, 1) == scan(raster, 1)


def test_components_disjoint_and_tight_on_random_raster():
    rng = np.random.default_rng(7)
    alpha = (rng.random((40, 50)) < 0.45).astype(np.uint8) * 200
    raster = Raster.from_alpha(alpha)

    components = scan(raster, 100)

    members = components_by_seed(alpha, 100)
    assert len(components) == len(members)

    owner = np.zeros(alpha.shape, dtype=np.int32)
    for i, (c, (ys, xs)) in enumerate(zip(components, members), 1):
        # every member pixel assigned once
        assert not owner[ys, xs].any()
        owner[ys, xs] = i
        # extrema are exact
        assert (xs.min(), ys.min(), xs.max(), ys.max()) == (c.min_x, c.min_y, c.max_x, c.max_y)

    assert np.count_nonzero(owner) == np.count_nonzero(alpha >= 100)


def test_matches_opencv_stats_on_synthetic_atlas():
    img, truth = generate_synthetic_atlas(300, 200, count=10, seed=11)
    raster = Raster(img)

    components = scan(raster, 1)

    _, _, stats, _ = cv2.connectedComponentsWithStats(
        (img[:, :, 3] > 0).astype(np.uint8), connectivity=4)
    expected = sorted((int(s[0]), int(s[1]), int(s[2]), int(s[3])) for s in stats[1:])
    found = sorted((c.min_x, c.min_y, c.w, c.h) for c in components)
    assert found == expected
    assert components == truth


if __name__ == "__main__":
    test_two_blocks_in_discovery_order()
    test_checkerboard_is_not_merged()
    test_components_disjoint_and_tight_on_random_raster()
    print("✓ Scanner tests completed!")
