"""Test the complete sticker extraction pipeline and atlas session."""

import io
import os
import zipfile

import cv2
import numpy as np
import pytest

from stickers.config import InvalidConfig, SliceConfig
from stickers.main import AtlasSession, SliceStatus, slice_atlas, slice_image
from stickers.raster import Raster
from stickers.region import ExtractedRegion
from stickers.synthetic import generate_synthetic_atlas


def two_block_raster():
    alpha = np.zeros((10, 10), dtype=np.uint8)
    alpha[1:3, 1:3] = 255
    alpha[6:8, 6:8] = 255
    return Raster.from_alpha(alpha)


def test_two_blocks():
    result = slice_atlas(two_block_raster(), SliceConfig(128, 1, 0))

    assert result.status is SliceStatus.FOUND
    assert result.found
    assert result.component_count == 2
    assert result.regions.regions() == [ExtractedRegion(1, 1, 2, 2, True),
                                        ExtractedRegion(6, 6, 2, 2, True)]


def test_two_blocks_filtered_out():
    result = slice_atlas(two_block_raster(), SliceConfig(128, 3, 0))

    assert result.status is SliceStatus.NOT_FOUND
    assert result.component_count == 2
    assert result.regions.total == 0


def test_single_pixel_at_origin():
    alpha = np.zeros((5, 5), dtype=np.uint8)
    alpha[0, 0] = 255

    result = slice_atlas(Raster.from_alpha(alpha), SliceConfig(128, 1, 2))

    assert result.regions.regions() == [ExtractedRegion(0, 0, 3, 3, True)]


def test_empty_raster_status():
    result = slice_atlas(Raster.from_alpha(np.zeros((0, 10), dtype=np.uint8)))

    assert result.status is SliceStatus.EMPTY_RASTER
    assert result.regions.total == 0


def test_transparent_raster_not_found():
    result = slice_atlas(Raster.from_alpha(np.zeros((20, 20), dtype=np.uint8)))

    assert result.status is SliceStatus.NOT_FOUND
    assert result.component_count == 0


def test_invalid_config_rejected_before_scan():
    with pytest.raises(InvalidConfig):
        slice_atlas(two_block_raster(), SliceConfig(0, 1, 0))


def test_synthetic_atlas_recovered():
    img, truth = generate_synthetic_atlas(320, 240, count=9, seed=4, min_size=20)

    result = slice_atlas(Raster(img), SliceConfig(15, 20, 0))

    assert [r.to_bbox() for r in result.regions] == \
        [(b.min_x, b.min_y, b.w, b.h) for b in truth]


def test_slice_image(tmp_path):
    img, truth = generate_synthetic_atlas(200, 150, count=4, seed=2, min_size=20)
    path = os.path.join(str(tmp_path), "atlas.png")
    cv2.imwrite(path, img)

    result = slice_image(path, SliceConfig(1, 20, 2))

    assert result.regions.total == len(truth)
    assert result.raster.width == 200


def test_session_lifecycle():
    session = AtlasSession()
    with pytest.raises(RuntimeError):
        session.process()

    session.load(two_block_raster())
    result = session.process(SliceConfig(128, 1, 0))
    assert result.regions is session.regions
    assert session.status is SliceStatus.FOUND
    assert session.regions.total == 2

    session.regions.toggle_selection(1)
    data = session.export_selected(None)
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.namelist() == ["sticker_1.png"]

    # loading a new atlas drops the old regions
    session.load(two_block_raster())
    assert session.regions.total == 0
    assert session.status is None


def test_session_reprocess_replaces_regions():
    session = AtlasSession()
    session.load(two_block_raster())
    session.process(SliceConfig(128, 1, 0))

    session.process(SliceConfig(128, 3, 0))

    assert session.regions.total == 0
    assert session.status is SliceStatus.NOT_FOUND


def test_session_invalid_config_keeps_regions():
    session = AtlasSession()
    session.load(two_block_raster())
    session.process(SliceConfig(128, 1, 0))

    with pytest.raises(InvalidConfig):
        session.process(SliceConfig(128, -1, 0))

    assert session.regions.total == 2


def test_session_export_nothing_selected():
    session = AtlasSession()
    session.load(two_block_raster())
    session.process(SliceConfig(128, 1, 0))
    session.regions.deselect_all()

    assert session.export_selected(None) is None


def test_session_clear():
    session = AtlasSession()
    session.load(two_block_raster())
    session.process(SliceConfig(128, 1, 0))

    session.clear()

    assert session.raster is None
    assert session.regions.total == 0


def test_opaque_fraction_reported():
    result = slice_atlas(two_block_raster(), SliceConfig(128, 1, 0))

    assert result.opaque_fraction == pytest.approx(0.08)


def test_session_ids_restart_per_atlas():
    session = AtlasSession()
    session.load(two_block_raster())
    session.process(SliceConfig(128, 1, 0))
    assert session.regions.ids() == [1, 2]

    session.load(two_block_raster())
    session.process(SliceConfig(128, 1, 0))
    assert session.regions.ids() == [1, 2]

    session.process(SliceConfig(128, 1, 0))
    assert session.regions.ids() == [1, 2]


if __name__ == "__main__":
    test_two_blocks()
    test_single_pixel_at_origin()
    print("✓ Pipeline tests completed!")
