import numpy as np
import pytest
from PIL import Image

from bracket_fusion.errors import DecodeFailure, GeometryMismatchUnrecoverable
from bracket_fusion.frame import as_frame, frame_size, load_frame, resize_frame, subsample_factor


def test_as_frame_views_grayscale_as_single_channel():
    gray = np.arange(12, dtype=np.uint8).reshape(3, 4)
    frame = as_frame(gray)
    assert frame.shape == (3, 4, 1)
    assert np.shares_memory(frame, gray)


def test_as_frame_rejects_empty_channels():
    with pytest.raises(DecodeFailure):
        as_frame(np.zeros((3, 4, 0), dtype=np.uint8))


def test_frame_size_is_width_height(make_frame):
    assert frame_size(make_frame(0, width=7, height=5)) == (7, 5)


@pytest.mark.parametrize("channels", [1, 2, 3, 4, 5])
def test_resize_frame_preserves_every_channel(channels):
    values = np.array([200, 100, 50, 0, 255][:channels], dtype=np.uint8)
    frame = np.broadcast_to(values, (6, 8, channels)).copy()

    out = resize_frame(frame, 16, 12)

    assert out.shape == (12, 16, channels)
    assert out.dtype == np.uint8
    np.testing.assert_array_equal(out, np.broadcast_to(values, (12, 16, channels)))


@pytest.mark.parametrize("size", [(16, 16), (4, 4)])
def test_resize_frame_does_not_treat_fourth_channel_as_alpha(size):
    frame = np.broadcast_to(np.array([200, 100, 50, 0], dtype=np.uint8), (8, 8, 4)).copy()
    out = resize_frame(frame, *size)
    np.testing.assert_array_equal(out[0, 0], [200, 100, 50, 0])


def test_resize_frame_partial_fourth_channel_keeps_colour():
    frame = np.broadcast_to(np.array([201, 99, 37, 3], dtype=np.uint8), (5, 7, 4)).copy()
    out = resize_frame(frame, 14, 10)
    assert np.all(out == np.array([201, 99, 37, 3], dtype=np.uint8))


def test_resize_to_zero_area_is_unrecoverable(make_frame):
    with pytest.raises(GeometryMismatchUnrecoverable):
        resize_frame(make_frame(0), 0, 10)


@pytest.mark.parametrize("width, height, expected", [
    (1000, 1000, 1),
    (2049, 10, 1),
    (4096, 3000, 2),
    (5000, 5000, 2),
    (9000, 100, 4),
])
def test_subsample_factor(width, height, expected):
    assert subsample_factor(width, height, 2048) == expected


def test_load_frame_subsamples_large_images(make_frame, write_image):
    path = write_image('big.png', make_frame(60, width=100, height=60))
    assert load_frame(path, max_dimension=20).shape == (15, 25, 3)
    assert load_frame(path, max_dimension=None).shape == (60, 100, 3)


def test_load_frame_grayscale(tmp_path):
    path = tmp_path / 'gray.png'
    Image.new('L', (5, 4), 30).save(path)
    frame = load_frame(str(path))
    assert frame.shape == (4, 5, 1)
    assert np.all(frame == 30)


def test_load_frame_converts_palette_images(tmp_path):
    path = tmp_path / 'palette.png'
    Image.new('RGB', (6, 6), (10, 20, 30)).convert('P').save(path)
    assert load_frame(str(path)).shape == (6, 6, 3)


def test_load_frame_missing_or_corrupt(tmp_path):
    with pytest.raises(DecodeFailure):
        load_frame(str(tmp_path / 'missing.jpg'))
    corrupt = tmp_path / 'corrupt.png'
    corrupt.write_bytes(b'\x89PNG garbage')
    with pytest.raises(DecodeFailure):
        load_frame(str(corrupt))


def test_load_frame_subsampling_keeps_colour_under_zero_alpha(tmp_path):
    path = tmp_path / 'transparent.png'
    Image.new('RGBA', (100, 60), (200, 100, 50, 0)).save(path)
    frame = load_frame(str(path), max_dimension=20)
    assert frame.shape == (15, 25, 4)
    assert np.all(frame == np.array([200, 100, 50, 0], dtype=np.uint8))
