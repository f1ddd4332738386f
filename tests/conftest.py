import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def make_frame():
    """Constant-valued uint8 frame factory: make_frame(value, width, height, channels)."""

    def _make(value, width=16, height=12, channels=3):
        return np.full((height, width, channels), value, dtype=np.uint8)

    return _make


@pytest.fixture
def write_image(tmp_path):
    """Write an array to tmp_path/<name> with Pillow and return the path as str."""

    def _write(name, array, directory=None):
        target = (directory or tmp_path) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]
        Image.fromarray(array).save(target)
        return str(target)

    return _write
