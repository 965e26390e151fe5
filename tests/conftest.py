import numpy as np
import pytest
from PIL import Image


def gradient(width, height, mode="RGB"):
    """An image where every pixel is different, so crops can be compared."""
    xs = np.arange(width, dtype=np.uint32)
    ys = np.arange(height, dtype=np.uint32)
    grid = ys[:, None] * width + xs[None, :]
    arr = np.stack(
        [grid % 256, (grid // 256) % 256, (grid * 7) % 256], axis=-1
    ).astype(np.uint8)
    image = Image.fromarray(arr)
    return image.convert(mode) if mode != "RGB" else image


@pytest.fixture
def make_image(tmp_path):
    def _make(name="photo.png", size=(16, 16), mode="RGB", directory=None):
        directory = directory or tmp_path / "input"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        gradient(*size, mode=mode).save(path)
        return path
    return _make


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"
