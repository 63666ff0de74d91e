from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from styleforge import DecodeFailure, Effect, decode_image, encode_image, output_filename, transform
from styleforge.utils.bitmap import new_bitmap
from styleforge.utils.loader import EncodedImage, load_image, save_image


@pytest.mark.parametrize("effect", ["pixel", Effect.VINTAGE, "no-such-effect"])
def test_transform_produces_jpeg_of_same_size(make_encoded, effect):
    out = transform(make_encoded(33, 17), effect)
    assert out.data[:2] == b"\xff\xd8"
    assert out.quality == 0.9
    with Image.open(io.BytesIO(out.data)) as im:
        assert im.size == (33, 17)


def test_transform_unknown_effect_keeps_pixels(make_encoded):
    src = make_encoded(16, 16, color=(200, 40, 90))
    arr = decode_image(transform(src, "nope"))
    assert np.all(np.abs(arr[:, :, :3].astype(int) - (200, 40, 90)) <= 3)


def test_transform_corrupt_input():
    with pytest.raises(DecodeFailure):
        transform(b"\x00\x01\x02", "hd")


def test_output_filename():
    assert output_filename("oil") == "transformed-oil.jpg"
    assert output_filename(Effect.NEON) == "transformed-neon.jpg"
    assert output_filename("../x/y") == "transformed-..xy.jpg"


def test_encode_image_quality_affects_size():
    rng = np.random.default_rng(0)
    img = rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8)
    img[:, :, 3] = 255
    low = encode_image(img, 0.1)
    high = encode_image(img, 1.0)
    assert len(low) < len(high)
    assert (high.width, high.height) == (64, 64)
    with pytest.raises(ValueError):
        encode_image(img, 0.0)


def test_encode_image_rejects_rgb():
    with pytest.raises(ValueError):
        encode_image(np.zeros((2, 2, 3), dtype=np.uint8), 0.9)


def test_load_and_save_roundtrip(tmp_path):
    data = encode_image(new_bitmap(4, 4, (9, 9, 9)), 0.9)
    path = save_image(data, tmp_path / "x.jpg")
    loaded = load_image(path)
    assert isinstance(loaded, EncodedImage)
    assert loaded.data == data.data
    assert loaded.quality is None
