from __future__ import annotations

import numpy as np
import pytest

from styleforge.effects import EFFECTS, PIXEL_BLOCK, Effect, apply
from styleforge.effects.anime import luminance_threshold
from styleforge.utils.bitmap import new_bitmap


@pytest.mark.parametrize("effect", EFFECTS)
def test_effect_preserves_shape_and_is_deterministic(rgba_image, effect):
    before = rgba_image.copy()
    a = apply(rgba_image, effect)
    b = apply(rgba_image, effect)
    assert a.shape == rgba_image.shape
    assert a.dtype == np.uint8
    assert a.tobytes() == b.tobytes()
    np.testing.assert_array_equal(rgba_image, before)


@pytest.mark.parametrize("effect", list(Effect))
def test_effect_handles_single_pixel(effect):
    img = new_bitmap(1, 1, (123, 45, 67))
    out = apply(img, effect)
    assert out.shape == (1, 1, 4)


@pytest.mark.parametrize("effect", ["not-a-real-effect", "", "OIL", None, 7])
def test_unknown_effect_passes_through(rgba_image, effect):
    out = apply(rgba_image, effect)
    np.testing.assert_array_equal(out, rgba_image)
    assert out is not rgba_image


def test_effect_accepts_enum_and_string(rgba_image):
    np.testing.assert_array_equal(apply(rgba_image, Effect.HD), apply(rgba_image, "hd"))


def test_effect_parse():
    assert Effect.parse("neon") is Effect.NEON
    assert Effect.parse(Effect.OIL) is Effect.OIL
    assert Effect.parse("sketch") is None
    assert Effect.parse(None) is None
    assert str(Effect.GHIBLI) == "ghibli"
    assert EFFECTS == ("ghibli", "hd", "anime", "pixel", "vintage", "neon", "oil")


def test_apply_rejects_non_bitmaps():
    with pytest.raises(ValueError):
        apply(np.zeros((4, 4, 3), dtype=np.uint8), "hd")
    with pytest.raises(TypeError):
        apply(np.zeros((4, 4, 4), dtype=np.float32), "hd")


def test_anime_light_gray_becomes_white():
    out = apply(new_bitmap(2, 2, (200, 200, 200)), "anime")
    assert np.all(out[:, :, :3] == 255)


def test_anime_dark_gray_becomes_black():
    out = apply(new_bitmap(2, 2, (40, 40, 40)), "anime")
    assert np.all(out[:, :, :3] == 0)


def test_anime_output_is_binary_and_keeps_alpha(rgba_image):
    img = rgba_image.copy()
    img[:, :, 3] = 77
    out = apply(img, Effect.ANIME)
    rgb = out[:, :, :3]
    assert np.all((rgb == 0) | (rgb == 255))
    assert np.all(rgb[:, :, 0] == rgb[:, :, 1])
    assert np.all(rgb[:, :, 1] == rgb[:, :, 2])
    assert np.all(out[:, :, 3] == 77)
    assert 0 < np.count_nonzero(rgb[:, :, 0]) < rgb[:, :, 0].size


def test_luminance_threshold_boundary():
    img = np.zeros((1, 3, 4), dtype=np.uint8)
    img[0, 0, :3] = (127, 127, 127)  # mean 127 -> black
    img[0, 1, :3] = (127, 127, 128)  # mean 127.33 -> white
    img[0, 2, :3] = (255, 0, 127)  # mean 127.33 -> white
    out = luminance_threshold(img)
    assert list(out[0, :, 0]) == [0, 255, 255]


def test_pixel_blocks_are_uniform(rgba_image):
    out = apply(rgba_image, Effect.PIXEL)
    h, w = out.shape[:2]
    for y0 in range(0, h, PIXEL_BLOCK):
        for x0 in range(0, w, PIXEL_BLOCK):
            block = out[y0:y0 + PIXEL_BLOCK, x0:x0 + PIXEL_BLOCK].reshape(-1, 4)
            assert np.all(block == block[0])


def test_pixel_block_is_the_block_mean():
    img = new_bitmap(16, 8, (0, 0, 0))
    img[:, 8:, :3] = 255
    img[0, 0, :3] = 128  # left block mean = 128 / 64 = 2
    out = apply(img, "pixel")
    assert tuple(out[5, 3, :3]) == (2, 2, 2)
    assert tuple(out[5, 12, :3]) == (255, 255, 255)


def test_pixel_smaller_than_one_block():
    img = np.zeros((3, 5, 4), dtype=np.uint8)
    img[:, :, 0] = np.arange(5, dtype=np.uint8) * 10  # mean 20
    img[:, :, 3] = 255
    out = apply(img, "pixel")
    assert np.all(out[:, :, 0] == 20)
    assert np.all(out[:, :, 3] == 255)


def test_vintage_tints_gray_warm():
    out = apply(new_bitmap(6, 6, (128, 128, 128)), Effect.VINTAGE)
    r, g, b = (int(v) for v in out[3, 3, :3])
    assert r > g > b


def test_ghibli_brightens_midtones():
    img = new_bitmap(2, 2, (100, 110, 120))
    out = apply(img, Effect.GHIBLI)
    assert out[:, :, :3].astype(int).sum() > img[:, :, :3].astype(int).sum()


def test_hd_increases_contrast():
    img = new_bitmap(2, 1, (60, 60, 60))
    img[0, 1, :3] = 190
    out = apply(img, Effect.HD).astype(int)
    assert out[0, 1, 0] - out[0, 0, 0] > 190 - 60


def test_neon_on_black_shows_blue_wash():
    out = apply(new_bitmap(3, 3, (0, 0, 0)), Effect.NEON)
    r, g, b = (int(v) for v in out[1, 1, :3])
    assert r == 0
    assert abs(g - 15) <= 1
    assert abs(b - 26) <= 1
    assert out[1, 1, 3] == 255


def test_neon_screen_never_darkens(rgba_image):
    from styleforge.effects.tone import NEON_CHAIN, apply_chain

    toned = apply_chain(rgba_image, NEON_CHAIN).astype(int)
    out = apply(rgba_image, Effect.NEON).astype(int)
    assert np.all(out[:, :, :3] >= toned[:, :, :3])
