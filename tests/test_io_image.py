from __future__ import annotations

import cv2
import numpy as np
import pytest

from pyimgset.io.image import decode_image_bytes, resize_image, scaled_size, write_image


@pytest.mark.parametrize(
    "width,height,scale_to,expected",
    [
        (40, 20, -1, (40, 20)),
        (40, 20, 10, (20, 10)),
        (20, 30, 8, (8, 12)),
        (16, 16, 4, (4, 4)),
        (3, 7, 2, (2, 4)),
    ],
)
def test_scaled_size_scales_short_side(width, height, scale_to, expected):
    assert scaled_size(width, height, scale_to) == expected


def test_scaled_size_rejects_bad_target():
    with pytest.raises(ValueError):
        scaled_size(4, 4, 0)


def test_decode_image_bytes_png_bgr() -> None:
    bgr = np.zeros((2, 3, 3), dtype=np.uint8)
    bgr[0, 1] = [10, 20, 30]
    ok, encoded = cv2.imencode(".png", bgr)
    assert ok

    decoded = decode_image_bytes(encoded.tobytes())
    assert decoded.shape == (2, 3, 3)
    assert decoded.dtype == np.uint8
    assert decoded[0, 1].tolist() == [10, 20, 30]


def test_decode_image_bytes_expands_grey_and_16bit() -> None:
    grey16 = np.full((2, 2), 65535, dtype=np.uint16)
    ok, encoded = cv2.imencode(".png", grey16)
    assert ok

    decoded = decode_image_bytes(encoded.tobytes())
    assert decoded.shape == (2, 2, 3)
    assert decoded.dtype == np.uint8
    assert int(decoded.min()) == 255


def test_decode_image_bytes_composites_alpha_over_black() -> None:
    bgra = np.zeros((1, 2, 4), dtype=np.uint8)
    bgra[0, 0] = [10, 20, 30, 255]
    bgra[0, 1] = [10, 20, 30, 0]
    ok, encoded = cv2.imencode(".png", bgra)
    assert ok

    decoded = decode_image_bytes(encoded.tobytes())
    assert decoded[0, 0].tolist() == [10, 20, 30]
    assert decoded[0, 1].tolist() == [0, 0, 0]


@pytest.mark.parametrize("payload", [b"", b"not an image at all"])
def test_decode_image_bytes_rejects_garbage(payload) -> None:
    with pytest.raises(ValueError):
        decode_image_bytes(payload)


def test_resize_image_uses_wh_order() -> None:
    img = np.zeros((10, 20, 3), dtype=np.uint8)
    out = resize_image(img, (5, 4))
    assert out.shape == (4, 5, 3)
    assert resize_image(img, (20, 10)) is img


def test_write_image_encodes_jpeg_regardless_of_extension(tmp_path) -> None:
    img = np.full((4, 4, 3), 128, dtype=np.uint8)
    out = write_image(tmp_path / "nested" / "x.png", img)

    assert out.exists()
    assert out.read_bytes()[:2] == b"\xff\xd8"


def test_write_image_png_is_lossless(tmp_path) -> None:
    img = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
    out = write_image(tmp_path / "x.png", img, format="png")

    loaded = cv2.imread(str(out), cv2.IMREAD_COLOR)
    assert np.array_equal(loaded, img)
