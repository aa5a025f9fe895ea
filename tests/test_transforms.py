import numpy as np
import pytest

from pyimgset.images import GreyImage, RGBImage
from pyimgset.transforms import (
    Compose,
    center_crop,
    compute_mean_std,
    hflip,
    normalize,
    random_crop,
)


def test_compute_mean_std_per_channel():
    a = RGBImage(np.array([0, 1, 2], dtype=np.float32), 1, 1)
    b = RGBImage(np.array([2, 3, 4], dtype=np.float32), 1, 1)

    mean, std = compute_mean_std([a, b])

    assert mean == pytest.approx((1.0, 2.0, 3.0))
    assert std == pytest.approx((1.0, 1.0, 1.0))


def test_compute_mean_std_rejects_mixed_or_empty():
    with pytest.raises(ValueError):
        compute_mean_std([])
    with pytest.raises(ValueError, match="single type"):
        compute_mean_std([GreyImage(width=1, height=1), RGBImage(width=1, height=1)])


def test_normalize_in_place():
    img = GreyImage(np.array([2.0, 4.0]), 2, 1)

    out = normalize(img, [1.0], [2.0])

    assert out is img
    assert img.content.tolist() == [0.5, 1.5]


def test_normalize_rgb_uses_channel_order():
    img = RGBImage(np.array([1, 2, 3, 5, 6, 7], dtype=np.float32), 2, 1)
    normalize(img, [1, 2, 3], [1, 2, 4])
    assert img.content.tolist() == [0, 0, 0, 4, 2, 1]


def test_normalize_validates_arguments():
    img = RGBImage(width=1, height=1)
    with pytest.raises(ValueError):
        normalize(img, [0.5], [0.5])
    with pytest.raises(ValueError, match="non-zero"):
        normalize(img, [0, 0, 0], [1, 0, 1])


def test_center_crop_returns_new_image_of_same_type():
    img = GreyImage(np.arange(12), 4, 3, label=7.0)

    out = center_crop(img, 2, 1)

    assert isinstance(out, GreyImage)
    assert out is not img
    assert (out.width, out.height, out.label) == (2, 1, 7.0)
    assert out.content.tolist() == [5, 6]


def test_random_crop_stays_inside_image():
    img = RGBImage(np.arange(4 * 4 * 3), 4, 4)
    rng = np.random.default_rng(0)

    for _ in range(10):
        out = random_crop(img, 2, 3, rng=rng)
        assert (out.width, out.height) == (2, 3)
        first = int(out.content[0]) // 3
        top, left = divmod(first, 4)
        expected = img.to_hwc()[top : top + 3, left : left + 2].reshape(-1)
        assert out.content.tolist() == expected.tolist()


def test_random_crop_full_size_is_identity():
    img = GreyImage(np.arange(6), 3, 2)
    out = random_crop(img, 3, 2)
    assert out.content.tolist() == img.content.tolist()


def test_crop_larger_than_image_raises():
    img = GreyImage(width=2, height=2)
    with pytest.raises(ValueError):
        center_crop(img, 3, 1)
    with pytest.raises(ValueError):
        random_crop(img, 0, 1)


def test_hflip_mirrors_pixels_in_place():
    img = RGBImage(np.arange(6, dtype=np.float32), 2, 1)

    assert hflip(img) is img
    assert img.content.tolist() == [3, 4, 5, 0, 1, 2]


def test_compose_applies_in_order():
    img = GreyImage(np.array([1.0, 3.0]), 2, 1)
    pipeline = Compose([hflip, lambda im: normalize(im, [1.0], [2.0])])

    out = pipeline(img)

    assert out.content.tolist() == [1.0, 0.0]
