import pytest

from pyimgset.config.loader import DEFAULT_EXTENSIONS, LoaderConfig


def test_loader_config_defaults():
    cfg = LoaderConfig.from_dict({})
    assert cfg == LoaderConfig()
    assert cfg.scale_to == -1
    assert cfg.scale == 255.0
    assert cfg.crop is None
    assert cfg.extensions == DEFAULT_EXTENSIONS


def test_loader_config_parses_values():
    cfg = LoaderConfig.from_dict(
        {
            "scale_to": "64",
            "scale": 1,
            "crop": [32, 24],
            "mean": [0.4, 0.5, 0.6],
            "std": [0.2, 0.2, 0.2],
            "batch_size": 8,
            "first_label": 1,
            "extensions": ["PNG", ".jpg"],
        }
    )
    assert cfg.scale_to == 64
    assert cfg.scale == 1.0
    assert cfg.crop == (32, 24)
    assert cfg.mean == (0.4, 0.5, 0.6)
    assert cfg.batch_size == 8
    assert cfg.first_label == 1
    assert cfg.extensions == (".png", ".jpg")


def test_loader_config_rejects_unknown_keys():
    with pytest.raises(ValueError, match="Unknown loader config keys"):
        LoaderConfig.from_dict({"scale_too": 3})


def test_loader_config_rejects_non_mapping():
    with pytest.raises(ValueError, match="dict/object"):
        LoaderConfig.from_dict([("scale_to", 3)])


@pytest.mark.parametrize(
    "payload,match",
    [
        ({"scale_to": 0}, "scale_to"),
        ({"scale_to": -2}, "scale_to"),
        ({"scale": 0}, "scale"),
        ({"crop": [32]}, "crop"),
        ({"crop": [0, 4]}, "crop"),
        ({"mean": [0.5, 0.5, 0.5]}, "together"),
        ({"mean": [0.5], "std": [0.5]}, "3 floats"),
        ({"std": [0.5, 0.5]}, "3 floats"),
        ({"mean": [0.5, 0.5, 0.5], "std": [0.1, 0.0, 0.1]}, "non-zero"),
        ({"batch_size": 0}, "batch_size"),
        ({"batch_size": True}, "batch_size"),
        ({"extensions": "png"}, "extensions"),
    ],
)
def test_loader_config_validation_errors(payload, match):
    with pytest.raises(ValueError, match=match):
        LoaderConfig.from_dict(payload)
