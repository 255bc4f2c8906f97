"""Tests for configuration and YAML persistence."""

import pytest

from cartoonizer.config import (
    CartoonConfig,
    HalftoneConfig,
    config_from_dict,
    load_config,
    save_config,
)


def test_defaults_are_valid():
    config = CartoonConfig()
    config.validate()
    assert config.halftone.screen_angles == (0.0, 33.0, 66.0)
    assert config.halftone.spacing == (7.0, 7.0)
    assert config.halftone.max_radius == 7.5
    assert config.use_halftone is False


def test_save_and_load(tmp_path):
    path = tmp_path / "cartoon.yaml"
    config = CartoonConfig(
        color_radius=30.0,
        use_halftone=True,
        halftone=HalftoneConfig(screen_angles=(15.0, 45.0, 75.0), parallel=True),
    )
    save_config(config, path)
    assert load_config(path) == config


def test_partial_mapping_keeps_defaults():
    config = config_from_dict({"halftone": {"max_radius": 5.0}})
    assert config.halftone.max_radius == 5.0
    assert config.halftone.median_kernel_size == 7
    assert config.spatial_radius == 10.0


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == CartoonConfig()


def test_unknown_keys_rejected():
    with pytest.raises(ValueError, match="colour_radius"):
        config_from_dict({"colour_radius": 3})
    with pytest.raises(ValueError, match="angles"):
        config_from_dict({"halftone": {"angles": [0, 1, 2]}})


@pytest.mark.parametrize(
    "halftone",
    [
        {"median_kernel_size": 4},
        {"upsample_factor": 0},
        {"spacing": [7, 0]},
        {"max_radius": 0},
        {"screen_angles": [0, 33, 66, 99]},
    ],
)
def test_invalid_halftone_values(halftone):
    with pytest.raises(ValueError):
        config_from_dict({"halftone": halftone})


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config(path)
