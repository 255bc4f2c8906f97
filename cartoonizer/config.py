"""Pipeline parameters and their YAML persistence."""

from dataclasses import asdict, dataclass, field, fields
from typing import Optional, Tuple

import yaml


@dataclass
class HalftoneConfig:
    """Parameters of the per-channel halftone screen."""

    median_kernel_size: int = 7
    upsample_factor: int = 2
    spacing: Tuple[float, float] = (7.0, 7.0)
    offset: Tuple[float, float] = (0.0, 0.0)
    max_radius: float = 7.5
    # Screen angle in degrees for channels 0, 1, 2
    screen_angles: Tuple[float, float, float] = (0.0, 33.0, 66.0)
    strict: bool = True
    parallel: bool = False

    def validate(self):
        if self.median_kernel_size < 3 or self.median_kernel_size % 2 == 0:
            raise ValueError(
                f"median_kernel_size must be an odd number >= 3, got {self.median_kernel_size}"
            )
        if int(self.upsample_factor) != self.upsample_factor or self.upsample_factor < 1:
            raise ValueError(f"upsample_factor must be a positive integer, got {self.upsample_factor}")
        if len(self.spacing) != 2 or min(self.spacing) <= 0:
            raise ValueError(f"spacing must be two positive numbers, got {self.spacing}")
        if len(self.offset) != 2:
            raise ValueError(f"offset must be two numbers, got {self.offset}")
        if self.max_radius <= 0:
            raise ValueError(f"max_radius must be positive, got {self.max_radius}")
        if len(self.screen_angles) != 3:
            raise ValueError(
                f"screen_angles needs exactly one angle per channel (3), got {len(self.screen_angles)}"
            )


@dataclass
class CartoonConfig:
    """Parameters of the cartoon effect stages."""

    # Mean-shift segmentation
    spatial_radius: float = 10.0
    color_radius: float = 20.0
    max_pyramid_level: int = 1

    # Anisotropic diffusion
    diffusion_alpha: float = 0.05
    diffusion_k: float = 0.1
    diffusion_iterations: int = 10

    # Edges
    threshold_block_size: int = 9
    threshold_c: float = 9.0
    dilate_kernel_size: int = 3
    dilate_iterations: int = 1

    max_size: Optional[int] = None
    use_halftone: bool = False
    halftone: HalftoneConfig = field(default_factory=HalftoneConfig)

    def validate(self):
        if self.threshold_block_size < 3 or self.threshold_block_size % 2 == 0:
            raise ValueError(
                f"threshold_block_size must be an odd number >= 3, got {self.threshold_block_size}"
            )
        if self.dilate_kernel_size < 1:
            raise ValueError(f"dilate_kernel_size must be positive, got {self.dilate_kernel_size}")
        if self.diffusion_iterations < 0 or self.dilate_iterations < 0:
            raise ValueError("iteration counts must be non-negative")
        if self.max_size is not None and self.max_size < 1:
            raise ValueError(f"max_size must be positive, got {self.max_size}")
        self.halftone.validate()


def _known_keys(cls, data, section):
    unknown = set(data) - {f.name for f in fields(cls)}
    if unknown:
        raise ValueError(f"Unknown {section} keys: {', '.join(sorted(unknown))}")


def config_from_dict(data):
    """Build a validated CartoonConfig from a plain dict; missing keys keep defaults."""
    data = dict(data or {})
    _known_keys(CartoonConfig, data, "cartoon")

    halftone_data = dict(data.pop("halftone", None) or {})
    _known_keys(HalftoneConfig, halftone_data, "halftone")
    for key in ("spacing", "offset", "screen_angles"):
        if key in halftone_data:
            halftone_data[key] = tuple(halftone_data[key])

    config = CartoonConfig(**data, halftone=HalftoneConfig(**halftone_data))
    config.validate()
    return config


def config_to_dict(config):
    data = asdict(config)
    for key in ("spacing", "offset", "screen_angles"):
        data["halftone"][key] = list(data["halftone"][key])
    return data


def save_config(config, filename="cartoon.yaml"):
    """Save pipeline parameters to YAML."""
    with open(filename, "w") as f:
        yaml.dump(config_to_dict(config), f, sort_keys=False)


def load_config(filename="cartoon.yaml"):
    """Load pipeline parameters from YAML."""
    with open(filename, "r") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"{filename}: expected a mapping at top level")
    return config_from_dict(data)
