"""Cartoon rendering of photographs with an optional per-channel halftone screen."""

from .config import CartoonConfig, HalftoneConfig, load_config, save_config
from .errors import (
    CartoonizerError,
    ExternalOperationError,
    InvalidInputError,
    OutOfRangeError,
)
from .grid import Angle, GridPoint, GridPositionIterator
from .halftone import halftone, render_channel
from .pipeline import run_cartoon
from .stylize import Cartoonizer

__version__ = "0.1.0"
