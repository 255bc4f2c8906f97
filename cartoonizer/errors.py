"""Exceptions raised by the cartoon and halftone pipeline."""

from contextlib import contextmanager

import cv2


class CartoonizerError(Exception):
    """Base class for all pipeline errors."""


class InvalidInputError(CartoonizerError, ValueError):
    """Image has the wrong shape, channel count or plane sizes."""


class OutOfRangeError(CartoonizerError, ValueError):
    """A sampled intensity or dot radius left its expected envelope."""


class ExternalOperationError(CartoonizerError):
    """
    An OpenCV call failed.

    Carries the operation name and, for per-channel work, the channel index,
    so the failure can be diagnosed without reproducing the run.
    """

    def __init__(self, operation, message, channel=None):
        self.operation = operation
        self.channel = channel
        where = f" on channel {channel}" if channel is not None else ""
        super().__init__(f"{operation} failed{where}: {message}")


@contextmanager
def opencv_call(operation, channel=None):
    """Re-raise cv2.error from the wrapped block as ExternalOperationError."""
    try:
        yield
    except cv2.error as e:
        raise ExternalOperationError(operation, str(e).strip(), channel) from e
