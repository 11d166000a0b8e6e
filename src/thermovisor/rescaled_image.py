"""
Rescaled thermal image.

A thermal image is a matrix of temperatures. ``RescaledImage`` keeps the
initial values together with a copy mapped onto [0, 1], which is what the
pattern marking and visualization steps work with.
"""

from typing import Tuple
import numpy as np

from .models.models import DegenerateImageError


def rescale(image: np.ndarray) -> Tuple[float, float, np.ndarray]:
    """
    Map ``image`` onto [0, 1] in place.

    Returns
    -------
    tuple
        (min, max, image) where image is the same (rescaled) array
    """
    if image.size == 0:
        raise DegenerateImageError("Cannot rescale an empty image")
    min_value = float(np.min(image))
    max_value = float(np.max(image))
    if max_value == min_value:
        raise DegenerateImageError(
            f"Image has zero dynamic range (all values equal {min_value})"
        )
    image -= min_value
    image /= max_value - min_value
    return min_value, max_value, image


class RescaledImage:
    """
    Thermal image together with its copy rescaled to [0, 1].

    Attributes
    ----------
    initial : np.ndarray
        Image before rescaling (float matrix)
    shape : tuple
        (rows, cols)
    min, max : float
        Extrema of ``initial`` used for rescaling
    im : np.ndarray
        ``(initial - min) / (max - min)``
    """

    def __init__(self, image):
        image = np.asarray(image, dtype=float)
        if image.ndim != 2:
            raise ValueError(f"Expected a 2D temperature matrix, got shape {image.shape}")
        self.initial = image
        self.shape = image.shape
        self.min, self.max, self.im = rescale(image.copy())

    def rescale(self) -> "RescaledImage":
        """Recompute ``im``, ``min`` and ``max`` after ``initial`` was changed in place."""
        self.min, self.max, self.im = rescale(self.initial.copy())
        return self

    def copy(self) -> "RescaledImage":
        return RescaledImage(self.initial.copy())

    def __repr__(self):
        return f"RescaledImage(shape={self.shape}, min={self.min:.3f}, max={self.max:.3f})"
