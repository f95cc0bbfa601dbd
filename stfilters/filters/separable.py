"""
Separable 9-Tap Filter

Fixed separable band-pass filter applied to slit images: one 9-tap
kernel along the spatial axis, one along time.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from .base import SlitFilter


@dataclass(frozen=True)
class TapKernels:
    """Coefficients of the separable filter."""
    spatial: Tuple[float, ...]
    temporal: Tuple[float, ...]

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return (spatial, temporal) as float32 row vectors."""
        return (np.array(self.spatial, dtype=np.float32).reshape(1, -1),
                np.array(self.temporal, dtype=np.float32).reshape(1, -1))


NINE_TAP_KERNELS = TapKernels(
    spatial=(0.0094, 0.1148, 0.3964, -0.0601, -0.9213,
             -0.0601, 0.3964, 0.1148, 0.0094),
    temporal=(0.0008, 0.0176, 0.1660, 0.6383, 1.0,
              0.6383, 0.1660, 0.0176, 0.0008),
)


class SeparableTapFilter(SlitFilter):
    """
    Squared response of the fixed 9-tap separable filter.

    Slits are (time, space) images, so the spatial kernel runs along
    each row and the temporal kernel along each column.
    """

    name = "9-tap"

    def __init__(self, max_workers: Optional[int] = None):
        super().__init__(max_workers)
        self.taps = NINE_TAP_KERNELS
        self._spatial, self._temporal = self.taps.as_arrays()

    def _response(self, slit: np.ndarray) -> np.ndarray:
        src = slit.astype(np.float32, copy=False)
        response = cv2.sepFilter2D(src, cv2.CV_32F, self._spatial, self._temporal)
        return response * response
