"""
Slit Filter Base

Shared shape of the energy filters: a per-slit float response that is
normalized to [0, 255] and quantized to 8-bit, computed slit by slit
with output order matching input order.
"""

import logging
from typing import Optional

import cv2
import numpy as np

from ..errors import ValidationError
from ..parallel import map_indexed
from ..volume import SliceStack

logger = logging.getLogger(__name__)

# Output value for responses with zero dynamic range
DEGENERATE_FILL = 0


def normalize_to_uint8(response: np.ndarray) -> np.ndarray:
    """
    Linearly rescale a response to [0, 255] using its own min and max.

    Args:
        response: 2-D float response

    Returns:
        uint8 array of the same shape. A constant response maps to
        DEGENERATE_FILL everywhere.
    """
    response = np.asarray(response, dtype=np.float32)
    low = float(response.min())
    high = float(response.max())

    if not high > low:
        logger.debug("Zero dynamic range (%.6g), using constant fill", low)
        return np.full(response.shape, DEGENERATE_FILL, dtype=np.uint8)

    return cv2.normalize(response, None, 0, 255.0, cv2.NORM_MINMAX,
                         dtype=cv2.CV_8U)


class SlitFilter:
    """
    Base class for filters that map a SliceStack to a SliceStack of
    8-bit energy maps.

    Subclasses implement ``_response`` (the float response of one slit)
    and may extend ``_validate`` with checks that must pass before any
    filtering starts.
    """

    name = "slit-filter"

    def __init__(self, max_workers: Optional[int] = None):
        """
        Args:
            max_workers: Threads used for per-slit filtering
                         (None = cpu_count - 1, 1 = sequential)
        """
        self.max_workers = max_workers

    def apply(self, stack: SliceStack) -> SliceStack:
        """
        Filter every slit in ``stack``.

        Args:
            stack: Input slit images

        Returns:
            SliceStack of uint8 energy maps; index i holds the result for
            input slit i
        """
        if not isinstance(stack, SliceStack):
            raise ValidationError(
                f"Expected a SliceStack, got {type(stack).__name__}")
        self._validate(stack)

        maps = map_indexed(lambda i: self.filter_slit(stack[i]),
                           len(stack), self.max_workers)
        logger.debug("%s filtered %d slits of shape %s",
                     self.name, len(stack), stack.slit_shape)
        return SliceStack(maps, stack.axis)

    def filter_slit(self, slit: np.ndarray) -> np.ndarray:
        """Compute the normalized 8-bit energy map of one slit."""
        if slit.min() == slit.max():
            # A shift-invariant filter maps a constant slit to a constant
            return np.full(slit.shape, DEGENERATE_FILL, dtype=np.uint8)
        return normalize_to_uint8(self._response(slit))

    def _validate(self, stack: SliceStack):
        pass

    def _response(self, slit: np.ndarray) -> np.ndarray:
        raise NotImplementedError(
            f"Subclass {self.__class__.__name__} must implement _response method")
