"""
Gabor Energy Module

Quadrature energy of a bank of oriented Gabor kernels, computed on each
slit image of a spatiotemporal volume.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import cv2
import numpy as np

from ..errors import ValidationError
from ..volume import SliceStack
from .base import SlitFilter

logger = logging.getLogger(__name__)

DEFAULT_ORIENTATIONS = (np.pi / 4, 3 * np.pi / 4)


@dataclass(frozen=True, eq=False)
class KernelBank:
    """Ordered, read-only set of 2-D kernels and their orientations."""
    orientations: Tuple[float, ...]
    kernels: Tuple[np.ndarray, ...]

    def __len__(self) -> int:
        return len(self.kernels)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.kernels)

    @property
    def kernel_size(self) -> Tuple[int, int]:
        """Largest (rows, cols) extent over all kernels."""
        if not self.kernels:
            return (0, 0)
        return (max(k.shape[0] for k in self.kernels),
                max(k.shape[1] for k in self.kernels))


class GaborEnergyFilter(SlitFilter):
    """
    Oriented band-pass energy filter.

    Every slit is filtered with each kernel of the bank, the responses
    are squared and summed, and the square root of the sum gives a
    phase-invariant energy map which is then normalized per slit.
    """

    name = "gabor-energy"

    KERNEL_SIZE = (9, 9)
    SIGMA = 1.0
    LAMBDA = 1.0
    GAMMA = 2.0
    PSI = np.pi * 0.5

    def __init__(self,
                 orientations: Sequence[float] = DEFAULT_ORIENTATIONS,
                 max_workers: Optional[int] = None,
                 kernel_bank: Optional[KernelBank] = None):
        """
        Initialize the filter and generate its kernel bank.

        Args:
            orientations: Kernel orientations in radians, in bank order
            max_workers: Threads used for per-slit filtering
            kernel_bank: Prebuilt bank to use instead of generating one
        """
        super().__init__(max_workers)
        if kernel_bank is None:
            kernel_bank = self.build_kernel_bank(orientations)
        self.kernel_bank = kernel_bank

    @classmethod
    def build_kernel_bank(cls, orientations: Sequence[float]) -> KernelBank:
        """
        Generate one Gabor kernel per orientation.

        Kernels are flipped horizontally so that filtering with them
        applies convolution rather than correlation.

        Args:
            orientations: Orientations (theta) in radians

        Returns:
            KernelBank with float32 kernels in the given order
        """
        orientations = tuple(float(theta) for theta in orientations)
        if not orientations:
            raise ValidationError("Kernel bank needs at least one orientation")

        kernels = []
        for theta in orientations:
            kernel = cv2.getGaborKernel(cls.KERNEL_SIZE, cls.SIGMA, theta,
                                        cls.LAMBDA, cls.GAMMA, cls.PSI,
                                        ktype=cv2.CV_32F)
            kernel = cv2.flip(kernel, 1)
            kernel.flags.writeable = False
            kernels.append(kernel)

        logger.debug("Built %d Gabor kernels of size %s",
                     len(kernels), cls.KERNEL_SIZE)
        return KernelBank(orientations=orientations, kernels=tuple(kernels))

    def compute_energy(self,
                       stack: SliceStack,
                       kernel_bank: Optional[KernelBank] = None) -> SliceStack:
        """
        Compute one normalized energy map per slit.

        Args:
            stack: Input slit images
            kernel_bank: Bank to filter with; defaults to the filter's own

        Returns:
            SliceStack of uint8 energy maps in input order
        """
        if kernel_bank is None or kernel_bank is self.kernel_bank:
            return self.apply(stack)
        return GaborEnergyFilter(max_workers=self.max_workers,
                                 kernel_bank=kernel_bank).apply(stack)

    def energy_response(self,
                        slit: np.ndarray,
                        kernel_bank: Optional[KernelBank] = None) -> np.ndarray:
        """
        Square-root energy of one slit before normalization.

        Args:
            slit: 2-D slit image
            kernel_bank: Bank to filter with; defaults to the filter's own

        Returns:
            float32 array, non-negative, same shape as ``slit``
        """
        bank = kernel_bank if kernel_bank is not None else self.kernel_bank
        self._check_bank(bank, np.shape(slit))
        return self._energy(np.asarray(slit), bank)

    def _validate(self, stack: SliceStack):
        self._check_bank(self.kernel_bank, stack.slit_shape)

    def _response(self, slit: np.ndarray) -> np.ndarray:
        return self._energy(slit, self.kernel_bank)

    @staticmethod
    def _energy(slit: np.ndarray, bank: KernelBank) -> np.ndarray:
        src = slit.astype(np.float32, copy=False)
        energy = np.zeros(src.shape, dtype=np.float32)
        for kernel in bank:
            response = cv2.filter2D(src, cv2.CV_32F, kernel)
            energy += response * response
        return np.sqrt(energy)

    @staticmethod
    def _check_bank(bank: KernelBank, slit_shape: Tuple[int, ...]):
        if bank is None or len(bank) == 0:
            raise ValidationError("Kernel bank is empty")
        if len(slit_shape) != 2:
            raise ValidationError(f"Slit must be 2-D, got shape {slit_shape}")

        kernel_rows, kernel_cols = bank.kernel_size
        rows, cols = slit_shape
        if kernel_rows > rows or kernel_cols > cols:
            raise ValidationError(
                f"Kernel size {kernel_rows}x{kernel_cols} exceeds slit "
                f"size {rows}x{cols}")

