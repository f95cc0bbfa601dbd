"""
Spatiotemporal Energy Filters

Filters that turn each slit image of a spatiotemporal volume into an
8-bit energy map:
- GaborEnergyFilter: quadrature energy of an oriented Gabor bank
- SeparableTapFilter: squared response of a fixed 9-tap separable filter
"""

from .base import DEGENERATE_FILL, SlitFilter, normalize_to_uint8
from .gabor import DEFAULT_ORIENTATIONS, GaborEnergyFilter, KernelBank
from .separable import NINE_TAP_KERNELS, SeparableTapFilter, TapKernels

__all__ = [
    'DEGENERATE_FILL',
    'DEFAULT_ORIENTATIONS',
    'NINE_TAP_KERNELS',
    'SlitFilter',
    'GaborEnergyFilter',
    'KernelBank',
    'SeparableTapFilter',
    'TapKernels',
    'normalize_to_uint8'
]
