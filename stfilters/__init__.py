"""
Spatiotemporal motion energy filters for video.

Reslices a video into x-t / y-t slit images, applies a Gabor energy
filter bank and a separable 9-tap filter, and rebuilds x-y videos.
"""

from .errors import STFiltersError, SourceError, ValidationError
from .filters import GaborEnergyFilter, KernelBank, SeparableTapFilter, SlitFilter
from .pipeline import Pipeline, PipelineResult, PipelineSettings
from .volume import Axis, FrameVolume, SliceStack, VolumeReslicer

__version__ = '1.0.0'

__all__ = [
    'Axis',
    'FrameVolume',
    'GaborEnergyFilter',
    'KernelBank',
    'Pipeline',
    'PipelineResult',
    'PipelineSettings',
    'STFiltersError',
    'SeparableTapFilter',
    'SliceStack',
    'SlitFilter',
    'SourceError',
    'ValidationError',
    'VolumeReslicer'
]
