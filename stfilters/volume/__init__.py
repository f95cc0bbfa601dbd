"""
Spatiotemporal Volume Module

Frame volumes, slit stacks and the reslicing geometry that converts
between x-y frames and x-t / y-t slit images.
"""

from .frame_volume import Axis, FrameVolume, SliceStack
from .reslicer import VolumeReslicer

__all__ = [
    'Axis',
    'FrameVolume',
    'SliceStack',
    'VolumeReslicer'
]
