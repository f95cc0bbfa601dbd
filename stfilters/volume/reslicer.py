"""
Volume Reslicing Module

Reorders a frame volume into x-t or y-t slit images and rebuilds x-y
frames from a slit stack. Reslicing is a pure rearrangement: samples
are copied verbatim, never interpolated.
"""

import logging
from typing import List, Optional

import numpy as np

from ..errors import ValidationError
from ..parallel import map_indexed
from .frame_volume import Axis, FrameVolume, SliceStack

logger = logging.getLogger(__name__)


class VolumeReslicer:
    """
    Convert between a (T, H, W) frame volume and stacks of slit images.

    Each slit is copied into its own pre-sized buffer by one task, so
    slits can be built on worker threads without shared writes.
    """

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize the reslicer.

        Args:
            max_workers: Threads used for slit construction
                         (None = cpu_count - 1, 1 = sequential)
        """
        self.max_workers = max_workers

    def reslice(self, volume: FrameVolume, axis: Axis) -> SliceStack:
        """Reslice ``volume`` along the given spatial axis."""
        if axis is Axis.X:
            return self.reslice_along_x(volume)
        if axis is Axis.Y:
            return self.reslice_along_y(volume)
        raise ValidationError(f"Unknown reslice axis: {axis!r}")

    def reslice_along_x(self, volume: FrameVolume) -> SliceStack:
        """
        Build one y-t slit per column.

        Row t of slit x is column x of frame t, laid out as a row.

        Args:
            volume: Source frame volume of shape (T, H, W)

        Returns:
            SliceStack of W slits, each of shape (T, H)
        """
        self._check_volume(volume)
        data = volume.data
        num_frames, height, width = data.shape

        def build_slit(x: int) -> np.ndarray:
            slit = np.empty((num_frames, height), dtype=data.dtype)
            for t in range(num_frames):
                slit[t, :] = data[t, :, x]
            return slit

        slits = map_indexed(build_slit, width, self.max_workers)
        logger.debug("Resliced %s volume into %d y-t slits", volume.shape, width)
        return SliceStack(slits, Axis.X)

    def reslice_along_y(self, volume: FrameVolume) -> SliceStack:
        """
        Build one x-t slit per row.

        Row t of slit y is row y of frame t.

        Args:
            volume: Source frame volume of shape (T, H, W)

        Returns:
            SliceStack of H slits, each of shape (T, W)
        """
        self._check_volume(volume)
        data = volume.data
        num_frames, height, width = data.shape

        def build_slit(y: int) -> np.ndarray:
            slit = np.empty((num_frames, width), dtype=data.dtype)
            for t in range(num_frames):
                slit[t, :] = data[t, y, :]
            return slit

        slits = map_indexed(build_slit, height, self.max_workers)
        logger.debug("Resliced %s volume into %d x-t slits", volume.shape, height)
        return SliceStack(slits, Axis.Y)

    def reconstruct_frames(self,
                           stack: SliceStack,
                           axis: Optional[Axis] = None) -> List[np.ndarray]:
        """
        Rebuild x-y frames from a slit stack (inverse of reslicing).

        For a y-reslice, row y of frame t is row t of slit y. For an
        x-reslice, column x of frame t is row t of slit x.

        Args:
            stack: SliceStack produced by reslicing (or by a slit filter)
            axis: Axis the stack was resliced along; defaults to stack.axis

        Returns:
            List of T frames, each of shape (H, W)
        """
        axis = self._check_axis(stack, axis)
        num_frames, depth = stack.slit_shape
        count = len(stack)

        if axis is Axis.Y:
            height, width = count, depth
        else:
            height, width = depth, count

        def build_frame(t: int) -> np.ndarray:
            frame = np.empty((height, width), dtype=stack.dtype)
            for i, slit in enumerate(stack):
                if axis is Axis.Y:
                    frame[i, :] = slit[t, :]
                else:
                    frame[:, i] = slit[t, :]
            return frame

        frames = map_indexed(build_frame, num_frames, self.max_workers)
        logger.debug("Reconstructed %d frames of %dx%d from %s-axis slits",
                     num_frames, width, height, axis.value)
        return frames

    def reconstruct_volume(self,
                           stack: SliceStack,
                           axis: Optional[Axis] = None) -> FrameVolume:
        """Rebuild the full frame volume from a slit stack."""
        frames = self.reconstruct_frames(stack, axis)
        return FrameVolume(np.stack(frames), copy=False)

    @staticmethod
    def _check_volume(volume: FrameVolume):
        if not isinstance(volume, FrameVolume):
            raise ValidationError(
                f"Expected a FrameVolume, got {type(volume).__name__}")
        if 0 in volume.shape:
            raise ValidationError(f"Cannot reslice empty volume {volume.shape}")

    @staticmethod
    def _check_axis(stack: SliceStack, axis: Optional[Axis]) -> Axis:
        if not isinstance(stack, SliceStack):
            raise ValidationError(
                f"Expected a SliceStack, got {type(stack).__name__}")
        if axis is None:
            return stack.axis
        if axis is not stack.axis:
            raise ValidationError(
                f"Stack was resliced along {stack.axis.value}, "
                f"cannot reconstruct along {axis.value}")
        return axis
