"""
Volume Data Structures

Defines the frame volume (time x height x width) and the slice stacks
produced by reslicing it along a spatial axis.
"""

from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from ..errors import ValidationError


class Axis(Enum):
    """Spatial axis a volume is resliced along."""
    X = "x"
    Y = "y"

    @property
    def plane(self) -> str:
        """Name of the slit plane produced by reslicing along this axis."""
        # Fixing a column leaves y and t; fixing a row leaves x and t
        return "y-t" if self is Axis.X else "x-t"


@dataclass(eq=False)
class FrameVolume:
    """
    Ordered stack of grayscale frames sharing one size.

    Attributes:
        data: Read-only array of shape (T, H, W)
        copy: Copy ``data`` into a private buffer. Pass False only for a
            buffer nothing else references.
    """
    data: np.ndarray
    copy: InitVar[bool] = True

    def __post_init__(self, copy: bool):
        data = np.asarray(self.data)
        if data.ndim != 3:
            raise ValidationError(
                f"Frame volume must be 3-D (T, H, W), got shape {data.shape}")
        if 0 in data.shape:
            raise ValidationError(
                f"Frame volume must not be empty, got shape {data.shape}")

        if copy:
            # Views, read-only or not, still alias the caller's buffer
            data = data.copy()
        data.flags.writeable = False
        self.data = data

    @classmethod
    def from_frames(cls, frames: Sequence[np.ndarray]) -> 'FrameVolume':
        """
        Build a volume from a sequence of 2-D frames.

        Args:
            frames: Frames in time order, all 2-D with equal shape and dtype

        Returns:
            FrameVolume holding a contiguous copy of the frames
        """
        if len(frames) == 0:
            raise ValidationError("Cannot build a frame volume from zero frames")

        first = np.asarray(frames[0])
        if first.ndim != 2:
            raise ValidationError(
                f"Frames must be single-channel 2-D arrays, got shape {first.shape}")

        data = np.empty((len(frames),) + first.shape, dtype=first.dtype)
        for t, frame in enumerate(frames):
            frame = np.asarray(frame)
            if frame.shape != first.shape:
                raise ValidationError(
                    f"Frame {t} has shape {frame.shape}, expected {first.shape}")
            if frame.dtype != first.dtype:
                raise ValidationError(
                    f"Frame {t} has dtype {frame.dtype}, expected {first.dtype}")
            data[t] = frame

        return cls(data, copy=False)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.data.shape

    @property
    def num_frames(self) -> int:
        return self.data.shape[0]

    @property
    def height(self) -> int:
        return self.data.shape[1]

    @property
    def width(self) -> int:
        return self.data.shape[2]

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    def frame(self, index: int) -> np.ndarray:
        """Return the (read-only) frame at time index."""
        return self.data[index]

    def frames(self) -> List[np.ndarray]:
        """Return all frames in time order as independent copies."""
        return [frame.copy() for frame in self.data]


@dataclass(eq=False)
class SliceStack:
    """
    Ordered slit images taken along one spatial axis.

    Every slit has shape (T, D) where D is the size of the other spatial
    axis: H for an x-reslice, W for a y-reslice.
    """
    slits: List[np.ndarray]
    axis: Axis
    _shape: Tuple[int, int] = field(init=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.axis, Axis):
            raise ValidationError(f"Unknown reslice axis: {self.axis!r}")
        self.slits = [np.asarray(slit) for slit in self.slits]
        if len(self.slits) == 0:
            raise ValidationError("Slice stack must hold at least one slit")

        first = self.slits[0]
        if first.ndim != 2 or 0 in first.shape:
            raise ValidationError(
                f"Slits must be non-empty 2-D arrays, got shape {first.shape}")

        for i, slit in enumerate(self.slits):
            if slit.shape != first.shape:
                raise ValidationError(
                    f"Slit {i} has shape {slit.shape}, expected {first.shape}")
            if slit.dtype != first.dtype:
                raise ValidationError(
                    f"Slit {i} has dtype {slit.dtype}, expected {first.dtype}")

        self._shape = first.shape

    def __len__(self) -> int:
        return len(self.slits)

    def __getitem__(self, index: int) -> np.ndarray:
        return self.slits[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.slits)

    @property
    def slit_shape(self) -> Tuple[int, int]:
        """(T, D) shape shared by every slit."""
        return self._shape

    @property
    def num_frames(self) -> int:
        return self._shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self.slits[0].dtype
