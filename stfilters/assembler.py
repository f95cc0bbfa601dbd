"""
Video Assembly Module

Writes reconstructed grayscale frame sequences to video files or image
sequences.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

import cv2
import numpy as np
from PIL import Image

from .errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class VideoSettings:
    """Settings for video output."""
    fps: float = 24.0
    codec: str = 'MJPG'
    is_color: bool = False  # False: frames are grayscale and get expanded to BGR


class VideoAssembler:
    """
    Assemble frames into video files.

    Every frame is converted and checked before the first file is
    created, and a failed export removes what it wrote.
    """

    def __init__(self,
                 frames: Optional[List[np.ndarray]] = None,
                 settings: Optional[VideoSettings] = None):
        """
        Initialize the video assembler.

        Args:
            frames: Frames (2-D grayscale or 3-channel BGR arrays)
            settings: VideoSettings for output
        """
        self.frames = list(frames) if frames is not None else []
        self.settings = settings or VideoSettings()

    def export(self,
               output_path: str,
               fps: Optional[float] = None) -> str:
        """
        Export frames to a video file.

        Args:
            output_path: Path for output video file
            fps: Frames per second (overrides settings)

        Returns:
            Path to created video file
        """
        fps = fps or self.settings.fps
        frames = [self._to_bgr(frame) for frame in self._checked_frames()]
        height, width = frames[0].shape[:2]

        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        fourcc = cv2.VideoWriter_fourcc(*self.settings.codec)
        writer = cv2.VideoWriter(output_path, fourcc, fps, (width, height), True)

        if not writer.isOpened():
            writer.release()
            _remove_if_exists(output_path)
            raise RuntimeError(
                f"Could not open video writer for {output_path}")

        try:
            for frame in frames:
                writer.write(frame)
        except Exception:
            writer.release()
            _remove_if_exists(output_path)
            raise
        writer.release()

        logger.info("Wrote %d frames (%dx%d @ %.1f fps) to %s",
                    len(frames), width, height, fps, output_path)
        return output_path

    def export_image_sequence(self,
                              output_dir: str,
                              prefix: str = "frame",
                              format: str = "png",
                              start_number: int = 1) -> List[str]:
        """
        Export frames as image sequence.

        Args:
            output_dir: Directory for output images
            prefix: Filename prefix
            format: Image format (png, jpg, tiff)
            start_number: Starting frame number

        Returns:
            List of created file paths
        """
        images = [self._to_pil(frame) for frame in self._checked_frames()]

        os.makedirs(output_dir, exist_ok=True)

        paths = []
        num_digits = len(str(len(images) + start_number))

        try:
            for i, image in enumerate(images):
                frame_num = start_number + i
                filename = f"{prefix}_{frame_num:0{num_digits}d}.{format}"
                filepath = os.path.join(output_dir, filename)

                paths.append(filepath)
                image.save(filepath)
        except Exception:
            for filepath in paths:
                _remove_if_exists(filepath)
            raise

        logger.info("Wrote %d images to %s", len(paths), output_dir)
        return paths

    def _checked_frames(self) -> List[np.ndarray]:
        if not self.frames:
            raise ValidationError("No frames to export")

        height, width = self.frames[0].shape[:2]
        for index, frame in enumerate(self.frames):
            if frame.shape[:2] != (height, width):
                raise ValidationError(
                    f"Frame {index} has size {frame.shape[:2]}, expected "
                    f"{(height, width)}")
        return self.frames

    def _to_bgr(self, frame: np.ndarray) -> np.ndarray:
        """Convert a frame to 8-bit BGR for OpenCV."""
        if frame.dtype != np.uint8:
            frame = np.clip(frame, 0, 255).astype(np.uint8)
        if not self.settings.is_color:
            if frame.ndim == 3:
                frame = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
            return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        if frame.ndim != 3 or frame.shape[2] != 3:
            raise ValidationError(
                f"Color output expects 3-channel frames, got shape {frame.shape}")
        return frame

    def _to_pil(self, frame: np.ndarray) -> Image.Image:
        """Convert a frame to a PIL Image."""
        if frame.dtype != np.uint8:
            frame = np.clip(frame, 0, 255).astype(np.uint8)
        if frame.ndim == 2:
            return Image.fromarray(frame)
        return Image.fromarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))


def _remove_if_exists(path: str):
    if os.path.exists(path):
        os.remove(path)
