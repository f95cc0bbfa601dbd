import logging
import os

import cv2

from .errors import SourceError
from .volume import FrameVolume

logger = logging.getLogger(__name__)


class VideoProcessor:
    def __init__(self, video_path):
        if not os.path.exists(video_path):
            raise SourceError(f"Video file not found: {video_path}")

        self.video_path = video_path
        self.cap = cv2.VideoCapture(video_path)

        if not self.cap.isOpened():
            raise SourceError(f"Could not open video file: {video_path}")

        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.fps = self.cap.get(cv2.CAP_PROP_FPS)
        self.frame_count = int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT))
        self.duration = self.frame_count / self.fps if self.fps > 0 else 0
        self.aspect_ratio = self.width / self.height if self.height > 0 else 0

    def get_metadata(self):
        return {
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "frame_count": self.frame_count,
            "duration": self.duration,
            "aspect_ratio": self.aspect_ratio
        }

    def read_frames(self):
        """
        Decode every remaining frame as a grayscale image.

        Returns:
            list: 2-D uint8 numpy arrays in stream order.
        """
        frames = []
        while True:
            ret, frame = self.cap.read()
            if not ret:
                break
            if frame.ndim == 3:
                frame = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
            frames.append(frame)

        logger.debug("Decoded %d frames from %s", len(frames), self.video_path)
        if 0 < len(frames) < self.frame_count:
            logger.warning("Decoding stopped after %d of %d frames in %s",
                           len(frames), self.frame_count, self.video_path)
        return frames

    def read_volume(self):
        """Decode the whole video into a FrameVolume."""
        frames = self.read_frames()
        if not frames:
            raise SourceError(f"No frames could be decoded from {self.video_path}")
        return FrameVolume.from_frames(frames)

    def close(self):
        self.cap.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __del__(self):
        if hasattr(self, 'cap') and self.cap.isOpened():
            self.cap.release()
