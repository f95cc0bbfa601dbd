import cv2
import numpy as np
import pytest

from stfilters.volume import FrameVolume


@pytest.fixture
def random_volume():
    """Factory for reproducible random uint8 volumes of shape (T, H, W)."""
    def make(num_frames=10, height=12, width=14, seed=0):
        rng = np.random.default_rng(seed)
        data = rng.integers(0, 256, size=(num_frames, height, width), dtype=np.uint8)
        return FrameVolume(data)
    return make


@pytest.fixture
def video_file(tmp_path):
    """Factory writing grayscale frames to an MJPG .avi and returning its path."""
    def make(frames, name="input.avi", fps=24.0):
        path = str(tmp_path / name)
        height, width = frames[0].shape[:2]
        writer = cv2.VideoWriter(path, cv2.VideoWriter_fourcc(*'MJPG'),
                                 fps, (width, height), True)
        if not writer.isOpened():
            pytest.skip("MJPG video writer not available")
        try:
            for frame in frames:
                writer.write(cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR))
        finally:
            writer.release()
        return path
    return make


@pytest.fixture
def moving_bar_frames():
    """A bright vertical bar moving right by one pixel per frame."""
    frames = []
    for t in range(12):
        frame = np.full((24, 32), 40, dtype=np.uint8)
        frame[:, 4 + t:8 + t] = 220
        frames.append(frame)
    return frames
