import numpy as np
import pytest

from stfilters.errors import ValidationError
from stfilters.volume import Axis, FrameVolume, SliceStack


def test_from_frames_stacks_in_time_order():
    frames = [np.full((3, 4), t, dtype=np.uint8) for t in range(5)]
    volume = FrameVolume.from_frames(frames)

    assert volume.shape == (5, 3, 4)
    assert volume.num_frames == 5
    assert volume.height == 3
    assert volume.width == 4
    for t in range(5):
        assert np.all(volume.frame(t) == t)


def test_volume_is_read_only_and_owns_its_samples():
    data = np.zeros((2, 3, 3), dtype=np.uint8)
    volume = FrameVolume(data)
    data[0, 0, 0] = 99

    assert volume.data[0, 0, 0] == 0
    with pytest.raises(ValueError):
        volume.data[0, 0, 0] = 1


def test_volume_copies_read_only_views():
    base = np.zeros((2, 3, 3), dtype=np.uint8)
    view = base.view()
    view.flags.writeable = False

    volume = FrameVolume(view)
    base[0, 0, 0] = 99

    assert volume.data[0, 0, 0] == 0
    assert not np.shares_memory(volume.data, base)


def test_frames_returns_independent_copies():
    volume = FrameVolume(np.zeros((2, 2, 2), dtype=np.uint8))
    frames = volume.frames()
    frames[0][0, 0] = 7

    assert volume.data[0, 0, 0] == 0


def test_empty_frame_sequence_is_rejected():
    with pytest.raises(ValidationError):
        FrameVolume.from_frames([])


@pytest.mark.parametrize("shape", [(0, 4, 4), (3, 0, 4), (3, 4, 0)])
def test_zero_size_volume_is_rejected(shape):
    with pytest.raises(ValidationError):
        FrameVolume(np.zeros(shape, dtype=np.uint8))


def test_mismatched_frame_shapes_are_rejected():
    frames = [np.zeros((4, 4), dtype=np.uint8), np.zeros((4, 5), dtype=np.uint8)]
    with pytest.raises(ValidationError):
        FrameVolume.from_frames(frames)


def test_mismatched_frame_dtypes_are_rejected():
    frames = [np.zeros((4, 4), dtype=np.uint8), np.zeros((4, 4), dtype=np.float32)]
    with pytest.raises(ValidationError):
        FrameVolume.from_frames(frames)


def test_color_frames_are_rejected():
    with pytest.raises(ValidationError):
        FrameVolume.from_frames([np.zeros((4, 4, 3), dtype=np.uint8)])


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        FrameVolume.from_frames([])


def test_slice_stack_rejects_unequal_slits():
    with pytest.raises(ValidationError):
        SliceStack([np.zeros((3, 4)), np.zeros((3, 5))], Axis.Y)


def test_slice_stack_rejects_empty_stack():
    with pytest.raises(ValidationError):
        SliceStack([], Axis.X)


def test_slice_stack_rejects_unknown_axis():
    with pytest.raises(ValidationError):
        SliceStack([np.zeros((3, 4))], "y")


def test_axis_planes():
    assert Axis.X.plane == "y-t"
    assert Axis.Y.plane == "x-t"
