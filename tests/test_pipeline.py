import os

import numpy as np
import pytest

from stfilters import pipeline as pipeline_module
from stfilters.assembler import VideoAssembler, VideoSettings
from stfilters.errors import SourceError, ValidationError
from stfilters.filters import GaborEnergyFilter, SeparableTapFilter
from stfilters.pipeline import Pipeline, PipelineSettings
from stfilters.volume import Axis, VolumeReslicer


def test_run_produces_two_frame_sequences(random_volume):
    volume = random_volume(num_frames=10, height=12, width=14)

    result = Pipeline().run(volume)

    assert result.volume_shape == (10, 12, 14)
    assert result.gabor_axis is Axis.Y
    assert result.tap_axis is Axis.Y
    for frames in (result.gabor_frames, result.tap_frames):
        assert len(frames) == 10
        for frame in frames:
            assert frame.shape == (12, 14)
            assert frame.dtype == np.uint8


def test_run_matches_manual_composition(random_volume):
    volume = random_volume(num_frames=10, height=9, width=12, seed=4)
    reslicer = VolumeReslicer(max_workers=1)
    stack = reslicer.reslice_along_y(volume)

    expected_gabor = reslicer.reconstruct_frames(
        GaborEnergyFilter(max_workers=1).apply(stack))
    expected_tap = reslicer.reconstruct_frames(
        SeparableTapFilter(max_workers=1).apply(stack))

    result = Pipeline(PipelineSettings(max_workers=3)).run(volume)

    for a, b in zip(result.gabor_frames, expected_gabor):
        np.testing.assert_array_equal(a, b)
    for a, b in zip(result.tap_frames, expected_tap):
        np.testing.assert_array_equal(a, b)


def test_gabor_axis_is_configurable(random_volume):
    volume = random_volume(num_frames=10, height=11, width=13, seed=8)
    reslicer = VolumeReslicer(max_workers=1)
    expected = reslicer.reconstruct_frames(
        GaborEnergyFilter(max_workers=1).apply(reslicer.reslice_along_x(volume)))

    settings = PipelineSettings(gabor_axis=Axis.X, parallel_branches=False)
    result = Pipeline(settings).run(volume)

    assert result.gabor_axis is Axis.X
    assert settings.output_names()['gabor'] == "gabor-energy-y-t.avi"
    for a, b in zip(result.gabor_frames, expected):
        np.testing.assert_array_equal(a, b)


def test_run_accepts_frame_list():
    frames = [np.full((10, 10), t * 20, dtype=np.uint8) for t in range(10)]
    frames[4][3:6, 3:6] = 255

    result = Pipeline(PipelineSettings(max_workers=1)).run(frames)

    assert len(result.gabor_frames) == 10


def test_run_rejects_short_volume_for_gabor(random_volume):
    with pytest.raises(ValidationError):
        Pipeline().run(random_volume(num_frames=3, height=12, width=14))


def test_default_output_names():
    assert PipelineSettings().output_names() == {
        'gabor': "gabor-energy-x-t.avi",
        'tap': "9-Tap-x-t.avi"
    }


def test_process_video_writes_both_outputs(tmp_path, video_file, moving_bar_frames):
    source = video_file(moving_bar_frames)
    output_dir = tmp_path / "out"
    output_dir.mkdir()

    paths = Pipeline().process_video(source, str(output_dir))

    assert set(paths) == {'gabor', 'tap'}
    assert os.path.basename(paths['gabor']) == "gabor-energy-x-t.avi"
    assert os.path.basename(paths['tap']) == "9-Tap-x-t.avi"
    for path in paths.values():
        assert os.path.getsize(path) > 0


def test_failed_run_writes_nothing(tmp_path, video_file, moving_bar_frames):
    source = video_file(moving_bar_frames[:3])
    output_dir = tmp_path / "out"
    output_dir.mkdir()

    with pytest.raises(ValidationError):
        Pipeline().process_video(source, str(output_dir))
    assert os.listdir(output_dir) == []


def test_process_video_missing_source(tmp_path):
    with pytest.raises(SourceError):
        Pipeline().process_video(str(tmp_path / "missing.mp4"), str(tmp_path))


def test_sink_failure_writes_nothing(tmp_path, video_file, moving_bar_frames):
    source = video_file(moving_bar_frames)
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    # Grayscale results cannot be written in color mode
    settings = PipelineSettings(video=VideoSettings(is_color=True))

    with pytest.raises(ValidationError):
        Pipeline(settings).process_video(source, str(output_dir))
    assert os.listdir(output_dir) == []


class _TapFailingAssembler(VideoAssembler):
    """Writes the 9-tap video file, then fails."""

    def export(self, output_path, fps=None):
        written = super().export(output_path, fps)
        if os.path.basename(written).startswith("9-Tap"):
            raise RuntimeError("sink closed")
        return written


def test_second_video_failure_removes_both(tmp_path, monkeypatch, video_file,
                                           moving_bar_frames):
    monkeypatch.setattr(pipeline_module, "VideoAssembler", _TapFailingAssembler)
    source = video_file(moving_bar_frames)
    output_dir = tmp_path / "out"
    output_dir.mkdir()

    with pytest.raises(RuntimeError):
        Pipeline(PipelineSettings(export_frames=True)).process_video(
            source, str(output_dir))
    assert os.listdir(output_dir) == []


def test_export_frames_writes_image_sequences(tmp_path, video_file, moving_bar_frames):
    source = video_file(moving_bar_frames)

    paths = Pipeline(PipelineSettings(export_frames=True)).process_video(
        source, str(tmp_path))

    for path in paths.values():
        frames_dir = os.path.splitext(path)[0]
        assert len(os.listdir(frames_dir)) == len(moving_bar_frames)
