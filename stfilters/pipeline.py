"""
Spatiotemporal Filtering Pipeline

Reads a video into a frame volume, reslices it into x-t and y-t slit
stacks, computes Gabor energy and 9-tap energy on the selected stacks,
rebuilds x-y frames and writes both results as videos.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .assembler import VideoAssembler, VideoSettings
from .filters import DEFAULT_ORIENTATIONS, GaborEnergyFilter, SeparableTapFilter
from .processor import VideoProcessor
from .volume import Axis, FrameVolume, SliceStack, VolumeReslicer

logger = logging.getLogger(__name__)


@dataclass
class PipelineSettings:
    """Settings for a pipeline run."""
    gabor_axis: Axis = Axis.Y  # Axis whose slit stack feeds the Gabor branch
    tap_axis: Axis = Axis.Y    # Axis whose slit stack feeds the 9-tap branch
    orientations: Tuple[float, ...] = DEFAULT_ORIENTATIONS
    max_workers: Optional[int] = None
    parallel_branches: bool = True
    export_frames: bool = False  # Also write each result as PNG frames
    video: VideoSettings = field(default_factory=VideoSettings)

    def output_names(self) -> Dict[str, str]:
        """File names for the Gabor and 9-tap videos."""
        return {
            'gabor': f"gabor-energy-{self.gabor_axis.plane}.avi",
            'tap': f"9-Tap-{self.tap_axis.plane}.avi"
        }


@dataclass
class PipelineResult:
    """Reconstructed x-y frame sequences from both filter branches."""
    gabor_frames: List[np.ndarray]
    tap_frames: List[np.ndarray]
    gabor_axis: Axis
    tap_axis: Axis
    volume_shape: Tuple[int, int, int]


class Pipeline:
    """
    Orchestrates reslicing, filtering, reconstruction and output.

    The Gabor branch and the 9-tap branch share only read-only inputs and
    run concurrently when ``settings.parallel_branches`` is set. Nothing
    is written until both branches have finished.
    """

    def __init__(self, settings: Optional[PipelineSettings] = None):
        self.settings = settings or PipelineSettings()
        self.reslicer = VolumeReslicer(max_workers=self.settings.max_workers)

    def run(self,
            frames: Union[FrameVolume, Sequence[np.ndarray]]) -> PipelineResult:
        """
        Compute both energy videos from a frame sequence.

        Args:
            frames: FrameVolume, or 2-D grayscale frames in time order

        Returns:
            PipelineResult with the reconstructed frame sequences
        """
        settings = self.settings
        if isinstance(frames, FrameVolume):
            volume = frames
        else:
            volume = FrameVolume.from_frames(frames)

        logger.info("Preparing spatio-temporal volumes from %d frames of %dx%d",
                    volume.num_frames, volume.width, volume.height)
        stacks = {
            Axis.X: self.reslicer.reslice_along_x(volume),
            Axis.Y: self.reslicer.reslice_along_y(volume)
        }

        logger.info("Calculating Gabor kernels")
        kernel_bank = GaborEnergyFilter.build_kernel_bank(settings.orientations)
        gabor_filter = GaborEnergyFilter(max_workers=settings.max_workers,
                                         kernel_bank=kernel_bank)
        tap_filter = SeparableTapFilter(max_workers=settings.max_workers)

        def gabor_branch() -> List[np.ndarray]:
            logger.info("Calculating energy of Gabor on %s slits",
                        settings.gabor_axis.plane)
            energy = gabor_filter.compute_energy(stacks[settings.gabor_axis],
                                                 kernel_bank)
            return self._reconstruct(energy, "Gabor energy")

        def tap_branch() -> List[np.ndarray]:
            logger.info("Applying 9-tap filter on %s slits",
                        settings.tap_axis.plane)
            energy = tap_filter.apply(stacks[settings.tap_axis])
            return self._reconstruct(energy, "9-tap")

        if settings.parallel_branches:
            with ThreadPoolExecutor(max_workers=2) as executor:
                gabor_future = executor.submit(gabor_branch)
                tap_future = executor.submit(tap_branch)
                gabor_frames = gabor_future.result()
                tap_frames = tap_future.result()
        else:
            gabor_frames = gabor_branch()
            tap_frames = tap_branch()

        return PipelineResult(
            gabor_frames=gabor_frames,
            tap_frames=tap_frames,
            gabor_axis=settings.gabor_axis,
            tap_axis=settings.tap_axis,
            volume_shape=volume.shape
        )

    def process_video(self,
                      source: str,
                      output_dir: Optional[str] = None) -> Dict[str, str]:
        """
        Read ``source``, run the pipeline and write both videos.

        Args:
            source: Path of the input video
            output_dir: Directory for the output videos (default: cwd)

        Returns:
            Dict mapping 'gabor' and 'tap' to the written file paths
        """
        logger.info("Reading video %s", source)
        with VideoProcessor(source) as processor:
            volume = processor.read_volume()

        result = self.run(volume)
        return self.write(result, output_dir)

    def write(self,
              result: PipelineResult,
              output_dir: Optional[str] = None) -> Dict[str, str]:
        """
        Write both frame sequences of ``result`` as videos.

        With ``settings.export_frames`` set, each sequence is also written
        as PNG images into a directory named after its video. If any write
        fails, every file this call created is removed again.

        Returns:
            Dict mapping 'gabor' and 'tap' to the written video paths
        """
        names = self.settings.output_names()
        output_dir = output_dir or os.getcwd()

        paths = {}
        written = []
        frame_dirs = []
        try:
            for key, frames in (('gabor', result.gabor_frames),
                                ('tap', result.tap_frames)):
                path = os.path.join(output_dir, names[key])
                logger.info("Writing video %s", path)
                assembler = VideoAssembler(frames, self.settings.video)
                written.append(path)
                paths[key] = assembler.export(path)

                if self.settings.export_frames:
                    frames_dir = os.path.splitext(path)[0]
                    logger.info("Writing frames to %s", frames_dir)
                    frame_dirs.append(frames_dir)
                    written.extend(assembler.export_image_sequence(frames_dir))
        except Exception:
            for path in written:
                if os.path.exists(path):
                    os.remove(path)
            for frames_dir in frame_dirs:
                if os.path.isdir(frames_dir) and not os.listdir(frames_dir):
                    os.rmdir(frames_dir)
            raise
        return paths

    def _reconstruct(self, energy: SliceStack, label: str) -> List[np.ndarray]:
        logger.info("Calculating back from %s to x-y (%s)",
                    energy.axis.plane, label)
        return self.reslicer.reconstruct_frames(energy)
