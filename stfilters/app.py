import argparse
import logging
import sys

from .errors import STFiltersError
from .pipeline import Pipeline, PipelineSettings

DEFAULT_INPUT = "pen.mp4"

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="stfilters",
        description="Extract Gabor and 9-tap motion energy videos from a video.")
    parser.add_argument(
        'input',
        nargs='?',
        default=DEFAULT_INPUT,
        help=f"Input video (default: {DEFAULT_INPUT})")
    parser.add_argument(
        '--frames',
        action='store_true',
        help="Also write every output frame as a PNG image")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = PipelineSettings(export_frames=args.frames)
        Pipeline(settings).process_video(args.input)
    except STFiltersError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
