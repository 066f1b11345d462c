import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from parallax_window import __version__
from parallax_window.configs import AppSettings
from parallax_window.core import FrameRunner, ParallaxPipeline
from parallax_window.factories import create_frame_sinks, create_smoother, create_tracker


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Head-coupled off-axis perspective pipeline")
    parser.add_argument(
        "--dummy",
        action="store_true",
        help="Drive the pipeline with a simulated head instead of an external tracker."
    )
    parser.add_argument("--frames", type=int, default=None, help="Stop after this many frames.")
    parser.add_argument("--calibration", type=Path, default=None, help="Calibration JSON to load.")
    parser.add_argument(
        "--precalibrated",
        action="store_true",
        help="Start from the built-in near/mid/far reference calibration."
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # 1. Load Configuration
    try:
        settings = AppSettings()
    except ValidationError as e:
        print(f"Configuration Error: {e}")
        sys.exit(1)
    if args.dummy:
        settings.tracking.use_dummy_mode = True

    # 2. Setup Logging
    logging.basicConfig(
        level=settings.logging.level,
        format=settings.logging.format,
        stream=sys.stdout
    )
    logger = logging.getLogger("main")
    logger.info(f"Starting parallax-window v{__version__}")
    if settings.tracking.use_dummy_mode:
        logger.warning("Initializing DUMMY source (Simulation Mode)")

    # 3. Build the frame pipeline
    pipeline = ParallaxPipeline.from_settings(
        settings,
        smoother=create_smoother(settings.smoothing),
        tracker=create_tracker(settings),
        precalibrated=args.precalibrated,
    )
    calibration_path = args.calibration or settings.calibration.store_path
    if args.calibration is not None or calibration_path.exists():
        if not pipeline.store.load(calibration_path):
            logger.warning("Keeping default calibration.")

    runner = FrameRunner(
        pipeline,
        sinks=create_frame_sinks(settings),
        target_fps=settings.target_fps,
        max_frames=args.frames,
    )

    # 4. Run until done or interrupted
    try:
        asyncio.run(runner.run())
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    except Exception:
        logger.exception("Fatal Application Error")
    finally:
        frame = pipeline.last_frame
        if frame is not None and frame.frustum.ok:
            f = frame.frustum
            logger.info(
                "Last frustum d=%.3fm l=%.3f r=%.3f b=%.3f t=%.3f",
                f.distance, f.left, f.right, f.bottom, f.top
            )
        logger.info("Shutdown complete.")

if __name__ == "__main__":
    main()
