"""Command-line interface for the photobooth kiosk.

Provides an entry point for running the booth pipeline headless against
a local webcam, or checking the camera on its own.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="photobooth",
        description="Unattended photo-booth kiosk",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/photobooth.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run the booth pipeline")
    run_parser.add_argument(
        "--duration", type=float, default=None,
        help="Stop after this many seconds (default: run until interrupted)",
    )

    test_parser = subparsers.add_parser("capture-test", help="Test webcam capture (saves a snap frame)")
    test_parser.add_argument(
        "--output", type=Path, default=Path("capture_test.png"),
        help="Where to write the frame",
    )

    return parser.parse_args(argv)


def _build_source(settings):
    from photobooth.capture.webcam import WebcamCapture

    resolution = None
    if settings.capture.resolution_width and settings.capture.resolution_height:
        resolution = (settings.capture.resolution_width, settings.capture.resolution_height)
    return WebcamCapture(
        device_index=settings.capture.device_index,
        snap_scale=settings.capture.snap_scale,
        snap_size=(settings.capture.snap_width, settings.capture.snap_height),
        resolution=resolution,
    )


async def _run_booth(settings, args) -> None:
    """Initialize all components and run the booth pipeline."""
    from photobooth.faces.yunet import YuNetFaceOracle
    from photobooth.pipeline.orchestrator import build_pipeline
    from photobooth.render.canvas import CanvasRenderSink

    sink = CanvasRenderSink()
    sink.attach(settings.capture.snap_width, settings.capture.snap_height)
    pipeline = build_pipeline(
        settings,
        source=_build_source(settings),
        oracle=YuNetFaceOracle(settings.faces.model_path),
        sink=sink,
    )

    if not await pipeline.start():
        print(f"Camera unavailable: {pipeline.source_error}")
        return

    try:
        if args.duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(args.duration)
    finally:
        await pipeline.stop()

    print(f"\nCaptures taken: {pipeline.capture_buffer.count}")


async def _capture_test(settings, output: Path) -> None:
    """Capture a single snap frame and save to file."""
    import cv2

    async with _build_source(settings) as source:
        frame = await source.capture_frame()
        cv2.imwrite(str(output), frame.image)
        print(f"Saved frame to {output} ({frame.width}x{frame.height})")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the photobooth CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from photobooth.config.settings import load_settings
    from photobooth.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "run":
        logger.info("Starting booth pipeline")
        try:
            asyncio.run(_run_booth(settings, args))
        except KeyboardInterrupt:
            logger.info("Interrupted")

    elif args.command == "capture-test":
        logger.info("Running capture test")
        asyncio.run(_capture_test(settings, args.output))


if __name__ == "__main__":
    main()
