#!/usr/bin/env python3
"""
RasterGCode - Main Entry Point

Convert an image to engraving G-code or to a power height map.

Usage:
    rastergcode photo.png
    rastergcode photo.png --diagonal -o photo.nc
    rastergcode photo.png --height-map --settings laser.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.pixel_grid import ArrayPixelGrid
from .core.settings import RasterSettings, load_settings
from .laser.height_map import HeightMapGenerator
from .laser.raster_generator import RasterToGCode
from .laser.scheduling import JobState

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rastergcode",
        description="Convert a raster image to laser engraving G-code",
    )
    parser.add_argument("image", type=Path, help="Input image")
    parser.add_argument("-o", "--output", type=Path,
                        help="Output file (default: <image>.gcode or <image>.height-map.txt)")
    parser.add_argument("-s", "--settings", type=Path, help="Settings JSON file")
    parser.add_argument("--height-map", action="store_true",
                        help="Write the power height map instead of G-code")
    parser.add_argument("--diagonal", action="store_true", help="Scan along diagonals")
    parser.add_argument("--blocking", action="store_true",
                        help="Process every line in one call instead of under an event loop")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def default_output(image: Path, height_map: bool) -> Path:
    suffix = ".height-map.txt" if height_map else ".gcode"
    return image.with_name(image.name + suffix)


def run_job(job, blocking: bool) -> bool:
    """
    Run a job to completion.

    Non-blocking runs are driven by a QCoreApplication event loop, which
    quits when the job finishes.

    Returns:
        True if the job completed
    """
    if blocking:
        job.run(non_blocking=False)
        return job.state == JobState.DONE

    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("RasterGCode")

    job.on('done', lambda event: app.quit())
    job.on('abort', lambda event: app.quit())

    job.run(non_blocking=True)
    if job.state == JobState.RUNNING:
        app.exec()

    return job.state == JobState.DONE


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the rastergcode command."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        settings = load_settings(args.settings) if args.settings else RasterSettings()
        if args.diagonal:
            settings = settings.with_overrides(diagonal=True)

        grid = ArrayPixelGrid.from_image(args.image)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    if args.height_map:
        job = HeightMapGenerator(grid, settings)
    else:
        job = RasterToGCode(grid, settings)

    job.on('progress', lambda event: logger.info("Progress: %d%%", event.percent))

    if not run_job(job, args.blocking):
        logger.error("Job did not complete")
        return 1

    output = args.output or default_output(args.image, args.height_map)
    job.save_to_file(output)
    logger.info("Saved %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
