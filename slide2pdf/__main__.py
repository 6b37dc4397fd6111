#!/usr/bin/env python3
"""slide2pdf CLI entrypoint."""

import os
import sys
import argparse
import logging

from utils.config import ConfigManager, resolve_settings
from utils.logging import LoggerFactory
from slide2pdf.converter import SlideConverter
from slide2pdf.lib.stopping import AUTO_DETECT, FRAMEWORK_POLICIES
from slide2pdf.pdf_generator import RENDERERS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slide2pdf",
        description="Convert a reveal.js or Landslide slide deck into a PDF",
        usage="slide2pdf --url <your_url> [options]\n  or  slide2pdf --config <configFile.json> [options]",
    )
    parser.add_argument("-u", "--url", help="URL (or local path) of the original slides")
    parser.add_argument(
        "-q", "--picturequality",
        dest="picture_quality",
        type=int,
        help="Quality (0-100) of the rendered PDF images"
    )
    parser.add_argument("-w", "--width", type=int, help="Width of the rendered PDF")
    parser.add_argument("-H", "--height", type=int, help="Height of the rendered PDF")
    parser.add_argument(
        "-o", "--outputpath",
        dest="output_path",
        help="Path and name to save the rendered PDF"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="Verbose mode to detail execution"
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        default=None,
        help="Force overwriting the chosen file"
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        default=None,
        help="Display complementary information when a failure occurs"
    )
    parser.add_argument(
        "-c", "--config",
        default="./config.json",
        help="Path to configuration file (JSON or YAML)"
    )
    parser.add_argument("--delay", type=int, help="Delay (ms) needed to skip animations")
    parser.add_argument(
        "--framework",
        choices=[AUTO_DETECT, *FRAMEWORK_POLICIES],
        help="Slide framework whose end-of-deck convention to use"
    )
    parser.add_argument("--renderer", choices=RENDERERS, help="PDF rendering backend")
    parser.add_argument(
        "--max-slides",
        type=int,
        help="Stop after this many slides even if the end was not detected"
    )
    parser.add_argument(
        "--structured-logs",
        action="store_true",
        help="Emit log lines as JSON"
    )
    parser.add_argument(
        "--log-file",
        help="Also write the log to this file"
    )
    return parser


def main(argv=None):
    """Main entry point for the slide converter."""
    args = build_parser().parse_args(argv)

    # Logging comes first so configuration diagnostics are visible
    LoggerFactory.create_logger(
        name="slide2pdf",
        level=logging.DEBUG if args.verbose else logging.INFO,
        output_file=os.path.basename(args.log_file) if args.log_file else None,
        structured=args.structured_logs,
        log_dir=os.path.dirname(os.path.abspath(args.log_file)) if args.log_file else "logs",
    )

    config = ConfigManager(config_path=args.config).get_config()
    settings = resolve_settings(args, config)
    if settings.verbose and not args.verbose:
        logging.getLogger("slide2pdf").setLevel(logging.DEBUG)

    success = SlideConverter(settings).convert()
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
