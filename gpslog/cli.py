"""
Command line entry point.

    python -m gpslog 'logs/**/*.csv' data.zip --output normalized.jsonl
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import load_config
from .export import JsonLinesSink
from .logger import setup_logger
from .services.ingest_service import IngestService

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpslog",
        description="Normalize GPS sensor logs (CSV or zip) to JSON lines with Unix ms times.",
    )
    parser.add_argument("files", nargs="*", help="Input files or glob patterns (default: GPSLOG_FILES)")
    parser.add_argument("-o", "--output", dest="output_file", help="JSON-lines output file")
    parser.add_argument("--env-file", help="Path to a .env file")
    parser.add_argument("--time-key", help="Column key holding the timestamp (default: time)")
    parser.add_argument("--delimiter", help="Field delimiter")
    parser.add_argument("--comment", dest="comment_markers", action="append",
                        help="Comment marker (repeatable)")
    parser.add_argument("--min-year", type=int, help="Lowest plausible year")
    parser.add_argument("--max-year", type=int, help="Highest plausible year")
    parser.add_argument("--timezone", help="Zone for times without an offset, e.g. America/New_York")
    parser.add_argument("--path-template", dest="output_path", help="Output path template")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            args.env_file,
            files=args.files or None,
            output_file=args.output_file,
            time_key=args.time_key,
            delimiter=args.delimiter,
            comment_markers=args.comment_markers,
            min_year=args.min_year,
            max_year=args.max_year,
            timezone=args.timezone,
            output_path=args.output_path,
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if not config.files:
        logger.error("No input files given")
        return 2

    with JsonLinesSink(config.output_file) as sink:
        stats = IngestService(config, sink).run()

    return 1 if stats.files_failed and not stats.files_imported else 0


if __name__ == "__main__":
    sys.exit(main())
