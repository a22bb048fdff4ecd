"""CLI command for analyzing an Instagram export archive."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from ..config import Config, ConfigLoader
from ..errors import FollowDiffError
from ..logging import LogContext, setup_logging
from ..processing import PathPatterns, analyze_archive, open_archive


async def run_analysis(archive_path: Path, patterns: PathPatterns) -> dict:
    archive = await open_archive(archive_path)
    try:
        result = await analyze_archive(archive, patterns)
    finally:
        archive.close()
    return result.to_dict()


def analyze_command(
    config: Config,
    archive_path: Path,
    output_path: Optional[Path] = None,
) -> int:
    """Analyze an export and write the JSON report.

    Args:
        config: Configuration object
        archive_path: Export ZIP file or extracted export directory
        output_path: Optional report file (stdout when omitted)

    Returns:
        Exit code (0 for success)
    """
    logger = logging.getLogger(__package__ or __name__)

    try:
        patterns = PathPatterns.from_config(config.locator)
        with LogContext(archive=str(archive_path)):
            report = asyncio.run(run_analysis(archive_path, patterns))
    except FollowDiffError as e:
        logger.error(f"Analysis failed: {e.message}")
        return 1

    text = json.dumps(report, indent=2, ensure_ascii=False)
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Report written to {output_path}")
    else:
        print(text)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare following and followers lists from an Instagram data export"
    )
    parser.add_argument(
        "archive",
        type=Path,
        help="Export ZIP file or extracted export directory"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--patterns-file",
        type=Path,
        help="key = value file with following/followers path patterns (overrides config)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the JSON report to this file instead of stdout"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (overrides config)"
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the analyze command."""
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader().load(defaults_path=args.config)
    except FollowDiffError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 1

    if args.patterns_file:
        # Pattern file replaces any patterns set in the config
        config.locator.patterns_file = str(args.patterns_file)
        config.locator.following_files_path_regex = None
        config.locator.followers_files_path_regex = None

    setup_logging(
        level=args.log_level or config.logging.level,
        format=config.logging.format,
        log_file=Path(config.logging.file) if config.logging.file else None,
    )

    return analyze_command(config, args.archive, output_path=args.output)


if __name__ == "__main__":
    sys.exit(main())
