import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from models.config import Config
from movie_purger import MoviePurger
from series_purger import SeriesPurger
from services.config import ConfigManager
from services.exceptions import PurgeError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Purge movies and TV episodes older than a maximum age from Radarr and Sonarr."
    )
    parser.add_argument(
        "--config", default="config.yaml", help="Path to an optional YAML config file"
    )
    dry_run = parser.add_mutually_exclusive_group()
    dry_run.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=None,
        help="Log what would be purged without deleting anything",
    )
    dry_run.add_argument(
        "--no-dry-run",
        dest="dry_run",
        action="store_false",
        help="Actually delete movies and episode files",
    )
    parser.add_argument(
        "--max-age-days", type=int, help="Purge media older than this many days"
    )
    parser.add_argument(
        "--only", choices=["movies", "series"], help="Only purge movies or only purge TV series"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command line overrides on top of the loaded configuration."""
    overrides = {}
    if args.dry_run is not None:
        overrides["dry_run"] = args.dry_run
    if args.max_age_days is not None:
        overrides["max_age_days"] = args.max_age_days
    return dataclasses.replace(config, **overrides)


def log_header(title: str) -> None:
    logger.info("=" * len(title))
    logger.info(title)
    logger.info("=" * len(title))


def run(config: Config, only: Optional[str] = None) -> None:
    if config.dry_run:
        logger.info("=================")
        logger.warning(
            "NOTE: Dry run is enabled - Logs will appear destructive but NO actions will be taken"
        )
        logger.info("=================")

    if only in (None, "movies"):
        log_header("PROCESSING MOVIES")
        MoviePurger(config).purge_movies()

    if only in (None, "series"):
        log_header("PROCESSING TV SERIES")
        SeriesPurger(config).purge_series()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.max_age_days is not None and args.max_age_days < 0:
        parser.error("--max-age-days cannot be negative")

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = apply_overrides(ConfigManager(args.config).config, args)
        run(config, args.only)
    except PurgeError as e:
        logger.error(f"Purge aborted: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
