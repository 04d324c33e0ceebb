import argparse
import asyncio
import json
import os
import sys
from dataclasses import replace

from .config import ScraperConfig
from .engine import ListingEngine
from .errors import NoOrganicListingFound, ScrapeError
from .export import save_output_rows
from .utils import init_logger, now_iso


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Fetch the first non-sponsored listing from a classifieds list page")
    ap.add_argument("--url", type=str, default=None, help="List URL (default from env LIST_URL or the built-in car listing)")
    ap.add_argument("--max-candidates", type=int, default=None, help="How many cards to inspect at most")
    ap.add_argument("--headed", action="store_true", help="Show the browser window")
    ap.add_argument("--storage-state", type=str, default=None, help="Path to storage_state.json (cookie jar)")
    ap.add_argument("--persist-identity", action="store_true", help="Write cookies back to --storage-state after the run")
    ap.add_argument("--state-db", type=str, default=None, help="SQLite file that remembers the last seen ad id")
    ap.add_argument("--out", type=str, default="", help="Also save the record to CSV/XLSX/JSON")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Global log level for both console and file (overrides --log-console/--log-file).")
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", "INFO"),
                    help="Console log level (default from env LOG_CONSOLE or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE", "DEBUG"),
                    help="File log level (default from env LOG_FILE or DEBUG).")
    ap.add_argument("--log-file-path", default=os.getenv("LOG_FILE_PATH", "listing_scraper.log"),
                    help="Path to log file (default from env LOG_FILE_PATH or listing_scraper.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")
    return ap.parse_args(argv)


def build_config(args) -> ScraperConfig:
    config = ScraperConfig.from_env()
    overrides = {}
    if args.url:
        overrides["list_url"] = args.url
    if args.max_candidates:
        overrides["max_candidates"] = args.max_candidates
    if args.headed:
        overrides["headless"] = False
    if args.storage_state:
        overrides["storage_state_path"] = args.storage_state
    if args.persist_identity:
        overrides["persist_identity"] = True
    if args.state_db:
        overrides["state_db_path"] = args.state_db
    return replace(config, **overrides)


async def run_once(config: ScraperConfig, logger):
    engine = ListingEngine(config, logger=logger)
    try:
        return await engine.get_first_organic_listing()
    finally:
        await engine.close()


def main(argv=None) -> int:
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    logger = init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    config = build_config(args)
    logger.info(f">>> Run started at {now_iso()}")

    try:
        record = asyncio.run(run_once(config, logger))
    except NoOrganicListingFound as exc:
        logger.error(f">>> Nothing found: {exc}")
        return 2
    except ScrapeError as exc:
        logger.error(f">>> Scrape failed ({exc.__class__.__name__}): {exc}")
        return 1

    print(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))
    if record.same_as_last:
        logger.info(">>> No new listing since the previous run")
    if args.out:
        save_output_rows([record], args.out, logger=logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
