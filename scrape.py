#!/usr/bin/env python3
"""
Scrape concert listings from Austin venues and save to JSON.
Currently supports:
- Antone's Nightclub (calendar page)
- C-Boy's Heart & Soul (Timely API)
- Mohawk Austin (Prekindle feed)
- Haute Spot (Squarespace JSON)
- ACL Live at 3TEN (listing + detail pages)
- Broken Spoke (text calendar)
- The Continental Club (Timely API)
- Elephant Room (month grid)
"""

import argparse
import json
import sys
import time
import traceback
from pathlib import Path

from gigcrawl import config
from gigcrawl.config import RunConfig
from gigcrawl.errors import ConfigurationError, FetchFailure
from gigcrawl.pipeline.io import load_existing_events, load_existing_status, save_events, save_log, save_status
from gigcrawl.pipeline.metrics import CrawlMetrics
from gigcrawl.pipeline.records import utc_timestamp
from gigcrawl.pipeline.validate import validate_record
from gigcrawl.registry import select_scrapers
from gigcrawl.utils.logs import console_log, format_log_line

# Keys that only make sense for one venue
VENUE_ONLY_KEYS = ("startUrl", "start_url", "calendarUrl")


def load_input(path):
    """Read the JSON run configuration. Missing path means defaults only."""
    if not path:
        return {}
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot read input {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"input {path} must be a JSON object")
    return data


def build_run_configs(selected, input_data, max_events=None, max_concurrency=None):
    """
    One RunConfig per venue. Top-level input keys apply to every venue,
    input["venues"][<key>] overrides them, command-line flags win over both.
    Everything is validated here, before any fetch.
    """
    shared = {k: v for k, v in input_data.items() if k != "venues" and k not in VENUE_ONLY_KEYS}
    per_venue = input_data.get("venues") or {}
    flags = {"max_events": max_events, "max_concurrency": max_concurrency}

    configs = {}
    for profile, _ in selected:
        venue_input = dict(shared)
        venue_input.update(per_venue.get(profile.key) or per_venue.get(profile.name) or {})
        venue_input.update({k: v for k, v in flags.items() if v is not None})
        configs[profile.name] = RunConfig.from_input(venue_input)
    return configs


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Scrape Austin venue calendars into events.json")
    parser.add_argument("--venue", action="append", help="Venue name or key to scrape (repeatable, default: all)")
    parser.add_argument("--input", help="Path to a JSON run configuration")
    parser.add_argument("--max-events", type=int, default=None, help="Stop each venue after this many records (0 = unlimited)")
    parser.add_argument("--max-concurrency", type=int, default=None, help="Parallel detail-page fetches (1-6)")
    parser.add_argument("--data-dir", default=str(config.DATA_DIR), help="Directory for events, status and log files")
    parser.add_argument("--dry-run", action="store_true", help="Print records instead of writing files")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    data_dir = Path(args.data_dir)
    output_path = data_dir / config.OUTPUT_PATH.name
    status_path = data_dir / config.STATUS_PATH.name
    log_path = data_dir / config.LOG_PATH.name

    run_timestamp = utc_timestamp()
    log_lines = []  # Collect log entries

    def log(message, level="INFO"):
        """Log a message to both console and log buffer."""
        log_lines.append(format_log_line(message, level))
        console_log(message, level)

    log(f"Starting scrape run at {run_timestamp}")

    try:
        selected = select_scrapers(args.venue)
        run_configs = build_run_configs(
            selected,
            load_input(args.input),
            max_events=args.max_events,
            max_concurrency=args.max_concurrency,
        )
    except ConfigurationError as e:
        log(f"Invalid configuration: {e}", "ERROR")
        return 1

    # Load existing status to preserve last_success data
    existing_status = load_existing_status(status_path)
    # Previous records stand in for venues that fail this run
    previous_records = load_existing_events(output_path)
    venue_statuses = {}
    venue_metrics = {}
    all_records = []
    progress = sys.stderr.isatty()

    for profile, scraper in selected:
        venue_name = profile.name
        log(f"Scraping {venue_name}...")
        metrics = CrawlMetrics(name=venue_name)
        start_time = time.time()

        venue_status = {
            "last_run": run_timestamp,
            "success": False,
            "event_count": 0,
            "error": None,
        }

        # Preserve last successful scrape info from existing status
        existing_venue = existing_status.get("venues", {}).get(venue_name, {})
        if existing_venue.get("last_success"):
            venue_status["last_success"] = existing_venue["last_success"]
            venue_status["last_success_count"] = existing_venue.get("last_success_count", 0)

        try:
            result = scraper(run_configs[venue_name], log_func=log, progress=progress)
            metrics = result.metrics
            event_count = len(result.records)
            log(f"  Found {event_count} records")
            if event_count == 0:
                log(f"  No events currently listed for {venue_name}", "WARNING")
            all_records.extend(result.records)

            venue_status["success"] = True
            venue_status["event_count"] = event_count
            venue_status["last_success"] = run_timestamp
            venue_status["last_success_count"] = event_count
            venue_status["metrics"] = metrics.as_dict()

        except Exception as e:
            error_msg = str(e)
            error_trace = traceback.format_exc()
            metrics.add_error(error_msg)
            metrics.duration_ms = (time.time() - start_time) * 1000
            kind = "fetch failure" if isinstance(e, FetchFailure) else type(e).__name__
            log(f"  ERROR: Failed to scrape {venue_name} ({kind}): {error_msg}", "ERROR")
            log(f"  Traceback:\n{error_trace}", "ERROR")

            venue_status["success"] = False
            venue_status["error"] = error_msg
            venue_status["error_trace"] = error_trace

            kept = [r for r in previous_records if profile.owns_venue_name(r.venueName)]
            if kept:
                log(f"  Keeping {len(kept)} records from the previous run", "WARNING")
                all_records.extend(kept)
                venue_status["kept_previous"] = len(kept)

        venue_statuses[venue_name] = venue_status
        venue_metrics[venue_name] = metrics

    valid_records = [r for r in all_records if validate_record(r)]
    invalid_count = len(all_records) - len(valid_records)
    if invalid_count > 0:
        log(f"  Filtered out {invalid_count} invalid records", "WARNING")

    all_success = all(v["success"] for v in venue_statuses.values())
    any_success = any(v["success"] for v in venue_statuses.values())

    # Log summary table
    log("")
    log("=" * 72)
    log("VENUE SUMMARY")
    log("=" * 72)
    log(f"{'Venue':<24} {'Records':>8} {'Pages':>6} {'Skipped':>8} {'Errors':>7} {'Time':>10}")
    log("-" * 72)
    for name in sorted(venue_metrics.keys()):
        m = venue_metrics[name]
        skipped = m.fragments_filtered + m.fetch_failures
        time_str = f"{m.duration_ms:.0f}ms"
        log(f"{name:<24} {m.records:>8} {m.pages:>6} {skipped:>8} {m.errors:>7} {time_str:>10}")
    log("-" * 72)
    total_records = sum(m.records for m in venue_metrics.values())
    total_errors = sum(m.errors for m in venue_metrics.values())
    total_time = sum(m.duration_ms for m in venue_metrics.values())
    log(f"{'TOTAL':<24} {total_records:>8} {'':>6} {'':>8} {total_errors:>7} {total_time:.0f}ms")
    log("=" * 72)

    log(f"\nTotal valid records: {len(valid_records)}")

    failed_venues = [name for name, status in venue_statuses.items() if not status["success"]]
    if failed_venues:
        log(f"WARNING: Failed to scrape: {', '.join(failed_venues)}", "ERROR")

    if args.dry_run:
        print(json.dumps([r.to_dict() for r in valid_records], indent=2, ensure_ascii=False))
        return 0 if all_success else 1

    save_events(valid_records, output_path)
    log(f"Events saved to {output_path}")

    status_data = {
        "last_run": run_timestamp,
        "all_success": all_success,
        "any_success": any_success,
        "total_events": len(valid_records),
        "venues": venue_statuses,
    }
    save_status(status_data, status_path)
    log(f"Status saved to {status_path}")

    # Save log file (time-based retention: 14 days)
    log(f"Log saved to {log_path}")
    save_log(log_lines, log_path)

    return 0 if all_success else 1


if __name__ == "__main__":
    sys.exit(main())
