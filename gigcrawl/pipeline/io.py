import json
import re
from datetime import datetime, timedelta, timezone

from gigcrawl import config
from gigcrawl.errors import ParseMiss
from gigcrawl.pipeline.records import normalize_record


def trim_log_by_time(log_path, retention_days=config.LOG_RETENTION_DAYS):
    """
    Remove log entries older than retention_days.
    Returns list of lines to keep.
    """
    if not log_path.exists():
        return []

    cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
    cutoff_str = cutoff.strftime("%Y-%m-%d %H:%M:%S")

    kept_lines = []
    current_entry_recent = False

    with open(log_path, "r") as f:
        for line in f:
            match = re.match(r"\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]", line)
            if match:
                current_entry_recent = match.group(1) >= cutoff_str

            if current_entry_recent:
                kept_lines.append(line)

    return kept_lines


def load_existing_status(status_path=config.STATUS_PATH):
    """Load the previous scrape status file, so last_success survives a failed run."""
    try:
        if status_path.exists():
            with open(status_path, "r") as f:
                return json.load(f)
    except (OSError, json.JSONDecodeError):
        pass
    return {"venues": {}}


def load_existing_events(output_path=config.OUTPUT_PATH):
    """
    Load the previous run's events.json as EventRecords.
    Older files with alias keys are normalized; entries without an artist are dropped.
    """
    if not output_path.exists():
        return []
    try:
        with open(output_path, "r") as f:
            raw_events = json.load(f)
    except (OSError, json.JSONDecodeError):
        return []
    if not isinstance(raw_events, list):
        return []

    records = []
    for raw in raw_events:
        if not isinstance(raw, dict):
            continue
        try:
            records.append(normalize_record(raw))
        except ParseMiss:
            continue
    return records


def save_events(records, output_path=config.OUTPUT_PATH):
    """Write records as a JSON array in crawl order."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump([r.to_dict() for r in records], f, indent=2, ensure_ascii=False)


def save_status(status, status_path=config.STATUS_PATH):
    status_path.parent.mkdir(parents=True, exist_ok=True)
    with open(status_path, "w") as f:
        json.dump(status, f, indent=2)


def save_log(log_lines, log_path=config.LOG_PATH, retention_days=config.LOG_RETENTION_DAYS):
    """Append this run's lines to the log file, dropping entries past retention."""
    existing_log = trim_log_by_time(log_path, retention_days=retention_days)
    log_content = existing_log + ["\n--- New Run ---\n"] + [line + "\n" for line in log_lines]

    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, "w") as f:
        f.writelines(log_content)
