import os
from dataclasses import dataclass, fields
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from gigcrawl.errors import ConfigurationError

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = REPO_ROOT / "data"
OUTPUT_PATH = DATA_DIR / "events.json"
STATUS_PATH = DATA_DIR / "scrape-status.json"
LOG_PATH = DATA_DIR / "scrape-log.txt"

LOG_RETENTION_DAYS = 14

MARKET = "Austin, TX"

# Public key embedded in the venue's calendar widget
TIMELY_API_KEY = os.environ.get("TIMELY_API_KEY", "c6e5e0363b5925b28552de8805464c66f25ba0ce")

DEFAULT_MAX_EVENTS = int(os.environ.get("GIGCRAWL_MAX_EVENTS", "0"))
DEFAULT_MAX_CONCURRENCY = int(os.environ.get("GIGCRAWL_MAX_CONCURRENCY", "3"))
DEFAULT_REQUEST_TIMEOUT = int(os.environ.get("GIGCRAWL_REQUEST_TIMEOUT", "30"))
DEFAULT_MAX_PAGES = int(os.environ.get("GIGCRAWL_MAX_PAGES", "0"))
MAX_CONCURRENCY_LIMIT = 6

FETCH_MAX_ATTEMPTS = 4
FETCH_BACKOFF_SECONDS = 0.5
MAX_LISTING_ITERATIONS = 50
DESCRIPTION_LIMIT = 500

REQUIRED_FIELDS = ["artistName", "venueName", "eventURL"]

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}
JSON_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; calendar-crawler/1.0)",
    "Accept": "application/json, text/plain, */*",
}

# Input keys as the hosted actors received them
INPUT_ALIASES = {
    "startUrl": "start_url",
    "calendarUrl": "start_url",
    "maxEvents": "max_events",
    "maxConcurrency": "max_concurrency",
    "requestTimeoutSeconds": "request_timeout_seconds",
    "requestTimeoutSecs": "request_timeout_seconds",
    "requestHandlerTimeoutSecs": "request_timeout_seconds",
    "maxPages": "max_pages",
    "runTimeoutSeconds": "run_timeout_seconds",
}


def _as_int(name, value):
    # 5.0 and "5" are fine; 5.7 and True are not
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class RunConfig:
    """Input configuration for one venue run. Zero limits mean unlimited."""
    start_url: str = ""
    max_events: int = DEFAULT_MAX_EVENTS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT
    max_pages: int = DEFAULT_MAX_PAGES
    run_timeout_seconds: int = 0

    @property
    def run_timeout(self):
        """Seconds before outstanding fetches are abandoned."""
        return self.run_timeout_seconds or self.request_timeout_seconds * 10

    def limit_reached(self, count):
        return self.max_events > 0 and count >= self.max_events

    @classmethod
    def from_input(cls, data=None, **defaults):
        """
        Build a RunConfig from an input mapping (camelCase or snake_case keys).
        Keyword defaults fill anything the input leaves out.
        Raises ConfigurationError before any fetch is attempted.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in defaults.items() if v is not None}

        for key, value in (data or {}).items():
            name = INPUT_ALIASES.get(key, key)
            if name not in known:
                continue
            if value is None or value == "":
                continue
            values[name] = value

        for name in ("max_events", "max_concurrency", "request_timeout_seconds", "max_pages", "run_timeout_seconds"):
            if name not in values:
                continue
            values[name] = _as_int(name, values[name])
            if values[name] < 0:
                raise ConfigurationError(f"{name} must not be negative, got {values[name]}")

        if "max_concurrency" in values:
            values["max_concurrency"] = min(max(values["max_concurrency"], 1), MAX_CONCURRENCY_LIMIT)
        if values.get("request_timeout_seconds") == 0:
            raise ConfigurationError("request_timeout_seconds must be positive")

        start_url = str(values.get("start_url", "")).strip()
        if start_url:
            parsed = urlparse(start_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ConfigurationError(f"start_url is not an absolute http(s) URL: {start_url!r}")
            values["start_url"] = start_url

        return cls(**values)
