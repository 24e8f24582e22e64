from dataclasses import asdict, dataclass, fields
from datetime import date, datetime, timezone
from urllib.parse import urljoin, urlparse

from gigcrawl import config
from gigcrawl.errors import ParseMiss
from gigcrawl.utils.dates import (
    ClockTime,
    format_date,
    format_time,
    parse_date,
    parse_iso_datetime,
    parse_time,
)
from gigcrawl.utils.lineup import HEADLINER
from gigcrawl.utils.text import normalize, strip_html, truncate


@dataclass(frozen=True)
class EventRecord:
    """One performer at one event, the shape written to events.json."""
    artistName: str
    role: str = HEADLINER
    venueName: str = ""
    eventTitle: str = ""
    eventURL: str = ""
    eventDate: str = ""
    eventTime: str = ""
    doorsTime: str = ""
    price: str = ""
    description: str = ""
    scrapedAt: str = ""

    def to_dict(self):
        return asdict(self)


RECORD_FIELDS = tuple(f.name for f in fields(EventRecord))

# Field names the old per-venue outputs used, checked in order
RECORD_ALIASES = {
    "artistName": ("artistName", "artist", "name"),
    "role": ("role",),
    "venueName": ("venueName", "venue"),
    "eventTitle": ("eventTitle", "title", "event"),
    "eventURL": ("eventURL", "eventUrl", "url"),
    "eventDate": ("eventDate", "eventDateText", "date", "startDate", "start_time", "dateAttr", "event_date"),
    "eventTime": ("eventTime", "showTime", "time"),
    "doorsTime": ("doorsTime", "doors"),
    "price": ("price", "priceText", "cost"),
    "description": ("description",),
    "scrapedAt": ("scrapedAt",),
}


def utc_timestamp():
    """Current UTC time as ISO-8601 with a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _display_date(value):
    if isinstance(value, datetime):
        return format_date(value.date())
    if isinstance(value, date):
        return format_date(value)
    return value or ""


def _display_time(value):
    if isinstance(value, ClockTime):
        return format_time(value)
    return value or ""


def _clean(value):
    if value is None:
        return ""
    return str(value).strip()


def _absolute_url(url, base):
    if not url:
        return base or ""
    if urlparse(url).scheme:
        return url
    return urljoin(base or "", url)


def _finalize(values):
    record = {name: _clean(values.get(name)) for name in RECORD_FIELDS}
    if not record["artistName"]:
        raise ParseMiss(f"no artist name for {record['eventTitle'] or record['eventURL'] or 'fragment'}")
    record["role"] = record["role"] or HEADLINER
    record["description"] = truncate(strip_html(record["description"]), config.DESCRIPTION_LIMIT)
    record["scrapedAt"] = record["scrapedAt"] or utc_timestamp()
    return EventRecord(**record)


def build_record(fragment, entry, parsed_date, parsed_time, overrides=None, doors_time=None):
    """
    Assemble an EventRecord for one lineup entry of a fragment.
    Overrides win over parsed values. Relative event URLs are resolved
    against the page the fragment came from.
    Raises ParseMiss when no artist name survives.
    """
    values = {
        "artistName": entry.name,
        "role": entry.role,
        "venueName": fragment.venue_name,
        "eventTitle": normalize(fragment.title),
        "eventURL": fragment.url,
        "eventDate": _display_date(parsed_date),
        "eventTime": _display_time(parsed_time),
        "doorsTime": _display_time(doors_time),
        "price": normalize(fragment.price),
        "description": fragment.description,
        "scrapedAt": fragment.scraped_at,
    }
    for key, value in (overrides or {}).items():
        if key in RECORD_FIELDS and value not in (None, ""):
            values[key] = value

    values["eventURL"] = _absolute_url(_clean(values["eventURL"]), fragment.page_url)
    return _finalize(values)


def _first_value(raw, keys):
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _coerce_date(value):
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return _display_date(value)
    if isinstance(value, (int, float)):
        return _display_date(parse_iso_datetime(value))
    text = str(value).strip()
    parsed = parse_iso_datetime(text) if text[:4].isdigit() else None
    return _display_date(parsed or parse_date(text, roll_forward=False))


def _coerce_time(value):
    if value is None or isinstance(value, ClockTime):
        return _display_time(value)
    return format_time(parse_time(str(value)))


def normalize_record(raw):
    """
    Turn a loosely keyed dict (old actor output, API passthrough) into an
    EventRecord. Alias keys map onto the canonical names and any parseable
    date is reformatted; unparseable dates and times become empty.
    Raises ParseMiss when no artist name is present.
    """
    values = {name: _first_value(raw, keys) for name, keys in RECORD_ALIASES.items()}
    values["eventDate"] = _coerce_date(values["eventDate"])
    values["eventTime"] = _coerce_time(values["eventTime"])
    values["doorsTime"] = _coerce_time(values["doorsTime"])
    return _finalize(values)
