import re
from collections import namedtuple
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

ClockTime = namedtuple("ClockTime", ["hour", "minute", "meridiem"])

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

MONTH_PATTERN = (
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
WEEKDAY_PATTERN = r"(?:mon|tue|wed|thu|fri|sat|sun)[a-z]*\.?"

DATE_RE = re.compile(
    rf"\b(?:{WEEKDAY_PATTERN},?\s+)?{MONTH_PATTERN}\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?\b(?:,?\s*(\d{{4}})\b)?",
    re.IGNORECASE,
)
ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})(?!\d)")
MONTH_HEADER_RE = re.compile(rf"\b{MONTH_PATTERN}\.?\s+(\d{{4}})\b", re.IGNORECASE)

TIME_RE = re.compile(
    r"(?<![\d:])(\d{1,2})(?::([0-5]\d))?(?:\s*([ap])\.?m\b\.?|([ap])\b)",
    re.IGNORECASE,
)
CLOCK_RE = re.compile(r"(?<![\d:$.])(\d{1,2}):([0-5]\d)(?::\d{2})?(?![\d])")
LONE_HOUR_RE = re.compile(r"(?:^|@\s*|\bat\s+)(\d{1,2})$", re.IGNORECASE)

DOORS_RE = re.compile(
    r"doors?\s*(?:open\s*)?(?:at|@)?\s*[:\-]?\s*(\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\.?|[ap])\b)",
    re.IGNORECASE,
)
SHOW_RE = re.compile(
    r"show\s*(?:starts\s*)?(?:at|@)?\s*[:\-]?\s*(\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\.?|[ap])\b)",
    re.IGNORECASE,
)


def month_number(name):
    """Month number (1-12) for a full or abbreviated month name, or None."""
    if not name:
        return None
    return MONTHS.get(name.strip()[:3].lower())


def _safe_date(year, month, day):
    try:
        return date(year, month, day)
    except (TypeError, ValueError):
        return None


def parse_date(text, reference_year=None, today=None, roll_forward=True):
    """
    Extract the first calendar date from free text.
    Handles "Fri, Dec 5", "DECEMBER 05, 2025", "Sept. 3rd" and ISO dates.
    Without a year, reference_year (default: this year) is used and a month
    earlier than the current month rolls into the next year.
    Returns a datetime.date or None.
    """
    if not text:
        return None
    text = str(text)

    iso = ISO_DATE_RE.search(text)
    if iso:
        return _safe_date(*(int(g) for g in iso.groups()))

    match = DATE_RE.search(text)
    if not match:
        return None

    month = month_number(match.group(1))
    day = int(match.group(2))
    if match.group(3):
        return _safe_date(int(match.group(3)), month, day)

    today = today or date.today()
    year = reference_year or today.year
    if roll_forward and month < today.month:
        year += 1
    return _safe_date(year, month, day)


def parse_month_header(text):
    """Parse a calendar heading like "December 2025" into (year, month)."""
    match = MONTH_HEADER_RE.search(text or "")
    if not match:
        return None
    return int(match.group(2)), month_number(match.group(1))


def resolve_calendar_cell(day, is_other_month, month, year):
    """
    Work out (year, month) for a month-grid cell.
    Greyed-out cells with small day numbers belong to the next month, large
    numbers to the previous one.
    """
    if not is_other_month:
        return year, month
    if day <= 15:
        return (year + 1, 1) if month == 12 else (year, month + 1)
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _clock(hour, minute, meridiem):
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        return None
    return ClockTime(hour, minute, meridiem)


def clock_from_24h(hour, minute=0):
    """Convert a 24-hour clock reading into a ClockTime."""
    if not 0 <= hour <= 23:
        return None
    meridiem = "pm" if hour >= 12 else "am"
    return _clock(hour % 12 or 12, minute, meridiem)


def parse_time(text, default_evening=False):
    """
    Extract a clock time like "8pm", "8:30 PM", "9p" or "7 p.m.".
    A bare hour without am/pm is rejected unless default_evening is set, in
    which case it is read as an evening time. Unambiguous 24-hour readings
    such as "20:00" are always accepted.
    """
    if not text:
        return None
    text = str(text)

    for match in TIME_RE.finditer(text):
        meridiem = (match.group(3) or match.group(4)).lower() + "m"
        clock = _clock(int(match.group(1)), int(match.group(2) or 0), meridiem)
        if clock:
            return clock

    clock = CLOCK_RE.search(text)
    if clock:
        hour, minute = int(clock.group(1)), int(clock.group(2))
        if hour > 12 or hour == 0:
            return clock_from_24h(hour, minute)
        if default_evening:
            return _clock(hour, minute, "pm")
        return None

    if default_evening:
        lone = LONE_HOUR_RE.search(text.strip())
        if lone:
            return _clock(int(lone.group(1)), 0, "pm")

    return None


def parse_doors_and_show(text):
    """
    Pull doors and show times out of schedule copy such as
    "Doors: 7pm / Show: 8pm". When no show label is present the first time
    outside the doors phrase is used. Returns display strings.
    """
    if not text:
        return "", ""

    doors_match = DOORS_RE.search(text)
    show_match = SHOW_RE.search(text)
    doors = format_time(parse_time(doors_match.group(1))) if doors_match else ""

    if show_match:
        show = format_time(parse_time(show_match.group(1)))
    else:
        rest = text
        if doors_match:
            rest = text[: doors_match.start()] + " " + text[doors_match.end():]
        show = format_time(parse_time(rest))

    return doors, show


def parse_iso_datetime(value, tz_name=None):
    """
    Parse API timestamps: ISO strings ("2025-12-05 20:00:00",
    "2025-12-05T20:00:00Z") or epoch milliseconds.
    Aware values are converted to tz_name when given; naive strings are
    taken as venue-local already. Returns None when unparseable.
    """
    if value is None or value == "":
        return None

    if isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        text = str(value).strip().replace(" ", "T", 1)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if tz_name and parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo(tz_name))
    return parsed


def clock_from_datetime(value):
    if value is None:
        return None
    return clock_from_24h(value.hour, value.minute)


def format_date(value):
    """Render a date as "Fri, Dec 05, 2025"; empty string for None."""
    if value is None:
        return ""
    return value.strftime("%a, %b %d, %Y")


def format_time(clock):
    """Render a ClockTime as "8:00 pm"; empty string for None."""
    if clock is None:
        return ""
    return f"{clock.hour}:{clock.minute:02d} {clock.meridiem}"
