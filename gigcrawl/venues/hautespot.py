import re
from datetime import date, datetime
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse
from zoneinfo import ZoneInfo

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.pipeline.fragments import EventFragment, ListingPage
from gigcrawl.utils.dates import parse_iso_datetime
from gigcrawl.utils.text import html_to_lines, strip_html
from gigcrawl.venues.base import VenueProfile

HAUTE_SPOT_BASE = "https://hautespot.live"
HAUTE_SPOT_CALENDAR = "https://hautespot.live/calendar"

PROFILE = VenueProfile(
    key="hautespot",
    name="Haute Spot",
    start_url=HAUTE_SPOT_CALENDAR,
)

SUPPORT_LINE_RES = (
    re.compile(r"with support(?:\s+from)?\s*[:\-]?\s*(.+)", re.IGNORECASE),
    re.compile(r"\bsupport\s*[:\-]\s*(.+)", re.IGNORECASE),
)
SECTION_BREAK_RE = re.compile(
    r"(?:EVENT DETAILS|SHOW DATE:|DATE:|TIME:|DOORS?:|LOCATION:|HEADLINER:|TICKETS?:)", re.IGNORECASE
)
ACT_SPLIT_RE = re.compile(r"\s+\+\s+|\s+\|\s+|\s*[,;]\s*")
PRICE_RE = re.compile(r"\$\d+(?:\.\d{2})?")
FREE_RE = re.compile(r"\bfree\b", re.IGNORECASE)


def json_url(base_url, offset=None):
    """Squarespace collections serve JSON with ?format=json, paged by offset."""
    parts = urlparse(base_url or HAUTE_SPOT_CALENDAR)
    query = dict(parse_qsl(parts.query))
    query["format"] = "json"
    if offset:
        query["offset"] = str(offset)
    return urlunparse(parts._replace(query=urlencode(query)))


def support_text(lines):
    """Collect acts named on "with support from ..." lines of the event body."""
    acts = []
    for line in lines:
        for pattern in SUPPORT_LINE_RES:
            match = pattern.search(line)
            if not match:
                continue
            fragment = SECTION_BREAK_RE.split(match.group(1).split("*")[0])[0]
            fragment = re.sub(r"^from\s+", "", fragment.strip(), flags=re.IGNORECASE)
            acts.extend(name for name in ACT_SPLIT_RE.split(fragment) if name.strip())
            break
    return ", ".join(acts)


def extract_price(text):
    match = PRICE_RE.search(text)
    if match:
        return match.group(0)
    return "Free" if FREE_RE.search(text) else ""


def item_to_fragment(item, tz_name=PROFILE.timezone):
    start_ms = item.get("startDate") or (item.get("structuredContent") or {}).get("startDate")
    lines = html_to_lines(item.get("body") or "")
    body_text = " ".join(lines)

    return EventFragment(
        title=item.get("title") or "",
        body_text=body_text,
        url=urljoin(HAUTE_SPOT_BASE, item.get("fullUrl") or ""),
        start_datetime=parse_iso_datetime(start_ms, tz_name),
        time_text=body_text,
        price=extract_price(body_text),
        support_text=support_text(lines),
        description=strip_html(item.get("excerpt") or ""),
    )


def month_start_ms(today=None, tz_name=PROFILE.timezone):
    today = today or date.today()
    start = datetime(today.year, today.month, 1, tzinfo=ZoneInfo(tz_name))
    return int(start.timestamp() * 1000)


class HauteSpotSource:
    profile = PROFILE

    def __init__(self, today=None):
        self.today = today

    def listing_pages(self, fetcher, run_config):
        base_url = PROFILE.start_url_for(run_config)
        cutoff = month_start_ms(self.today)
        offset = None

        while True:
            data = fetcher.fetch_json(json_url(base_url, offset))
            upcoming = data.get("upcoming") or []
            items = [
                item for item in upcoming + (data.get("past") or [])
                if (item.get("startDate") or 0) >= cutoff
            ]
            # Past-only pages older than this month end the crawl
            if not items and not upcoming:
                return

            pagination = data.get("pagination") or {}
            has_more = bool(pagination.get("nextPage"))
            yield ListingPage(fragments=[item_to_fragment(item) for item in items], has_more=has_more)

            if not has_more:
                return
            offset = pagination.get("nextPageOffset")


def scrape_hautespot(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from Haute Spot's Squarespace calendar feed."""
    return CrawlOrchestrator(HauteSpotSource(), PROFILE, run_config, log_func, fetcher, progress).run()
