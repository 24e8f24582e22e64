import re
from datetime import date, timedelta

from gigcrawl import config
from gigcrawl.pipeline.fragments import EventFragment, ListingPage
from gigcrawl.utils.dates import parse_iso_datetime
from gigcrawl.utils.text import normalize, strip_html

TIMELY_HEADERS = {
    "x-api-key": config.TIMELY_API_KEY,
    "Accept": "application/json, text/plain, */*",
    "Referer": "https://events.timely.fun/",
}
DAYS_AHEAD = 120

INLINE_TIME_RE = re.compile(r"@\s*\d{1,2}(?::\d{2})?\s*(?:am|pm)", re.IGNORECASE)


def calendar_url(calendar_id):
    return f"https://timelyapp.time.ly/api/calendars/{calendar_id}/events"


def normalize_price(event):
    raw = event.get("cost") or event.get("cost_display") or ""
    if not raw or raw == "0":
        return ""
    text = strip_html(raw)
    text = INLINE_TIME_RE.sub("", text)
    return re.sub(r"\s+([.,])", r"\1", normalize(text))


def event_to_fragment(event, profile):
    venue = ((event.get("taxonomies") or {}).get("taxonomy_venue") or [{}])[0].get("title") or profile.name
    description = event.get("description_short") or event.get("description") or ""
    return EventFragment(
        title=event.get("title") or "",
        body_text=strip_html(f"{event.get('description_short') or ''} {event.get('description') or ''}"),
        url=event.get("url") or event.get("canonical_url") or "",
        venue_name=venue,
        # Timely returns venue-local wall time without an offset
        start_datetime=parse_iso_datetime(event.get("start_datetime"), profile.timezone),
        price=normalize_price(event),
        description=description,
    )


def month_window(today=None, days_ahead=DAYS_AHEAD):
    """From the first of this month, so mid-month runs keep earlier shows."""
    start = (today or date.today()).replace(day=1)
    return start, start + timedelta(days=days_ahead)


class TimelySource:
    """Timely calendar API: events grouped by day, paged with has_next."""

    def __init__(self, profile, venue_id, today=None, days_ahead=DAYS_AHEAD):
        self.profile = profile
        self.venue_id = venue_id
        self.today = today
        self.days_ahead = days_ahead

    def listing_pages(self, fetcher, run_config):
        start, end = month_window(self.today, self.days_ahead)
        page = 1
        while True:
            params = {
                "group_by_date": "1",
                "venues": self.venue_id,
                "timezone": self.profile.timezone,
                "view": "month",
                "start_datetime": start.isoformat(),
                "end_datetime": end.isoformat(),
                "per_page": "500",
                "page": str(page),
            }
            payload = fetcher.fetch_json(self.profile.start_url_for(run_config), headers=TIMELY_HEADERS, params=params)
            data = payload.get("data") or {}
            grouped = data.get("items") or {}

            fragments = [
                event_to_fragment(event, self.profile)
                for day in grouped
                for event in grouped[day]
            ]
            has_more = bool(data.get("has_next"))
            yield ListingPage(fragments=fragments, has_more=has_more)

            if not has_more:
                break
            page += 1
