import json
import re
from urllib.parse import urljoin

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.pipeline.fragments import EventFragment, ListingPage
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.utils.text import normalize, strip_html
from gigcrawl.venues.base import VenueProfile

MOHAWK_BASE = "https://mohawkaustin.com/"
PREKINDLE_API = "https://www.prekindle.com/api/events/organizer/531433527670566235"

PROFILE = VenueProfile(
    key="mohawk",
    name="Mohawk Austin",
    start_url=MOHAWK_BASE,
    aliases=("Mohawk",),
    boilerplate_patterns=(
        re.compile(r"^\s*resound\s+presents\b[:\-]?\s*", re.IGNORECASE),
    ),
    non_concert_keywords=(
        "bingo", "trivia", "karaoke", "market", "yoga", "comedy", "movie",
        "screening", "brunch", "vendor", "workshop",
    ),
    validator=DEFAULT_VALIDATOR.with_overrides(
        max_length=80,
        extra_banned_phrases=("mohawk",),
    ),
    # Prekindle lists the same act on separate nights as separate events
    dedupe_policy="artist+event",
)

JSONP_PREFIX = "callback("


def parse_jsonp(body):
    """Unwrap Prekindle's callback(...) envelope. Raises ValueError on anything else."""
    trimmed = (body or "").strip()
    if not trimmed.startswith(JSONP_PREFIX) or not trimmed.endswith(")"):
        raise ValueError("Unexpected response format from Prekindle")
    try:
        return json.loads(trimmed[len(JSONP_PREFIX):-1])
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed Prekindle payload: {e}") from e


def stage_name(venue_raw):
    lower = (venue_raw or "").lower()
    if "indoor" in lower:
        return "Mohawk - Inside"
    if "outdoor" in lower:
        return "Mohawk - Outside"
    return PROFILE.name


def event_url(base, event_id):
    if not event_id:
        return base
    return urljoin(base, f"/event/?id={event_id}")


def event_to_fragment(event, base_url):
    support = normalize(event.get("support"))
    description = strip_html(event.get("description") or "")
    parts = [p for p in (description, support) if p]
    lineup = event.get("lineup") if isinstance(event.get("lineup"), list) else []

    return EventFragment(
        title=event.get("headliner") or event.get("title") or "",
        subtitle=(event.get("title") or "") if event.get("headliner") else "",
        url=event_url(base_url, event.get("id")),
        page_url=base_url,
        venue_name=stage_name(event.get("venue")),
        date_text=normalize(event.get("date")),
        time_text=normalize(event.get("time")),
        doors_text=normalize(event.get("doorsTime")),
        lineup=tuple(normalize(name) for name in lineup if name),
        support_text=support,
        description=" | ".join(dict.fromkeys(parts)),
    )


class MohawkSource:
    """Single JSONP call returns the whole season."""
    profile = PROFILE

    def listing_pages(self, fetcher, run_config):
        base_url = PROFILE.start_url_for(run_config)
        payload = parse_jsonp(fetcher.fetch_text(PREKINDLE_API))
        events = payload.get("events") or []
        yield ListingPage(fragments=[event_to_fragment(e, base_url) for e in events], has_more=False)


def scrape_mohawk(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from Mohawk via the Prekindle organizer feed."""
    return CrawlOrchestrator(MohawkSource(), PROFILE, run_config, log_func, fetcher, progress).run()
