import re

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.fetch import StaticPage
from gigcrawl.pipeline.fragments import EventFragment, ListingPage
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.utils.dates import parse_date
from gigcrawl.venues.base import VenueProfile

ANTONES_CALENDAR = "https://antonesnightclub.com/calendar/"

PROFILE = VenueProfile(
    key="antones",
    name="Antone's Nightclub",
    start_url=ANTONES_CALENDAR,
    aliases=("Antone's", "Antones"),
    boilerplate_patterns=(
        re.compile(r"^(?:THE\s+JUNGLE\s+SHOW|UPSTAIRS|DOWNSTAIRS|THE\s+JAZZ\s+ROOM|AUSTIN\s+LIVE!?)\s*:\s*", re.IGNORECASE),
        re.compile(r"^\s*GLAM\s*\|\s*", re.IGNORECASE),
    ),
    non_concert_keywords=(
        "bingo", "trivia", "karaoke", "market", "yoga", "comedy show", "movie",
        "screening", "brunch", "vendor", "workshop", "private event",
    ),
    # Recurring series where every name on the bill is filtered anyway
    extra_non_concert_keywords=("b3 summit",),
    validator=DEFAULT_VALIDATOR.with_overrides(
        extra_generic_names=frozenset({
            "austin live!", "next of kin", "the jazz room", "tc superstar",
            "gatsby", "glam", "bollywood dance party",
        }),
        extra_banned_phrases=("antone's", "antones", "new year's"),
    ),
)

EVENT_SELECTOR = ".fc-event"
SOLD_OUT_RE = re.compile(r"sold\s*out", re.IGNORECASE)


def parse_calendar(html, page_url):
    """One fragment per FullCalendar event block; the date comes from the enclosing cell."""
    page = StaticPage(html, page_url)
    if not page.wait_for_selector(EVENT_SELECTOR):
        return []

    fragments = []
    for el in page.select(EVENT_SELECTOR):
        link = el if el.name == "a" else (el.find("a") or el)
        title = link.get_text(" ", strip=True)
        href = link.get("href") or ""
        if not title or not href:
            continue

        cell = el.find_parent(attrs={"data-date": True})
        date_attr = cell["data-date"] if cell else ""

        fragments.append(EventFragment(
            title=title,
            url=href,
            page_url=page_url,
            event_date=parse_date(date_attr),
            time_text=title,
            price="Sold Out" if SOLD_OUT_RE.search(title) else "",
        ))
    return fragments


class AntonesSource:
    """The calendar page carries everything; there is no detail phase."""
    profile = PROFILE

    def listing_pages(self, fetcher, run_config):
        html, final_url = fetcher.fetch_page(PROFILE.start_url_for(run_config))
        yield ListingPage(fragments=parse_calendar(html, final_url), has_more=False)


def scrape_antones(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from Antone's Nightclub calendar."""
    return CrawlOrchestrator(AntonesSource(), PROFILE, run_config, log_func, fetcher, progress).run()
