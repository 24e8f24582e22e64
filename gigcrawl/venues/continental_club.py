import re

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.utils.categories import CONSERVATIVE_KEYWORDS
from gigcrawl.venues.base import VenueProfile
from gigcrawl.venues.timely import TimelySource, calendar_url

CONTINENTAL_API = calendar_url("54714987")
# Austin club; the gallery upstairs shares the calendar under another id
CONTINENTAL_VENUE_ID = "678194628"
DAYS_AHEAD = 90

PROFILE = VenueProfile(
    key="continental",
    name="The Continental Club",
    start_url=CONTINENTAL_API,
    aliases=("Continental Club",),
    boilerplate_patterns=(
        re.compile(r"^\s*(?:happy\s+hour|early\s+show|late\s+show)\s*:\s*", re.IGNORECASE),
    ),
    # Nightly residencies are all music
    non_concert_keywords=CONSERVATIVE_KEYWORDS,
    validator=DEFAULT_VALIDATOR.with_overrides(
        extra_banned_phrases=("continental club",),
    ),
)


def scrape_continental_club(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from The Continental Club via the Timely calendar API."""
    source = TimelySource(PROFILE, CONTINENTAL_VENUE_ID, days_ahead=DAYS_AHEAD)
    return CrawlOrchestrator(source, PROFILE, run_config, log_func, fetcher, progress).run()
