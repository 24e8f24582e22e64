import re

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.venues.base import VenueProfile
from gigcrawl.venues.timely import TimelySource, calendar_url

TIMELY_API = calendar_url("54714969")
TIMELY_VENUE_ID = "678194631"

PROFILE = VenueProfile(
    key="cboys",
    name="C-Boy's Heart & Soul",
    start_url=TIMELY_API,
    aliases=("C-Boy's", "C-Boys"),
    boilerplate_patterns=(
        re.compile(r"^(?:in\s+)?(?:the\s+jade\s+room|on\s+the\s+patio)\s*:\s*", re.IGNORECASE),
        re.compile(r"\s*-\s*tickets\b.*$", re.IGNORECASE),
    ),
    non_concert_keywords=(
        "bingo", "trivia", "karaoke", "market", "brunch", "yoga", "happy hour",
        "watch party", "private party", "closed for a private party", "benefit",
        "fundraiser", "tribute",
    ),
    validator=DEFAULT_VALIDATOR.with_overrides(
        extra_banned_phrases=("we present", "was formerly", "closed for", "born in", "started out"),
    ),
    # Same act often plays an early and a late set
    dedupe_policy="artist+time",
    parse_set_times=True,
)


def scrape_cboys(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from C-Boy's Heart & Soul via the Timely calendar API."""
    source = TimelySource(PROFILE, TIMELY_VENUE_ID)
    return CrawlOrchestrator(source, PROFILE, run_config, log_func, fetcher, progress).run()
