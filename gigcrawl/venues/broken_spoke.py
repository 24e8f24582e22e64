import re

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.fetch import StaticPage
from gigcrawl.pipeline.fragments import EventFragment, ListingPage
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.utils.dates import DATE_RE, parse_date, parse_month_header
from gigcrawl.venues.base import VenueProfile

BROKEN_SPOKE_CALENDAR = "https://www.brokenspokeaustintx.net/events-calendar"

PROFILE = VenueProfile(
    key="brokenspoke",
    name="Broken Spoke",
    start_url=BROKEN_SPOKE_CALENDAR,
    boilerplate_patterns=(
        re.compile(r"\s*\b(?:in\s+the\s+)?(?:dancehall|restaurant)\b.*$", re.IGNORECASE),
        # Listings give bare clock times ("8:00", "8:30-10:30")
        re.compile(r"\s+\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m?\.?)?(?:\s*-\s*\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m?\.?)?)?\s*$", re.IGNORECASE),
        re.compile(r"\s+band$", re.IGNORECASE),
    ),
    # The shared list drops anything mentioning "dance", which is every listing here
    non_concert_keywords=("closed", "dance lessons", "private event", "bingo", "trivia", "karaoke"),
    validator=DEFAULT_VALIDATOR.with_overrides(case_policy="prefer_title"),
    # Resident bands play every week; keep each night
    dedupe_policy="artist+time",
    default_evening=True,
)

LINE_SPLIT_RE = re.compile(r"\s+[-–—]\s+|\s*[-–—]\s*(?=[A-Za-z])")


def parse_line(line, year=None, page_url=""):
    """
    "Dec 5 - Jesse Dayton w/ The Derailers 8:00" -> EventFragment, or None
    for lines that are not listings. year comes from the last month header.
    """
    match = DATE_RE.search(line)
    if not match:
        return None

    rest = LINE_SPLIT_RE.split(line[match.end():], maxsplit=1)
    act_text = rest[-1].strip() if rest else ""
    if not act_text:
        return None

    return EventFragment(
        title=act_text,
        url=page_url,
        page_url=page_url,
        event_date=parse_date(line, reference_year=year, roll_forward=year is None),
        time_text=act_text,
        description=line,
    )


def parse_calendar_lines(lines, page_url):
    fragments = []
    year = None
    for line in lines:
        header = parse_month_header(line)
        if header and not DATE_RE.search(line):
            year = header[0]
            continue
        fragment = parse_line(line, year, page_url)
        if fragment:
            fragments.append(fragment)
    return fragments


class BrokenSpokeSource:
    """The calendar is one page of text lines under month headings."""
    profile = PROFILE

    def listing_pages(self, fetcher, run_config):
        html, final_url = fetcher.fetch_page(PROFILE.start_url_for(run_config))
        page = StaticPage(html, final_url)
        yield ListingPage(fragments=parse_calendar_lines(page.body_lines(), final_url), has_more=False)


def scrape_broken_spoke(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from the Broken Spoke calendar."""
    return CrawlOrchestrator(BrokenSpokeSource(), PROFILE, run_config, log_func, fetcher, progress).run()
