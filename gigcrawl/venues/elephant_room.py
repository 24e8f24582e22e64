import re
from datetime import date

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.fetch import StaticPage
from gigcrawl.pipeline.fragments import EventFragment, ListingPage
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.utils.dates import parse_month_header, resolve_calendar_cell
from gigcrawl.utils.text import normalize
from gigcrawl.venues.base import VenueProfile

ELEPHANT_ROOM_CALENDAR = "https://elephantroom.com/calendar"

PROFILE = VenueProfile(
    key="elephantroom",
    name="Elephant Room",
    start_url=ELEPHANT_ROOM_CALENDAR,
    boilerplate_patterns=(
        re.compile(r"^\s*(?:happy\s+hour|late\s+night)\s*(?:set)?\s*[:\-]\s*", re.IGNORECASE),
        re.compile(r"\s+jam\s+session$", re.IGNORECASE),
    ),
    non_concert_keywords=("closed", "private event", "trivia", "karaoke"),
    validator=DEFAULT_VALIDATOR.with_overrides(
        extra_banned_phrases=("elephant room",),
    ),
)

MONTH_NAME_SELECTOR = "#calendar .month .month-name"
CELL_SELECTOR = "#calendar table.calendar td"


def cell_date(day, is_other_month, month, year):
    cell_year, cell_month = resolve_calendar_cell(day, is_other_month, month, year)
    try:
        return date(cell_year, cell_month, day)
    except ValueError:
        return None


def parse_month_grid(html, page_url):
    """
    One fragment per listing in the month grid. Greyed cells from the
    neighbouring months are dated against the grid's own month heading.
    """
    page = StaticPage(html, page_url)
    header = parse_month_header(page.query_text(MONTH_NAME_SELECTOR))
    if not header:
        return []
    year, month = header

    fragments = []
    for cell in page.select(CELL_SELECTOR):
        day_el = cell.select_one(".day")
        day_text = normalize(day_el.get_text(" ")) if day_el else ""
        if not day_text.isdigit():
            continue
        day = int(day_text)
        event_date = cell_date(day, "other-month" in (cell.get("class") or []), month, year)

        for link in cell.select("ul > li a.event_details"):
            raw = normalize(link.get_text(" "))
            name_el = link.select_one(".event-name")
            time_el = link.select_one(".time")
            title = normalize(name_el.get_text(" ")) if name_el else raw
            if not title:
                continue
            fragments.append(EventFragment(
                title=title,
                url=link.get("href") or "",
                page_url=page_url,
                event_date=event_date,
                time_text=normalize(time_el.get_text(" ")) if time_el else raw,
                description=raw,
            ))
    return fragments


class ElephantRoomSource:
    """A single month grid; each cell lists that night's sets."""
    profile = PROFILE

    def listing_pages(self, fetcher, run_config):
        html, final_url = fetcher.fetch_page(PROFILE.start_url_for(run_config))
        yield ListingPage(fragments=parse_month_grid(html, final_url), has_more=False)


def scrape_elephant_room(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from the Elephant Room month calendar."""
    return CrawlOrchestrator(ElephantRoomSource(), PROFILE, run_config, log_func, fetcher, progress).run()
