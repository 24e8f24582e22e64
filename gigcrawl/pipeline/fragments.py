from collections import namedtuple
from dataclasses import dataclass, field, replace

from gigcrawl.errors import ParseMiss
from gigcrawl.pipeline.records import build_record
from gigcrawl.pipeline.strategies import first_match
from gigcrawl.utils.categories import matched_keyword
from gigcrawl.utils.dates import (
    clock_from_datetime,
    parse_date,
    parse_doors_and_show,
    parse_time,
)
from gigcrawl.utils.lineup import (
    extract_lineup,
    extract_lineup_with_fallback,
    lineup_from_names,
    lineup_from_set_times,
    merge_lineups,
    split_set_times,
)
from gigcrawl.utils.logs import console_log
from gigcrawl.utils.text import normalize

# What one listing iteration produced
ListingPage = namedtuple("ListingPage", ["fragments", "detail_urls", "has_more"], defaults=[(), (), False])


@dataclass(frozen=True)
class EventFragment:
    """
    One listing entry before parsing. Venue adapters fill what their markup
    or API provides and leave the rest empty.
    """
    title: str = ""
    subtitle: str = ""
    body_text: str = ""
    url: str = ""
    page_url: str = ""
    venue_name: str = ""
    date_text: str = ""
    event_date: object = None
    start_datetime: object = None
    time_text: str = ""
    doors_text: str = ""
    price: str = ""
    description: str = ""
    lineup: tuple = ()
    support_text: str = ""
    set_times_text: str = ""
    scraped_at: str = ""
    overrides: dict = field(default_factory=dict)


def _date_from_start(fragment):
    return fragment.start_datetime.date() if fragment.start_datetime else None


def _date_from_field(fragment):
    return fragment.event_date


def _date_from_text(fragment):
    return parse_date(fragment.date_text)


def _date_from_body(fragment):
    return parse_date(fragment.body_text)


DATE_STRATEGIES = (_date_from_start, _date_from_field, _date_from_text, _date_from_body)


def parse_times(fragment, default_evening=False):
    """Return (show, doors) for a fragment; either may be None or a display string."""
    schedule = fragment.time_text or fragment.body_text
    doors, show = parse_doors_and_show(schedule)
    if fragment.doors_text:
        doors = parse_time(fragment.doors_text, default_evening) or doors

    if fragment.start_datetime:
        return clock_from_datetime(fragment.start_datetime), doors
    if show:
        return show, doors
    return parse_time(schedule, default_evening), doors


def parse_lineup(fragment, profile):
    """
    Lineup for a fragment: API lineup array first, then title, subtitle and
    support copy. A title that reads as a set-time schedule replaces the
    title split.
    """
    context = profile.lineup_context
    pairs = split_set_times(fragment.set_times_text or fragment.title)
    if pairs and (profile.parse_set_times or len(pairs) >= 2):
        from_title = lineup_from_set_times(fragment.set_times_text or fragment.title, context)
    else:
        from_title = extract_lineup(fragment.title, context)

    return merge_lineups(
        lineup_from_names(fragment.lineup, context),
        from_title,
        extract_lineup(fragment.subtitle, context),
        extract_lineup(fragment.support_text, context),
    )


def process_fragment(fragment, profile, log_func=None, metrics=None):
    """
    Run one fragment through the pipeline and return its EventRecords.
    Non-concert fragments return []. Missing dates or times degrade to empty
    fields; a fragment with no usable name at all is dropped.
    """
    log = log_func or console_log
    title = normalize(fragment.title)
    fragment = replace(fragment, title=title, venue_name=fragment.venue_name or profile.name)

    keyword = matched_keyword(
        title,
        f"{fragment.subtitle} {fragment.body_text}",
        fragment.lineup,
        profile.non_concert_keywords,
        profile.extra_non_concert_keywords,
    )
    if keyword:
        log(f"    {profile.name}: skipping non-concert ({keyword}): {title[:70]}")
        if metrics is not None:
            metrics.count("fragments_filtered")
        return []

    event_date = first_match(DATE_STRATEGIES, fragment)
    if event_date is None:
        log(f"    {profile.name}: no date found for {title[:70] or fragment.url}", "WARNING")
        if metrics is not None:
            metrics.count("parse_misses")
    show, doors = parse_times(fragment, profile.default_evening)

    lineup = parse_lineup(fragment, profile)
    if not lineup:
        lineup = extract_lineup_with_fallback(title, profile.lineup_context)
        if lineup:
            log(f"    {profile.name}: no valid artist split, falling back to title: {title[:70]}", "WARNING")

    records = []
    for entry in lineup:
        try:
            records.append(build_record(
                fragment,
                entry,
                event_date,
                entry.set_time or show,
                overrides=fragment.overrides,
                doors_time=doors,
            ))
        except ParseMiss as e:
            log(f"    {profile.name}: {e}", "WARNING")

    if not records:
        log(f"    {profile.name}: no artists found for {title[:70] or fragment.url}", "WARNING")
        if metrics is not None:
            metrics.count("parse_misses")
    return records
