from datetime import date, datetime

from gigcrawl.pipeline.fragments import EventFragment, parse_times, process_fragment
from gigcrawl.pipeline.metrics import CrawlMetrics
from gigcrawl.pipeline.strategies import first_match
from gigcrawl.utils.dates import ClockTime
from gigcrawl.venues.base import VenueProfile

PROFILE = VenueProfile(key="test", name="Test Venue", start_url="https://example.com/calendar")


def collect():
    lines = []

    def log(message, level="INFO"):
        lines.append((level, message))
    return lines, log


def test_process_fragment_builds_one_record_per_act():
    fragment = EventFragment(
        title="Jesse Dayton w/ The Derailers",
        url="https://example.com/e/1",
        event_date=date(2025, 12, 5),
        time_text="Doors 7pm / Show 8pm",
        lineup=("Jesse Dayton",),
    )
    lines, log = collect()
    records = process_fragment(fragment, PROFILE, log)
    assert [(r.artistName, r.role) for r in records] == [
        ("Jesse Dayton", "headliner"),
        ("The Derailers", "support"),
    ]
    assert records[0].venueName == "Test Venue"
    assert records[0].eventTime == "8:00 pm"
    assert records[0].doorsTime == "7:00 pm"
    assert records[0].eventDate == "Fri, Dec 05, 2025"


def test_process_fragment_filters_non_concerts():
    metrics = CrawlMetrics(name="Test Venue")
    lines, log = collect()
    assert process_fragment(EventFragment(title="Trivia Night"), PROFILE, log, metrics) == []
    assert metrics.fragments_filtered == 1
    assert "trivia" in lines[0][1]


def test_process_fragment_falls_back_to_title_and_degrades_missing_date():
    metrics = CrawlMetrics(name="Test Venue")
    lines, log = collect()
    records = process_fragment(
        EventFragment(title="Friday Night Throwdown", url="https://example.com/e/2"), PROFILE, log, metrics
    )
    assert [r.artistName for r in records] == ["Friday Night Throwdown"]
    assert records[0].eventDate == ""
    assert metrics.parse_misses == 1
    assert any(level == "WARNING" for level, _ in lines)


def test_set_time_title_gives_each_act_its_time():
    fragment = EventFragment(title="10pm – A.L. West 10:45pm – Elnuh", url="https://example.com/e/3")
    lines, log = collect()
    records = process_fragment(fragment, PROFILE, log)
    assert [(r.artistName, r.eventTime) for r in records] == [("A.L. West", "10:00 pm"), ("Elnuh", "10:45 pm")]


def test_parse_times_prefers_start_datetime():
    fragment = EventFragment(start_datetime=datetime(2025, 12, 5, 21, 30), time_text="Doors 8pm")
    assert parse_times(fragment) == (ClockTime(9, 30, "pm"), "8:00 pm")


def test_first_match_returns_first_non_empty():
    strategies = (lambda x: None, lambda x: "", lambda x: x * 2, lambda x: "late")
    assert first_match(strategies, "a") == "aa"
    assert first_match((lambda x: None,), "a") is None
