from datetime import date

import pytest

from gigcrawl.venues.broken_spoke import parse_calendar_lines, parse_line
from gigcrawl.venues.elephant_room import cell_date, parse_month_grid
from gigcrawl.venues.hautespot import extract_price, json_url, support_text
from gigcrawl.venues.mohawk import event_url, parse_jsonp, stage_name
from gigcrawl.venues.timely import month_window, normalize_price


def test_parse_jsonp():
    assert parse_jsonp('callback({"events": []})') == {"events": []}
    assert parse_jsonp('  callback({"events": [{"id": 1}]})\n') == {"events": [{"id": 1}]}


@pytest.mark.parametrize("body", ["<html></html>", "callback({bad)", "", "while(1);"])
def test_parse_jsonp_rejects_malformed(body):
    with pytest.raises(ValueError):
        parse_jsonp(body)


def test_mohawk_helpers():
    assert stage_name("Mohawk Indoor") == "Mohawk - Inside"
    assert stage_name("Mohawk Outdoor Stage") == "Mohawk - Outside"
    assert stage_name(None) == "Mohawk Austin"
    assert event_url("https://mohawkaustin.com/", "42") == "https://mohawkaustin.com/event/?id=42"


def test_timely_price_and_window():
    assert normalize_price({"cost": "&#036;15 @ 8pm"}) == "$15"
    assert normalize_price({"cost": "0"}) == ""
    assert normalize_price({"cost_display": "Free"}) == "Free"
    assert month_window(date(2025, 12, 17), days_ahead=30) == (date(2025, 12, 1), date(2025, 12, 31))


def test_hautespot_helpers():
    assert json_url("https://hautespot.live/calendar") == "https://hautespot.live/calendar?format=json"
    assert json_url("https://hautespot.live/calendar", 123) == "https://hautespot.live/calendar?format=json&offset=123"
    lines = ["Doors: 7pm", "With support from Jane Doe + The Band Cooks", "Support: Kalu James | Dan Dyer"]
    assert support_text(lines) == "Jane Doe, The Band Cooks, Kalu James, Dan Dyer"
    assert extract_price("Tickets $15 at the door") == "$15"
    assert extract_price("Free show") == "Free"
    assert extract_price("") == ""


def test_broken_spoke_line():
    fragment = parse_line("Dec 5 - Jesse Dayton w/ The Derailers 8:00", year=2025, page_url="https://spoke.example/cal")
    assert fragment.title == "Jesse Dayton w/ The Derailers 8:00"
    assert fragment.event_date == date(2025, 12, 5)
    assert fragment.url == "https://spoke.example/cal"
    assert parse_line("Open every night", year=2025) is None


def test_broken_spoke_month_headers():
    lines = [
        "December 2025",
        "Dec 5 - Jesse Dayton 8:00",
        "Dec 6 - Closed for private event",
        "Saturday night dancing",
        "January 2026",
        "Jan 2 - Dale Watson 9:00",
    ]
    fragments = parse_calendar_lines(lines, "https://spoke.example/cal")
    assert [f.event_date for f in fragments] == [date(2025, 12, 5), date(2025, 12, 6), date(2026, 1, 2)]


def test_elephant_room_grid_needs_month_heading():
    html = '<div id="calendar"><table class="calendar"><tr><td><span class="day">5</span></td></tr></table></div>'
    assert parse_month_grid(html, "https://elephantroom.com/calendar") == []


def test_elephant_room_cell_date():
    assert cell_date(5, False, 12, 2025) == date(2025, 12, 5)
    assert cell_date(2, True, 12, 2025) == date(2026, 1, 2)
    assert cell_date(31, True, 3, 2025) is None
