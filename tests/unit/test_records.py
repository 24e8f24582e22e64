from datetime import date

import pytest
from freezegun import freeze_time

from gigcrawl.errors import ParseMiss
from gigcrawl.pipeline.fragments import EventFragment
from gigcrawl.pipeline.records import RECORD_FIELDS, build_record, normalize_record
from gigcrawl.utils.dates import ClockTime
from gigcrawl.utils.lineup import LineupEntry


def make_fragment(**kwargs):
    values = {
        "title": "Jesse Dayton w/ The Derailers",
        "url": "/events/jesse-dayton",
        "page_url": "https://example.com/calendar",
        "venue_name": "Broken Spoke",
        "price": " $15 ",
        "description": "<p>Honky tonk</p>",
    }
    values.update(kwargs)
    return EventFragment(**values)


def test_build_record_formats_and_resolves_url():
    record = build_record(
        make_fragment(),
        LineupEntry("The Derailers", "support"),
        date(2025, 12, 5),
        ClockTime(8, 0, "pm"),
    )
    assert record.artistName == "The Derailers"
    assert record.role == "support"
    assert record.eventURL == "https://example.com/events/jesse-dayton"
    assert record.eventDate == "Fri, Dec 05, 2025"
    assert record.eventTime == "8:00 pm"
    assert record.price == "$15"
    assert record.description == "Honky tonk"
    assert record.scrapedAt.endswith("Z")


def test_build_record_overrides_win_and_inputs_untouched():
    overrides = {"venueName": "Mohawk - Inside", "price": ""}
    record = build_record(
        make_fragment(),
        LineupEntry("Black Pumas", ""),
        None,
        None,
        overrides=overrides,
        doors_time="7:00 pm",
    )
    assert record.venueName == "Mohawk - Inside"
    assert record.price == "$15"
    assert record.role == "headliner"
    assert record.eventDate == ""
    assert record.doorsTime == "7:00 pm"
    assert overrides == {"venueName": "Mohawk - Inside", "price": ""}


def test_build_record_requires_artist():
    with pytest.raises(ParseMiss):
        build_record(make_fragment(), LineupEntry("  ", "headliner"), None, None)


@freeze_time("2025-12-01T18:00:00Z")
def test_scraped_at_is_utc_iso():
    record = build_record(make_fragment(), LineupEntry("Joe Ely", "headliner"), None, None)
    assert record.scrapedAt == "2025-12-01T18:00:00.000Z"


def test_to_dict_keeps_field_order():
    record = build_record(make_fragment(), LineupEntry("Joe Ely", "headliner"), None, None)
    assert list(record.to_dict()) == list(RECORD_FIELDS)


def test_normalize_record_maps_aliases():
    record = normalize_record({
        "artist": " Black Pumas ",
        "venue": "Mohawk Austin",
        "url": "https://mohawkaustin.com/event/?id=1",
        "startDate": "2025-12-05T20:00:00",
        "showTime": "8pm",
        "priceText": "$25",
    })
    assert record.artistName == "Black Pumas"
    assert record.venueName == "Mohawk Austin"
    assert record.eventURL == "https://mohawkaustin.com/event/?id=1"
    assert record.eventDate == "Fri, Dec 05, 2025"
    assert record.eventTime == "8:00 pm"
    assert record.price == "$25"
    assert record.role == "headliner"


def test_normalize_record_unparseable_date_is_empty():
    assert normalize_record({"artist": "Joe Ely", "date": "someday"}).eventDate == ""
    assert normalize_record({"artist": "Joe Ely", "eventDateText": "Dec 5, 2025"}).eventDate == "Fri, Dec 05, 2025"


def test_normalize_record_requires_artist():
    with pytest.raises(ParseMiss):
        normalize_record({"venue": "Mohawk Austin"})
