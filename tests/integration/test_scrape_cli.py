import json
from pathlib import Path

import pytest

responses = pytest.importorskip("responses")

import scrape
from gigcrawl.venues.mohawk import PREKINDLE_API


def test_main_writes_events_and_status(tmp_path):
    fixture = Path("tests/fixtures/mohawk_events.jsonp").read_text()

    with responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, PREKINDLE_API, body=fixture, status=200)
        exit_code = scrape.main(["--venue", "mohawk", "--data-dir", str(tmp_path)])

    assert exit_code == 0
    events = json.loads((tmp_path / "events.json").read_text())
    assert [e["artistName"] for e in events] == ["Black Pumas", "Tres Leches", "Black Pumas"]

    status = json.loads((tmp_path / "scrape-status.json").read_text())
    venue = status["venues"]["Mohawk Austin"]
    assert status["all_success"] is True
    assert venue["success"] is True
    assert venue["event_count"] == 3
    assert venue["last_success_count"] == 3
    assert "VENUE SUMMARY" in (tmp_path / "scrape-log.txt").read_text()


def test_main_reports_failed_venue(tmp_path, monkeypatch):
    monkeypatch.setattr("gigcrawl.fetch.backoff_delay", lambda *_: 0)
    (tmp_path / "scrape-status.json").write_text(json.dumps({
        "venues": {"Mohawk Austin": {"last_success": "2025-12-01T00:00:00.000Z", "last_success_count": 7}}
    }))

    with responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, PREKINDLE_API, status=503)
        exit_code = scrape.main(["--venue", "mohawk", "--data-dir", str(tmp_path)])

    assert exit_code == 1
    venue = json.loads((tmp_path / "scrape-status.json").read_text())["venues"]["Mohawk Austin"]
    assert venue["success"] is False
    assert "fetch text failed" in venue["error"]
    assert "Traceback" in venue["error_trace"]
    assert venue["last_success"] == "2025-12-01T00:00:00.000Z"
    assert venue["last_success_count"] == 7


def test_bad_input_fails_before_any_fetch(tmp_path):
    input_path = tmp_path / "input.json"
    input_path.write_text(json.dumps({"venues": {"mohawk": {"startUrl": "ftp://mohawk"}}}))

    with responses.RequestsMock() as rsps:
        exit_code = scrape.main(["--venue", "mohawk", "--input", str(input_path), "--data-dir", str(tmp_path)])
        assert len(rsps.calls) == 0

    assert exit_code == 1
    assert not (tmp_path / "events.json").exists()


def test_unknown_venue_is_a_configuration_error(tmp_path):
    assert scrape.main(["--venue", "nowhere", "--data-dir", str(tmp_path)]) == 1


def test_dry_run_prints_records(tmp_path, capsys):
    fixture = Path("tests/fixtures/mohawk_events.jsonp").read_text()

    with responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, PREKINDLE_API, body=fixture, status=200)
        exit_code = scrape.main(["--venue", "mohawk", "--max-events", "1", "--dry-run", "--data-dir", str(tmp_path)])

    assert exit_code == 0
    out = capsys.readouterr().out
    printed = json.loads(out[out.index("[\n"):])
    assert [e["artistName"] for e in printed] == ["Black Pumas"]
    assert not (tmp_path / "events.json").exists()


def test_failed_venue_keeps_previous_records(tmp_path, monkeypatch):
    monkeypatch.setattr("gigcrawl.fetch.backoff_delay", lambda *_: 0)
    (tmp_path / "events.json").write_text(json.dumps([
        {"artistName": "Black Pumas", "venueName": "Mohawk - Outside", "eventURL": "https://mohawkaustin.com/event/?id=1",
         "eventDate": "Fri, Dec 05, 2025", "scrapedAt": "2025-12-01T00:00:00.000Z"},
        {"artistName": "Joe Ely", "venueName": "Antone's Nightclub", "eventURL": "https://antonesnightclub.com/e/1"},
    ]))

    with responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, PREKINDLE_API, status=503)
        exit_code = scrape.main(["--venue", "mohawk", "--data-dir", str(tmp_path)])

    assert exit_code == 1
    events = json.loads((tmp_path / "events.json").read_text())
    assert [(e["artistName"], e["venueName"]) for e in events] == [("Black Pumas", "Mohawk - Outside")]
    assert events[0]["scrapedAt"] == "2025-12-01T00:00:00.000Z"
    venue = json.loads((tmp_path / "scrape-status.json").read_text())["venues"]["Mohawk Austin"]
    assert venue["kept_previous"] == 1
