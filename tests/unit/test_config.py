import pytest

from gigcrawl.config import MAX_CONCURRENCY_LIMIT, RunConfig
from gigcrawl.errors import ConfigurationError


def test_from_input_accepts_camel_case():
    run_config = RunConfig.from_input({
        "startUrl": "https://hautespot.live/calendar",
        "maxEvents": "5",
        "maxConcurrency": 20,
        "maxPages": 2,
        "unknownKey": "ignored",
    })
    assert run_config.start_url == "https://hautespot.live/calendar"
    assert run_config.max_events == 5
    assert run_config.max_concurrency == MAX_CONCURRENCY_LIMIT
    assert run_config.max_pages == 2


def test_from_input_defaults_fill_gaps():
    run_config = RunConfig.from_input({"maxEvents": 3}, max_events=10, max_concurrency=2)
    assert run_config.max_events == 3
    assert run_config.max_concurrency == 2


def test_concurrency_clamped_to_one():
    assert RunConfig.from_input({"maxConcurrency": 0}).max_concurrency == 1


@pytest.mark.parametrize("data", [
    {"startUrl": "ftp://x"},
    {"startUrl": "not a url"},
    {"maxEvents": -1},
    {"maxEvents": "abc"},
    {"requestTimeoutSeconds": 0},
    {"maxEvents": 5.7},
    {"maxEvents": True},
    {"maxConcurrency": "2.5"},
])
def test_from_input_rejects_bad_input(data):
    with pytest.raises(ConfigurationError):
        RunConfig.from_input(data)


def test_limits_and_timeout():
    assert RunConfig(max_events=0).limit_reached(1000) is False
    assert RunConfig(max_events=5).limit_reached(5) is True
    assert RunConfig(max_events=5).limit_reached(4) is False
    assert RunConfig(request_timeout_seconds=30).run_timeout == 300
    assert RunConfig(run_timeout_seconds=60).run_timeout == 60


def test_from_input_accepts_whole_floats():
    assert RunConfig.from_input({"maxEvents": 5.0}).max_events == 5
