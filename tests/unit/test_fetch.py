import pytest
import requests

from gigcrawl.errors import FetchFailure
from gigcrawl.fetch import StaticPage, backoff_delay, fetch_with_retry


class FlakyCall:
    def __init__(self, failures, error=requests.exceptions.Timeout):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error("boom")
        return "ok"


def quiet(message, level="INFO"):
    pass


def test_fetch_with_retry_recovers():
    sleeps = []
    call = FlakyCall(2)
    result = fetch_with_retry("fetch page", "https://example.com", call, log_func=quiet, sleep=sleeps.append)
    assert result == "ok"
    assert call.calls == 3
    assert len(sleeps) == 2


def test_fetch_with_retry_exhaustion_names_operation():
    call = FlakyCall(10, requests.exceptions.ConnectionError)
    with pytest.raises(FetchFailure) as exc:
        fetch_with_retry("fetch json", "https://example.com/api", call, max_attempts=3,
                         log_func=quiet, sleep=lambda *_: None)
    assert call.calls == 3
    assert exc.value.operation == "fetch json"
    assert "fetch json failed for https://example.com/api" in str(exc.value)
    assert isinstance(exc.value.cause, requests.exceptions.ConnectionError)


@pytest.mark.parametrize("error", [
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
    requests.exceptions.TooManyRedirects,
])
def test_fetch_with_retry_covers_every_requests_error(error):
    call = FlakyCall(1, error)
    assert fetch_with_retry("fetch page", "https://example.com", call, log_func=quiet, sleep=lambda *_: None) == "ok"
    assert call.calls == 2


def test_fetch_with_retry_does_not_retry_other_errors():
    call = FlakyCall(1, ValueError)
    with pytest.raises(ValueError):
        fetch_with_retry("fetch page", "https://example.com", call, log_func=quiet, sleep=lambda *_: None)
    assert call.calls == 1


def test_backoff_delay_grows():
    assert backoff_delay(0, 0) == 0
    assert 2.0 <= backoff_delay(2, 0.5) <= 2.5


def test_static_page_queries():
    html = """
    <html><head><title> Shows </title></head><body>
      <h1>Shakey Graves</h1>
      <time datetime="2025-12-05T20:00:00">Dec 5</time>
      <a href="/event/a">A</a><a href="/event/a">A again</a><a href="https://other.com/event/b">B</a>
    </body></html>
    """
    page = StaticPage(html, "https://www.acllive.com/events/")
    assert page.query_text("h1") == "Shakey Graves"
    assert page.query_text(".missing") == ""
    assert page.query_attr("time", "datetime") == "2025-12-05T20:00:00"
    assert page.query_links("a") == ["https://www.acllive.com/event/a", "https://other.com/event/b"]
    assert page.title() == "Shows"
    assert page.wait_for_selector("h1") is True
    assert page.click_if_present(".load-more") is False
    assert page.scroll_to_bottom() is False
    assert "Shakey Graves" in page.body_text()


def test_scroll_to_bottom_reports_next_batch():
    html = '<html><head><link rel="next" href="?page=2"></head><body><h1>Shows</h1></body></html>'
    page = StaticPage(html, "https://www.acllive.com/events/")
    assert page.scroll_to_bottom() is True
    assert page.query_links('link[rel="next"]') == ["https://www.acllive.com/events/?page=2"]
