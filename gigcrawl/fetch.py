import json
import random
import time
from urllib.parse import urljoin

import cloudscraper
import requests
from bs4 import BeautifulSoup

from gigcrawl import config
from gigcrawl.errors import FetchFailure
from gigcrawl.utils.logs import console_log
from gigcrawl.utils.text import normalize

# Anything requests raises, non-2xx statuses included
RETRYABLE_ERRORS = (requests.exceptions.RequestException,)
NEXT_BATCH_SELECTOR = 'link[rel="next"], a[rel="next"]'


def create_session(use_cloudscraper=False, headers=None):
    """Session with browser-like headers; cloudscraper for sites behind a JS challenge."""
    if use_cloudscraper:
        session = cloudscraper.create_scraper(
            browser={"browser": "chrome", "platform": "windows", "mobile": False, "desktop": True}
        )
    else:
        session = requests.Session()
    session.headers.update(headers or config.BROWSER_HEADERS)
    return session


def backoff_delay(attempt, base=config.FETCH_BACKOFF_SECONDS):
    """Exponential backoff with jitter for a zero-based attempt number."""
    if base <= 0:
        return 0
    return (2 ** attempt) * base + random.uniform(0, base)


def fetch_with_retry(operation, url, call, max_attempts=config.FETCH_MAX_ATTEMPTS,
                     backoff=config.FETCH_BACKOFF_SECONDS, log_func=None, sleep=time.sleep):
    """
    Run call() until it succeeds or max_attempts is exhausted.
    Any requests error is retried, raise_for_status included;
    anything else propagates. Exhaustion raises FetchFailure naming the operation.
    """
    log = log_func or console_log
    last_error = None

    for attempt in range(max_attempts):
        try:
            return call()
        except RETRYABLE_ERRORS as e:
            last_error = e
            if attempt < max_attempts - 1:
                wait = backoff_delay(attempt, backoff)
                log(f"    {operation}: retry {attempt + 1}/{max_attempts} for {url} after {type(e).__name__}", "WARNING")
                sleep(wait)

    raise FetchFailure(operation, url, last_error) from last_error


class Fetcher:
    """
    HTTP side of the crawl. fetch_page and fetch_json raise on non-2xx and
    are retried here; exhausting retries raises FetchFailure.
    """

    def __init__(self, session=None, timeout=config.DEFAULT_REQUEST_TIMEOUT,
                 max_attempts=config.FETCH_MAX_ATTEMPTS, backoff=config.FETCH_BACKOFF_SECONDS,
                 log_func=None, sleep=time.sleep):
        self.session = session or create_session()
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.log = log_func or console_log
        self.sleep = sleep

    def _get(self, url, headers=None, params=None):
        resp = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp

    def _retry(self, operation, url, call):
        return fetch_with_retry(
            operation,
            url,
            call,
            max_attempts=self.max_attempts,
            backoff=self.backoff,
            log_func=self.log,
            sleep=self.sleep,
        )

    def fetch_page(self, url, headers=None):
        """Returns (html, final_url) after redirects."""
        def call():
            resp = self._get(url, headers=headers)
            return resp.text, resp.url
        return self._retry("fetch page", url, call)

    def fetch_text(self, url, headers=None, params=None):
        return self._retry("fetch text", url, lambda: self._get(url, headers, params).text)

    def fetch_json(self, url, headers=None, params=None):
        def call():
            resp = self._get(url, headers=headers or config.JSON_HEADERS, params=params)
            try:
                return resp.json()
            except (json.JSONDecodeError, ValueError) as e:
                raise FetchFailure("fetch json", url, f"invalid JSON: {e}") from e
        return self._retry("fetch json", url, call)


class StaticPage:
    """
    Query interface over a fetched HTML document.
    Lookups that find nothing return "" / [] / False, never raise.
    """

    def __init__(self, html, url=""):
        self.url = url
        self.soup = BeautifulSoup(html or "", "html.parser")

    def select(self, selector):
        return self.soup.select(selector)

    def query_text(self, selector_or_func):
        """Text of the first match for a CSS selector, or the result of func(soup)."""
        if callable(selector_or_func):
            return normalize(selector_or_func(self.soup) or "")
        el = self.soup.select_one(selector_or_func)
        return normalize(el.get_text(" ")) if el else ""

    def query_attr(self, selector, attr):
        el = self.soup.select_one(selector)
        return normalize(el.get(attr, "")) if el else ""

    def query_links(self, selector):
        """Absolute hrefs of every match, in document order, without repeats."""
        links = []
        for el in self.soup.select(selector):
            href = el.get("href")
            if not href:
                continue
            absolute = urljoin(self.url, href)
            if absolute not in links:
                links.append(absolute)
        return links

    def body_text(self):
        body = self.soup.body or self.soup
        return normalize(body.get_text(" "))

    def body_lines(self):
        body = self.soup.body or self.soup
        return [line for line in (normalize(l) for l in body.get_text("\n").split("\n")) if line]

    def title(self):
        return normalize(self.soup.title.get_text()) if self.soup.title else ""

    def wait_for_selector(self, selector, timeout_ms=0):
        # A fetched document is already settled; report presence only
        return self.soup.select_one(selector) is not None

    def scroll_to_bottom(self):
        # Infinite-scroll pages advertise the next batch with rel="next"
        return self.soup.select_one(NEXT_BATCH_SELECTOR) is not None

    def click_if_present(self, selector):
        """True when the control exists; callers follow its href themselves."""
        return self.soup.select_one(selector) is not None
