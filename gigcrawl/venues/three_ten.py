import re
from urllib.parse import urljoin

from gigcrawl.crawl import CrawlOrchestrator
from gigcrawl.fetch import NEXT_BATCH_SELECTOR, StaticPage
from gigcrawl.pipeline.fragments import EventFragment, ListingPage
from gigcrawl.pipeline.strategies import first_match, select_attr, select_text
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.utils.categories import CONSERVATIVE_KEYWORDS
from gigcrawl.venues.base import VenueProfile

THREE_TEN_LISTING = "https://www.acllive.com/events/venue/acl-live-at-3ten"

PROFILE = VenueProfile(
    key="3ten",
    name="ACL Live at 3TEN",
    start_url=THREE_TEN_LISTING,
    aliases=("ACL Live", "3TEN"),
    boilerplate_patterns=(
        re.compile(r"^\s*Tribute to\s+.*$", re.IGNORECASE),
    ),
    # Nearly everything booked here is a concert
    non_concert_keywords=CONSERVATIVE_KEYWORDS,
    validator=DEFAULT_VALIDATOR.with_overrides(
        extra_banned_phrases=("acl live", "3ten", "fire and "),
    ),
    use_cloudscraper=True,
)

EVENT_LINK_SELECTOR = 'a[href*="/event/"]'
CARD_SELECTOR = "article, section, .event-card, .event-item"
LOAD_MORE_SELECTOR = "a.load-more, a.load-more-btn"
PRICE_RE = re.compile(r"\$\d+(?:\.\d{2})?")
LISTING_SPLIT_RE = re.compile(r"\bw/|\bwith\b", re.IGNORECASE)

TITLE_STRATEGIES = (
    select_text("h1"),
    select_text(".event-title"),
    lambda page: page.title() or None,
)
SUBTITLE_STRATEGIES = (
    select_text(".event-subtitle"),
    select_text(".subtitle"),
)
DATE_STRATEGIES = (
    select_attr("time[datetime]", "datetime"),
    select_text(".event-date"),
    select_text(".date"),
)
TIME_STRATEGIES = (
    select_text(".event-time"),
    select_text(".time"),
    lambda page: page.body_text() or None,
)


def harvest_links(page):
    """Event links on a listing page plus the act names their cards show."""
    hints = {}
    for url in page.query_links(EVENT_LINK_SELECTOR):
        hints.setdefault(url, ())

    for card in page.select(CARD_SELECTOR):
        link = card.select_one(EVENT_LINK_SELECTOR)
        if not link or not link.get("href"):
            continue
        url = urljoin(page.url, link["href"])
        title_el = card.select_one("h3, h2, .event-title")
        subtitle_el = card.select_one(".event-subtitle, .subtitle")
        names = []
        for el in (title_el, subtitle_el):
            if el:
                names.extend(n.strip() for n in LISTING_SPLIT_RE.split(el.get_text(" ", strip=True)) if n.strip())
        if names:
            hints[url] = tuple(dict.fromkeys(names))
    return hints


class ThreeTenSource:
    """
    Listing cards link to one detail page per show. The listing is paged
    through its "load more" link until no new links turn up.
    """
    profile = PROFILE

    def __init__(self):
        self.listing_hints = {}

    def listing_pages(self, fetcher, run_config):
        url = PROFILE.start_url_for(run_config)
        while url:
            html, final_url = fetcher.fetch_page(url)
            page = StaticPage(html, final_url)
            hints = harvest_links(page)
            self.listing_hints.update(hints)

            links = []
            if page.click_if_present(LOAD_MORE_SELECTOR):
                links = page.query_links(LOAD_MORE_SELECTOR)
            elif page.scroll_to_bottom():
                links = page.query_links(NEXT_BATCH_SELECTOR)
            next_url = links[0] if links and links[0] != final_url else None

            yield ListingPage(detail_urls=list(hints), has_more=bool(next_url))
            url = next_url

    def parse_detail(self, url, fetcher):
        html, final_url = fetcher.fetch_page(url)
        page = StaticPage(html, final_url)
        if not page.wait_for_selector("body"):
            return None

        body_text = page.body_text()
        price = PRICE_RE.search(body_text)
        subtitle = first_match(SUBTITLE_STRATEGIES, page) or ""

        return EventFragment(
            title=first_match(TITLE_STRATEGIES, page) or "",
            subtitle=subtitle,
            body_text=body_text,
            url=url,
            page_url=final_url,
            date_text=first_match(DATE_STRATEGIES, page) or "",
            time_text=first_match(TIME_STRATEGIES, page) or "",
            price=price.group(0) if price else "",
            description=subtitle,
            lineup=self.listing_hints.get(url, ()),
        )


def scrape_three_ten(run_config, log_func=None, fetcher=None, progress=False):
    """Scrape events from ACL Live at 3TEN (listing plus detail pages)."""
    return CrawlOrchestrator(ThreeTenSource(), PROFILE, run_config, log_func, fetcher, progress).run()
