import threading
import time
from collections import namedtuple
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait

from tqdm import tqdm

from gigcrawl import config
from gigcrawl.errors import FetchFailure, ParseMiss
from gigcrawl.fetch import Fetcher, create_session
from gigcrawl.pipeline.dedupe import dedupe, key_for
from gigcrawl.pipeline.fragments import process_fragment
from gigcrawl.pipeline.metrics import CrawlMetrics
from gigcrawl.utils.logs import console_log

SEED = "SEED"
LISTING = "LISTING"
DETAIL = "DETAIL"
DONE = "DONE"

CrawlResult = namedtuple("CrawlResult", ["records", "metrics"])


class CrawlOrchestrator:
    """
    Drive one venue run: sequential listing discovery, then a bounded pool of
    detail fetches, then dedupe.

    The source provides listing_pages(fetcher, run_config), a generator of
    ListingPage, and parse_detail(url, fetcher) when its listing yields
    detail URLs. A FetchFailure from the listing aborts the run; one from a
    detail page only skips that page.
    """

    def __init__(self, source, profile, run_config, log_func=None, fetcher=None, progress=False):
        self.source = source
        self.profile = profile
        self.run_config = run_config
        self.log = log_func or console_log
        self.dedupe_key = key_for(profile.dedupe_policy)
        self.fetcher = fetcher or Fetcher(
            session=create_session(profile.use_cloudscraper),
            timeout=run_config.request_timeout_seconds,
            log_func=self.log,
        )
        self.progress = progress

        self.state = SEED
        self.metrics = CrawlMetrics(name=profile.name)
        self.seen_urls = set()
        self.detail_queue = []
        self._results = []
        self._record_count = 0
        self._next_index = 0
        self._lock = threading.Lock()
        self._aborted = threading.Event()
        self._deadline = None

    def run(self):
        start_time = time.monotonic()
        self._deadline = start_time + self.run_config.run_timeout

        self.state = LISTING
        self._discover()

        if self.detail_queue and not self._limit_reached():
            self.state = DETAIL
            self._fetch_details()

        self.state = DONE
        records = self._finish()
        self.metrics.duration_ms = (time.monotonic() - start_time) * 1000
        return CrawlResult(records, self.metrics)

    def _take_index(self):
        index = self._next_index
        self._next_index += 1
        return index

    def _limit_reached(self, pending=0):
        with self._lock:
            return self.run_config.limit_reached(self._record_count + pending)

    def _timed_out(self):
        return time.monotonic() >= self._deadline

    def _accept(self, index, records):
        with self._lock:
            if self._aborted.is_set():
                return
            self._results.append((index, records))
            self._record_count += len(records)

    def _discover(self):
        name = self.profile.name
        max_pages = self.run_config.max_pages
        pages = iter(self.source.listing_pages(self.fetcher, self.run_config))

        for iteration in range(1, config.MAX_LISTING_ITERATIONS + 1):
            if max_pages and iteration > max_pages:
                self.log(f"    {name}: reached max pages ({max_pages})")
                break
            if self._timed_out():
                self.log(f"    {name}: run timeout during listing, stopping discovery", "WARNING")
                break

            try:
                page = next(pages, None)
            except FetchFailure as e:
                self.log(f"    {name}: listing failed: {e}", "ERROR")
                raise
            if page is None:
                break
            self.metrics.count("pages")

            new_urls = [url for url in page.detail_urls if url not in self.seen_urls]
            for url in new_urls:
                self.seen_urls.add(url)
                self.detail_queue.append((self._take_index(), url))

            for fragment in page.fragments:
                if self._limit_reached():
                    break
                records = process_fragment(fragment, self.profile, self.log, self.metrics)
                self._accept(self._take_index(), records)

            self.log(f"    {name}: listing page {iteration}: {len(page.fragments)} items, {len(new_urls)} new links")

            if not new_urls and not page.fragments:
                break
            if self._limit_reached(pending=len(self.detail_queue)):
                self.log(f"    {name}: reached max events ({self.run_config.max_events})")
                break
            if not page.has_more:
                break
        else:
            self.log(f"    {name}: hit listing cap of {config.MAX_LISTING_ITERATIONS} iterations", "WARNING")

    def _detail(self, index, url):
        if self._aborted.is_set():
            return
        self.metrics.count("detail_fetches")
        try:
            fragment = self.source.parse_detail(url, self.fetcher)
            if fragment is None:
                raise ParseMiss("nothing to parse")
            records = process_fragment(fragment, self.profile, self.log, self.metrics)
        except FetchFailure as e:
            self.metrics.count("fetch_failures")
            self.log(f"    {self.profile.name}: skipping {url}: {e}", "WARNING")
            return
        except ParseMiss as e:
            self.metrics.count("parse_misses")
            self.log(f"    {self.profile.name}: could not parse {url}: {e}", "WARNING")
            return
        except Exception as e:
            # One bad detail page never takes the venue down
            self.metrics.count("parse_misses")
            self.log(f"    {self.profile.name}: skipping {url} after {type(e).__name__}: {e}", "WARNING")
            return

        self._accept(index, records)

    def _fetch_details(self):
        max_workers = self.run_config.max_concurrency
        queue = iter(self.detail_queue)
        in_flight = set()
        bar = tqdm(total=len(self.detail_queue), desc=self.profile.name, unit="page",
                   disable=not self.progress, leave=False)
        executor = ThreadPoolExecutor(max_workers=max_workers)

        try:
            while True:
                # Submit lazily so nothing is fetched once max_events is covered
                while len(in_flight) < max_workers and not self._limit_reached(pending=len(in_flight)):
                    item = next(queue, None)
                    if item is None:
                        break
                    in_flight.add(executor.submit(self._detail, *item))
                if not in_flight:
                    break

                remaining = self._deadline - time.monotonic()
                done, in_flight = wait(in_flight, timeout=max(remaining, 0), return_when=FIRST_COMPLETED)
                if not done:
                    self._aborted.set()
                    for future in in_flight:
                        future.cancel()
                    self.log(
                        f"    {self.profile.name}: run timeout after {self.run_config.run_timeout}s, "
                        f"abandoning {len(in_flight)} detail pages",
                        "WARNING",
                    )
                    break

                for future in done:
                    future.result()
                    bar.update(1)
        finally:
            executor.shutdown(wait=not self._aborted.is_set(), cancel_futures=True)
            bar.close()

    def _finish(self):
        ordered = [
            record
            for _, records in sorted(self._results, key=lambda item: item[0])
            for record in records
        ]
        records = dedupe(ordered, self.dedupe_key)
        if self.run_config.max_events:
            records = records[: self.run_config.max_events]

        self.metrics.records = len(records)
        if records:
            self.log(f"    {self.profile.name}: {len(ordered)} records, {len(records)} after dedupe")
        else:
            self.log(f"    {self.profile.name}: no records produced", "WARNING")
        return records
