import threading
from dataclasses import dataclass, field


@dataclass
class CrawlMetrics:
    """Track crawl metrics for one venue run."""
    name: str
    pages: int = 0
    detail_fetches: int = 0
    fetch_failures: int = 0
    fragments_filtered: int = 0
    parse_misses: int = 0
    records: int = 0
    errors: int = 0
    error_messages: list = field(default_factory=list)
    duration_ms: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def count(self, name, amount=1):
        # Detail workers report from pool threads
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)

    def add_error(self, message):
        with self._lock:
            self.errors += 1
            self.error_messages.append(message)

    def as_dict(self):
        return {
            "pages": self.pages,
            "detail_fetches": self.detail_fetches,
            "fetch_failures": self.fetch_failures,
            "fragments_filtered": self.fragments_filtered,
            "parse_misses": self.parse_misses,
            "records": self.records,
            "duration_ms": round(self.duration_ms),
        }
