from urllib.parse import urlparse

from gigcrawl import config


def validate_record(record):
    """Check that a record has all required fields and an absolute event URL."""
    for name in config.REQUIRED_FIELDS:
        if not getattr(record, name, ""):
            return False
    parsed = urlparse(record.eventURL)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
