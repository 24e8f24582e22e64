from gigcrawl.errors import ConfigurationError


def artist_key(record):
    return record.artistName.lower()


def artist_time_key(record):
    """Same act playing two sets on one night stays as two records."""
    return f"{record.artistName.lower()}|{record.eventDate.lower()}|{record.eventTime.lower()}"


def artist_event_key(record):
    return f"{record.artistName.lower()}|{record.eventURL.lower()}"


DEDUPE_KEYS = {
    "artist": artist_key,
    "artist+time": artist_time_key,
    "artist+event": artist_event_key,
}


def key_for(policy):
    """Resolve a venue's dedupe_policy name to its key function."""
    try:
        return DEDUPE_KEYS[policy]
    except KeyError:
        raise ConfigurationError(
            f"unknown dedupe policy {policy!r}, expected one of {', '.join(DEDUPE_KEYS)}"
        ) from None


def dedupe(records, key=artist_key):
    """Keep the first record per key, preserving input order."""
    seen = set()
    result = []
    for record in records:
        k = key(record)
        if k in seen:
            continue
        seen.add(k)
        result.append(record)
    return result
