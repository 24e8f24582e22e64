import re
from dataclasses import dataclass, replace

BANNED_PHRASES = (
    "tickets",
    "ticket link",
    "sold out",
    "more info",
    "rsvp",
    "expired",
    "all ages",
    "21+",
    "18+",
    "doors:",
    "show:",
    "tribute to",
    "passion of",
    "legends of",
    "most iconic",
    "no cover",
    "happy hour",
    "vip meet",
    "private event",
    "covid",
    "cancel",
    "postponed",
    "subscribe",
    "email address",
    "post navigation",
    "site by",
    "facebook",
    "instagram",
    "twitter",
    "tiktok",
    "http",
    "www.",
)

GENERIC_NAMES = frozenset({
    "the", "and", "or", "a", "an", "with", "w/",
    "tba", "tbd", "tba.", "unknown", "none", "n/a", "closed",
    "special guest", "special guests", "surprise guest", "surprise guests", "guests",
    "tribute", "tour", "show", "night", "presents", "present", "live",
    "stage", "main stage", "venue", "theater", "theatre", "patio", "rooftop",
    "indoor", "outdoor", "inside", "outside", "upstairs", "downstairs",
    "band", "dj", "music", "live music", "concert", "event", "events", "calendar",
    "album release show", "record release", "free show", "matinee",
    "americana", "blues", "jazz", "soul", "funk", "country", "rock",
    "reggae", "latin", "hip hop", "r&b", "rnb", "punk", "metal", "folk",
})

TIME_TOKEN_RE = re.compile(r"\b\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\b|[ap]\b)|\b\d{1,2}:\d{2}\b", re.IGNORECASE)
WEEKDAY_RE = re.compile(
    r"\b(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday|mon|tues?|wed|thurs?|fri|sat|sun)\b\.?,?\s*(?:\d|jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)"
    r"|\b(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)s?\b",
    re.IGNORECASE,
)
MONTH_DAY_RE = re.compile(
    r"\b(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|june?|july?|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?\s+\d{1,2}\b",
    re.IGNORECASE,
)
ADDRESS_RE = re.compile(
    r"\b\d{2,6}\s+(?:[nsew]\.?\s+)?[a-z0-9]+(?:\s+[a-z0-9]+)?\s+"
    r"(?:st|street|ave|avenue|blvd|boulevard|rd|road|dr|drive|ln|lane|hwy|highway|pkwy|way)\b",
    re.IGNORECASE,
)
ZIP_RE = re.compile(r"\b[A-Z]{2}\s+\d{5}(?:-\d{4})?\b")
DOMAIN_RE = re.compile(r"\b[\w-]+\.(?:com|net|org|io|co|fm|live)\b", re.IGNORECASE)
HANDLE_RE = re.compile(r"(?:^|\s)[@#]\w+")
SENTENCE_RE = re.compile(r"[a-z]{4,}\.\s+[A-Za-z]|[a-z]{3,}[!?]\s+\w")
NUMERIC_RE = re.compile(r"^[\d\s$.,:/+-]+$")
ALLOWED_PUNCTUATION = set("&'’-.,!+/:()")


@dataclass(frozen=True)
class ValidatorConfig:
    """
    Tunables for is_likely_artist_name. Venues build their own copy with
    with_overrides() rather than forking the predicate.

    case_policy:
      "any"             - letter case carries no signal
      "reject_all_caps" - multi-word ALL CAPS strings are treated as banners
      "prefer_title"    - reject strings with no capitalised word at all
    """
    min_length: int = 2
    max_length: int = 100
    min_alpha_ratio: float = 0.6
    max_words: int = 8
    banned_phrases: tuple = BANNED_PHRASES
    extra_banned_phrases: tuple = ()
    generic_names: frozenset = GENERIC_NAMES
    extra_generic_names: frozenset = frozenset()
    case_policy: str = "any"

    def with_overrides(self, **kwargs):
        return replace(self, **kwargs)


DEFAULT_VALIDATOR = ValidatorConfig()


def alpha_ratio(text):
    """Share of letters among the non-space characters."""
    chars = [c for c in text if not c.isspace()]
    if not chars:
        return 0.0
    return sum(1 for c in chars if c.isalpha()) / len(chars)


def _fails_case_policy(name, policy):
    letters = [c for c in name if c.isalpha()]
    if policy == "reject_all_caps":
        return len(name.split()) > 2 and all(c.isupper() for c in letters)
    if policy == "prefer_title":
        return not any(word[:1].isupper() or word[:1].isdigit() for word in name.split())
    return False


def is_likely_artist_name(candidate, config=DEFAULT_VALIDATOR):
    """
    Heuristic check that a string reads like a performer name.
    Rejects addresses, handles, URLs, ticketing and schedule text, generic
    descriptors and anything that is mostly digits or punctuation.
    Biased toward rejecting: a dropped act can still be recovered from the
    title fallback, an accepted non-act ends up in the output.
    """
    if not candidate:
        return False
    name = " ".join(str(candidate).split())
    if not config.min_length <= len(name) <= config.max_length:
        return False

    lower = name.lower()
    if lower in config.generic_names or lower in config.extra_generic_names:
        return False
    if len(name) == 1 or NUMERIC_RE.match(name):
        return False
    if alpha_ratio(name) < config.min_alpha_ratio:
        return False

    if any(phrase in lower for phrase in config.banned_phrases):
        return False
    if any(phrase.lower() in lower for phrase in config.extra_banned_phrases):
        return False

    if TIME_TOKEN_RE.search(name) or WEEKDAY_RE.search(name) or MONTH_DAY_RE.search(name):
        return False
    if ADDRESS_RE.search(name) or ZIP_RE.search(name):
        return False
    if DOMAIN_RE.search(name) or HANDLE_RE.search(name):
        return False
    if SENTENCE_RE.search(name):
        return False

    if len(name.split()) > config.max_words:
        return False
    if any(not (c.isalnum() or c.isspace() or c in ALLOWED_PUNCTUATION) for c in name):
        return False

    return not _fails_case_policy(name, config.case_policy)
