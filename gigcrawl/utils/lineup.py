import re
from collections import namedtuple
from dataclasses import dataclass

from gigcrawl.utils.artists import DEFAULT_VALIDATOR, is_likely_artist_name
from gigcrawl.utils.dates import parse_time
from gigcrawl.utils.text import normalize

HEADLINER = "headliner"
SUPPORT = "support"

LineupEntry = namedtuple("LineupEntry", ["name", "role", "set_time"], defaults=[None])

TOUR_WORDS = r"(?:tour|festival|fest|night|show|celebration|anniversary|residency|revue|experience|spectacular)"

SOLD_OUT_PREFIX_RE = re.compile(
    r"^\s*(?:sold\s*out|cancell?ed|postponed|rescheduled|just added|new date|low tickets)\s*[:!\-–—|]\s*",
    re.IGNORECASE,
)
PRESENTER_RE = re.compile(r"^\s*(?:[^:]{0,60}?\s)?presents\b\s*[:\-–—]?\s*", re.IGNORECASE)
PRESENTED_BY_RE = re.compile(r"\s*[-–—|,]?\s*\b(?:presented|hosted|sponsored)\s+by\b.*$", re.IGNORECASE)
CTA_TAIL_RE = re.compile(r"\s*[-–—|:]?\s*\b(?:buy|get|purchase)\s+tickets?\b.*$", re.IGNORECASE)
CTA_ANYWHERE_RE = re.compile(r"\b(?:sold\s*out|expired|more info|on sale now)\b[!:]?", re.IGNORECASE)
SCHEDULE_TAIL_RE = re.compile(r"\b(?:doors|show)\s*:\s*\d.*$", re.IGNORECASE)
RELEASE_RE = re.compile(
    r"\s*[-–—:]?\s*\b(?:album|record|ep|single|vinyl)\s+release(?:\s+(?:show|party|celebration|concert))?\b"
    r"|\s*[-–—:]?\s*\blistening party\b",
    re.IGNORECASE,
)
SPECIAL_GUEST_RE = re.compile(r"\b(?:very\s+)?special\s+guests?\b\s*:?", re.IGNORECASE)
NIGHT_RE = re.compile(r"\s*\(\s*night\s+(?:one|two|three|four|\d+)\s*\)", re.IGNORECASE)
DESCRIPTOR_PAREN_RE = re.compile(
    r"\s*[\(\[][^\)\]]*\b(?:tour|tribute|band|show|special|celebration|anniversary|release|christmas|"
    r"early|late|matinee|all ages|21\+|18\+)\b[^\)\]]*[\)\]]",
    re.IGNORECASE,
)
BRACKET_RE = re.compile(r"\s*\[[^\]]*\]")
TOUR_DASH_RE = re.compile(rf"\s+[-–—|]\s+[^-–—|]*\b{TOUR_WORDS}\b.*$", re.IGNORECASE)
TOUR_PHRASE_RE = re.compile(rf"\b{TOUR_WORDS}\b", re.IGNORECASE)
TOUR_TITLE_RE = re.compile(
    r"\b(?:world\s+)?(?:tour|festival|anniversary|celebration|residency|revue)(?:\s+\d{4})?$", re.IGNORECASE
)
COLON_RE = re.compile(r"(?<!\d):(?!\d)")
TRAILING_TIME_RE = re.compile(
    r"\s*[@\-–—|,]?\s*\d{1,2}(?::\d{2})?\s*[ap]\.?m\.?(?:\s*[-–—]\s*\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\.?)?)?\s*$",
    re.IGNORECASE,
)

EXPLICIT_SPLIT_RE = re.compile(r"\s+(?:featuring|feat\.?|ft\.?)\s+|\s+(?:w/\.?\s*|with\s+)", re.IGNORECASE)

HEADLINER_SPLIT_RE = re.compile(r"\s*&\s*|\s*,\s*")
HEADLINER_AND_SPLIT_RE = re.compile(r"\s*&\s*|\s*,\s*|\s+and\s+", re.IGNORECASE)
SUPPORT_SPLIT_RE = re.compile(
    r"\s*[&,+;|]\s*|\s+(?:featuring|feat\.?|ft\.?)\s+|\s+(?:w/\.?\s*|with\s+)",
    re.IGNORECASE,
)
SUPPORT_AND_SPLIT_RE = re.compile(
    r"\s*[&,+;|]\s*|\s+and\s+|\s+(?:featuring|feat\.?|ft\.?)\s+|\s+(?:w/\.?\s*|with\s+)",
    re.IGNORECASE,
)

LEADING_JUNK_RE = re.compile(r"^(?:[\s\-–—:@&+,|/]|(?:and|with|w/|plus|featuring|feat\.?|ft\.?)\s+)+", re.IGNORECASE)
TRAILING_JUNK_RE = re.compile(r"(?:[\s\-–—:@&+,;|/]|\s+(?:and|with|w/|plus))+$", re.IGNORECASE)

TIME_FRAGMENT = r"\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\.?|[ap]\b)"
SET_TIME_PREFIX_RE = re.compile(
    rf"({TIME_FRAGMENT})\s*[–\-—:]\s*(.+?)(?=\s*{TIME_FRAGMENT}\s*[–\-—:]|$)",
    re.IGNORECASE,
)
SET_TIME_AT_RE = re.compile(rf"^(.*?)\s*@\s*({TIME_FRAGMENT})", re.IGNORECASE)
SET_TIME_LEAD_RE = re.compile(rf"^({TIME_FRAGMENT})\s+(.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class LineupContext:
    """What the extractor needs to know about the venue the text came from."""
    venue_name: str = ""
    venue_aliases: tuple = ()
    boilerplate_patterns: tuple = ()
    split_headliner_on_and: bool = False
    validator: object = DEFAULT_VALIDATOR


DEFAULT_CONTEXT = LineupContext()


def _venue_patterns(context):
    names = [n for n in (context.venue_name, *context.venue_aliases) if n]
    patterns = []
    for name in names:
        escaped = re.escape(name).replace("\\ ", r"\s+").replace("'", "['’]?")
        patterns.append(re.compile(rf"\s+(?:at|@)\s+{escaped}(?!\w).*$", re.IGNORECASE))
        patterns.append(re.compile(rf"^\s*{escaped}\s*[:|\-–—]\s+", re.IGNORECASE))
    return patterns


def strip_boilerplate(text, context=DEFAULT_CONTEXT):
    """
    Remove venue template copy from a title: presenter credits, ticketing
    calls to action, schedule tails, release-show suffixes and descriptor
    parentheticals. Venue-specific regexes run first.
    """
    t = normalize(text)
    if not t:
        return ""

    for pattern in context.boilerplate_patterns:
        if isinstance(pattern, str):
            t = re.sub(pattern, " ", t, flags=re.IGNORECASE)
        else:
            t = pattern.sub(" ", t)
    t = normalize(t)

    t = SOLD_OUT_PREFIX_RE.sub("", t)
    t = PRESENTER_RE.sub("", t)
    t = PRESENTED_BY_RE.sub("", t)
    for pattern in _venue_patterns(context):
        t = pattern.sub("", t)
    t = SCHEDULE_TAIL_RE.sub("", t)
    t = TRAILING_TIME_RE.sub("", t)
    t = CTA_TAIL_RE.sub("", t)
    t = CTA_ANYWHERE_RE.sub(" ", t)
    t = RELEASE_RE.sub("", t)
    t = SPECIAL_GUEST_RE.sub(" ", t)
    t = NIGHT_RE.sub("", t)
    t = DESCRIPTOR_PAREN_RE.sub("", t)
    t = BRACKET_RE.sub("", t)

    return _trim(t)


def _trim(text):
    text = normalize(text)
    text = LEADING_JUNK_RE.sub("", text)
    text = TRAILING_JUNK_RE.sub("", text)
    return normalize(text)


def _is_tour_label(text):
    return bool(TOUR_PHRASE_RE.search(text or ""))


def _resolve_colon(segment):
    """
    Split "Headliner: Tour Name" or "STAGE NAME: Headliner".
    Returns (head, tail) where tail is lineup text still to be placed, or "".
    """
    if not COLON_RE.search(segment):
        return segment, ""
    before, after = (normalize(p) for p in COLON_RE.split(segment, maxsplit=1))
    if not after:
        return before, ""
    if _is_tour_label(after):
        return before, ""
    if _is_tour_label(before) or before.isupper():
        return after, ""
    return before, after


def split_primary(text):
    """
    Find the headliner/support boundary.
    An explicit marker (featuring/ft., with/w/) wins; the earliest one is
    used so "A w/ B ft. C" keeps C with the support acts. Without one a colon
    may separate a tour name or stage label from the lineup.
    Returns (headliner_segment, support_segment).
    """
    match = EXPLICIT_SPLIT_RE.search(text)
    if match:
        head = text[: match.start()]
        support = text[match.end():]
        head, spill = _resolve_colon(head)
        if spill:
            support = f"{spill}, {support}"
        return _trim(head), _trim(support)

    head, tail = _resolve_colon(text)
    return _trim(head), _trim(tail)


def clean_piece(piece):
    """Tidy one split-out act name: tour suffixes, connectors, stray punctuation."""
    piece = normalize(piece)
    piece = TOUR_DASH_RE.sub("", piece)
    piece = re.sub(r"\s*\(\s*$", "", piece)
    if TOUR_TITLE_RE.search(piece):
        return ""
    return _trim(piece)


def _pieces(segment, pattern):
    if not segment:
        return []
    return [clean_piece(p) for p in pattern.split(segment) if p and p.strip()]


def extract_lineup(composite, context=DEFAULT_CONTEXT):
    """
    Split an event title into an ordered lineup.
    Returns a list of LineupEntry; the first valid name is the headliner and
    the rest are support. Names failing validation are dropped, names are
    deduplicated case-insensitively.
    """
    cleaned = strip_boilerplate(composite, context)
    if not cleaned:
        return []

    head, support = split_primary(cleaned)
    if context.split_headliner_on_and:
        names = _pieces(head, HEADLINER_AND_SPLIT_RE) + _pieces(support, SUPPORT_AND_SPLIT_RE)
    else:
        names = _pieces(head, HEADLINER_SPLIT_RE) + _pieces(support, SUPPORT_SPLIT_RE)

    return _assign_roles(names, context)


def _assign_roles(names, context, times=None):
    entries = []
    seen = set()
    for index, name in enumerate(names):
        if not is_likely_artist_name(name, context.validator):
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        role = HEADLINER if not entries else SUPPORT
        set_time = times[index] if times else None
        entries.append(LineupEntry(name, role, set_time))
    return entries


def merge_lineups(*lineups):
    """Concatenate lineups from several sources, re-deriving roles by position."""
    entries = []
    seen = set()
    for lineup in lineups:
        for entry in lineup:
            key = entry.name.lower()
            if key in seen:
                continue
            seen.add(key)
            role = HEADLINER if not entries else SUPPORT
            entries.append(entry._replace(role=role))
    return entries


def lineup_from_names(names, context=DEFAULT_CONTEXT):
    """Validate a pre-split list of names (API lineup arrays)."""
    return _assign_roles([clean_piece(n) for n in names if n], context)


def title_fallback(title, context=DEFAULT_CONTEXT):
    """
    Last resort when every split piece was rejected: the cleaned, unsplit
    title as a single headliner. Applied once by the caller, never re-split.
    """
    cleaned = strip_boilerplate(title, context)
    return [LineupEntry(cleaned, HEADLINER)] if cleaned else []


def extract_lineup_with_fallback(title, context=DEFAULT_CONTEXT):
    return extract_lineup(title, context) or title_fallback(title, context)


def split_set_times(text):
    """
    Pull per-act set times out of schedule copy.
    Handles "10pm – A.L. West 10:45pm – Elnuh" and
    "Artist A @9pm, Artist B @10:30pm". Returns [(name, ClockTime)].
    """
    text = normalize(text)
    if not text:
        return []

    prefixed = SET_TIME_PREFIX_RE.findall(text)
    if prefixed:
        return [(clean_piece(name), parse_time(time)) for time, name in prefixed if clean_piece(name)]

    pairs = []
    for segment in re.split(r"\s*[,;\n]\s*", text):
        at = SET_TIME_AT_RE.match(segment)
        lead = SET_TIME_LEAD_RE.match(segment)
        if at and clean_piece(at.group(1)):
            pairs.append((clean_piece(at.group(1)), parse_time(at.group(2))))
        elif lead and clean_piece(lead.group(2)):
            pairs.append((clean_piece(lead.group(2)), parse_time(lead.group(1))))
    return pairs


def lineup_from_set_times(text, context=DEFAULT_CONTEXT):
    pairs = split_set_times(text)
    names = [name for name, _ in pairs]
    times = [time for _, time in pairs]
    return _assign_roles(names, context, times)
