NON_CONCERT_KEYWORDS = (
    "bingo",
    "rock and roll bingo",
    "trivia",
    "karaoke",
    "open mic",
    "open-mic",
    "market",
    "farmers market",
    "brunch",
    "yoga",
    "workshop",
    "class",
    "book signing",
    "pop up",
    "pop-up",
    "paint night",
    "dance party",
    "dance",
    "dinner",
    "mixer",
    "meetup",
    "meet-up",
    "fundraiser",
    "fund raiser",
    "silent auction",
    "auction",
    "craft fair",
    "bazaar",
    "expo",
    "conference",
    "festival",
    "movie night",
    "film screening",
    "screening",
    "lecture",
    "reading",
    "panel",
    "networking",
    "open house",
    "sound bath",
    "fitness",
    "wellness",
    "charity",
    "vendor",
    "vendors",
    "crafts",
    "bake sale",
)

# Venues that book almost nothing but music only drop the obvious cases
CONSERVATIVE_KEYWORDS = (
    "bingo night",
    "trivia night",
    "karaoke",
    "yoga class",
    "comedy show",
    "movie screening",
    "vendor market",
    "private event",
)


def matched_keyword(title, body_text="", lineup=(), keywords=None, extra_keywords=()):
    """
    Return the first non-concert keyword found in the combined text, or None.
    Matching is plain case-insensitive substring containment.
    """
    names = [getattr(entry, "name", entry) for entry in (lineup or ())]
    combined = f"{title or ''} {body_text or ''} {' '.join(names)}".lower()

    for keyword in list(keywords or NON_CONCERT_KEYWORDS) + list(extra_keywords):
        if keyword.lower() in combined:
            return keyword
    return None


def is_non_concert_event(title, body_text="", lineup=(), keywords=None, extra_keywords=()):
    """
    Check whether an event looks like a non-music booking (bingo, trivia,
    markets...). A band whose name contains a keyword is dropped too; that
    false positive is accepted.
    """
    return matched_keyword(title, body_text, lineup, keywords, extra_keywords) is not None
