import re

BLOCK_BREAK_RE = re.compile(r"<br\s*/?>|</p\s*>|</div\s*>|<li\b[^>]*>", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")

ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#039;": "'",
    "&#39;": "'",
    "&nbsp;": " ",
    "&hellip;": "…",
    "&#036;": "$",
}
ENTITY_RE = re.compile("|".join(re.escape(e) for e in ENTITIES), re.IGNORECASE)


def normalize(raw):
    """Collapse every whitespace run to a single space and trim the ends."""
    if not raw:
        return ""
    return WHITESPACE_RE.sub(" ", str(raw)).strip()


def decode_entities(text):
    """Decode the fixed entity set in one pass, so "&amp;lt;" stays "&lt;"."""
    if not text:
        return ""
    return ENTITY_RE.sub(lambda m: ENTITIES[m.group(0).lower()], text)


def _break_blocks(html):
    return TAG_RE.sub(" ", BLOCK_BREAK_RE.sub("\n", html))


def strip_html(html):
    """
    Convert an HTML snippet to plain text.
    Block-level tags become line breaks before the remaining tags are dropped,
    entities are decoded after tag removal so encoded brackets survive as text.
    """
    if not html:
        return ""
    return normalize(decode_entities(_break_blocks(str(html))))


def html_to_lines(html):
    """Like strip_html but keeps one entry per block-level line."""
    if not html:
        return []
    text = decode_entities(_break_blocks(str(html)))
    return [line for line in (normalize(l) for l in text.split("\n")) if line]


def to_html(text):
    """Escape plain text into a paragraph, one <br> per line break."""
    escaped = (
        (text or "")
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )
    return "<p>" + "<br>".join(escaped.split("\n")) + "</p>"


def truncate(text, limit):
    """Cut text at a word boundary so the result fits in limit characters."""
    text = normalize(text)
    if limit <= 0 or len(text) <= limit:
        return text
    cut = text[: limit - 1]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,;:-") + "…"
