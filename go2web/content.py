import json
import re

import structlog

logger = structlog.get_logger(__name__)

_NBSP = re.compile(r"&nbsp;", re.IGNORECASE)
_AMP = re.compile(r"&amp;", re.IGNORECASE)
_NEWLINES = re.compile(r"[\r\n]+")
_SPACES = re.compile(r"\s{2,}")


def media_type(content_type):
    return (content_type or "").split(";", 1)[0].strip().lower()


def format_json(text):
    """Re-indent a JSON document, or return None if it does not parse."""
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def _drop_blocks(text, tag):
    # <tag ...>...</tag>, case-insensitive; an unclosed block is left alone
    lowered = text.lower()
    opener, closer = f"<{tag}", f"</{tag}>"
    pieces = []
    pos = 0
    while True:
        start = lowered.find(opener, pos)
        if start == -1:
            break
        end = lowered.find(closer, start)
        if end == -1:
            break
        pieces.append(text[pos:start])
        pos = end + len(closer)
    pieces.append(text[pos:])
    return "".join(pieces)


def _drop_tags(text):
    pieces = []
    pos = 0
    while True:
        start = text.find("<", pos)
        if start == -1:
            break
        end = text.find(">", start + 1)
        if end == -1:
            break
        if end == start + 1:
            # "<>" is not a tag
            pieces.append(text[pos:start + 1])
            pos = start + 1
            continue
        pieces.append(text[pos:start])
        pos = end + 1
    pieces.append(text[pos:])
    return "".join(pieces)


def strip_html(html):
    """Reduce an HTML document to its readable text."""
    text = _drop_blocks(html, "script")
    text = _drop_blocks(text, "style")
    text = _drop_tags(text)
    text = _NBSP.sub(" ", text)
    text = _AMP.sub("&", text)
    text = _NEWLINES.sub("\n", text)
    text = _SPACES.sub(" ", text)
    return text.strip()


def is_html(mtype):
    return mtype in ("text/html", "text/xml") or "html" in mtype


def transform(text, content_type):
    """Render a decoded body for display according to its media type."""
    mtype = media_type(content_type)
    if mtype == "application/json":
        formatted = format_json(text)
        if formatted is None:
            logger.debug("json fallback", reason="body is not valid JSON")
            return text
        return formatted
    if is_html(mtype):
        return strip_html(text)
    return text
