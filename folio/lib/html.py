"""
Whitelist HTML filtering for rich-text content fields.

Teasers and descriptions are written by editors in a WYSIWYG editor and shown
unescaped, so they are cleaned on the way in.
"""
import logging

import bleach

from .cache import lru_cache

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_bleach_config():
    """Build the tag/attribute whitelist once."""
    allowed_tags = set(bleach.sanitizer.ALLOWED_TAGS).union(
        {
            # text
            "p",
            "br",
            "div",
            "span",
            "hr",
            "cite",
            "sup",
            "sub",
            "u",
            "s",
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "dl",
            "dt",
            "dd",
            # code
            "pre",
            # tables
            "table",
            "thead",
            "tbody",
            "tfoot",
            "tr",
            "th",
            "td",
            "caption",
            # media
            "img",
            "figure",
            "figcaption",
            "video",
            "audio",
            "source",
            # icons
            "i",
        }
    )

    allowed_attrs = {
        "*": ["class", "id", "title"],
        "a": ["href", "title", "rel", "target"],
        "img": ["src", "alt", "title", "width", "height"],
        "video": ["src", "width", "height", "controls", "poster"],
        "audio": ["src", "controls"],
        "source": ["src", "type"],
        "th": ["colspan", "rowspan", "scope"],
        "td": ["colspan", "rowspan"],
        "ol": ["start", "type"],
        "blockquote": ["cite"],
    }

    allowed_protocols = ["http", "https", "mailto"]

    return allowed_tags, allowed_attrs, allowed_protocols


def filter_html(html: str) -> str:
    """
    Strip everything outside the whitelist from ``html``.

    Disallowed tags are removed entirely rather than escaped, since the output
    is rendered as markup.
    """
    if not html:
        return ""
    allowed_tags, allowed_attrs, allowed_protocols = _get_bleach_config()
    cleaned = bleach.clean(
        html,
        tags=allowed_tags,
        attributes=allowed_attrs,
        protocols=allowed_protocols,
        strip=True,
    )
    if cleaned != html:
        logger.debug("HTML filter removed markup (%d -> %d chars)", len(html), len(cleaned))
    return cleaned
