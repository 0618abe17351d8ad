"""
Presentation helpers for content entities.

Values are stored clean but unescaped. These helpers turn them into
human-readable strings and escape them for HTML output.
"""
from __future__ import annotations

from datetime import date
from typing import Any

from django.utils.dateformat import format as format_date
from django.utils.html import escape

from folio.lib.validators import trim_string

from .entities import DERIVED_FIELDS, HTML_FIELDS, ContentEntity, convert_base_url
from .mimetypes import PERMITTED_UPLOAD_MIMETYPES
from .vocabularies import get_list_of_rights

__all__ = [
    "convert_bytes_to_human_readable",
    "escape_for_xss",
    "make_data_human_readable",
]

ONE_KILOBYTE = 1024
ONE_MEGABYTE = ONE_KILOBYTE * 1024
ONE_GIGABYTE = ONE_MEGABYTE * 1024

DISPLAY_DATE_FORMAT = "j F Y"


def convert_bytes_to_human_readable(num_bytes: int) -> str:
    """
    e.g. 512 -> "512 bytes", 1536 -> "1.5 KB".
    """
    num_bytes = int(num_bytes)
    if num_bytes < ONE_KILOBYTE:
        return f"{num_bytes} bytes"
    if num_bytes < ONE_MEGABYTE:
        value, unit = num_bytes / ONE_KILOBYTE, "KB"
    elif num_bytes < ONE_GIGABYTE:
        value, unit = num_bytes / ONE_MEGABYTE, "MB"
    else:
        value, unit = num_bytes / ONE_GIGABYTE, "GB"
    return f"{round(value, 2):g} {unit}"


def make_data_human_readable(entity: ContentEntity, name: str) -> Any:
    value = getattr(entity, name)
    if value is None:
        return ""
    if isinstance(value, date):
        return format_date(value, DISPLAY_DATE_FORMAT)
    if name == "file_size":
        return convert_bytes_to_human_readable(value)
    if name == "format":
        # Show the extension ("pdf") rather than the mimetype.
        for extension, mimetype in PERMITTED_UPLOAD_MIMETYPES.items():
            if mimetype == value:
                return extension
        return value
    if name in ("teaser", "description"):
        return convert_base_url(value, live_urls=False)
    if name == "rights":
        return str(get_list_of_rights().get(value, ""))
    if name == "tags":
        return [int(tag_id) for tag_id in value]
    return value


def escape_for_xss(entity: ContentEntity, name: str, escape_html: bool = False) -> str | None:
    """
    ``name`` made human-readable and escaped for output to a browser.

    Returns None if the entity has no such property. HTML fields (teaser,
    description, icon) were filtered on input and are returned as-is, unless
    ``escape_html`` is set for an editor textarea, in which case they are
    escaped once more.
    """
    name = trim_string(name)
    if name not in entity.get_property_whitelist() and name not in DERIVED_FIELDS:
        return None
    readable = str(make_data_human_readable(entity, name))
    if name in HTML_FIELDS and not escape_html:
        return readable
    return escape(readable)
