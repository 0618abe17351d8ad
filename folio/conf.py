"""
Access to Folio's Django settings.

All configuration lives in a single ``FOLIO`` dict in Django settings::

    FOLIO = {
        "MEDIA": {
            "BACKEND": "django.core.files.storage.FileSystemStorage",
            "OPTIONS": {"location": "/var/folio/uploads"},
        },
        "MIN_SEARCH_LENGTH": 3,
        "SEARCH_PAGINATION": 20,
        "LANGUAGES": {"en": "English", "th": "Thai"},
        "SITE_URL": "https://example.com/",
    }

Keys that are left out fall back to ``DEFAULTS``. ``MEDIA`` has no default:
file operations raise ``ImproperlyConfigured`` without it.
"""
from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "MIN_SEARCH_LENGTH": 3,
    "SEARCH_PAGINATION": 20,
    "LANGUAGES": {"en": "English", "th": "Thai"},
    # Base URL of the public site, swapped for a placeholder in stored HTML.
    "SITE_URL": "",
}

# Stand-in for SITE_URL inside stored teaser/description HTML, so content
# survives a move to another domain.
SITE_URL_PLACEHOLDER = "FOLIO_LINK"


def folio_setting(name: str) -> Any:
    """
    Return ``settings.FOLIO[name]``, or its default.

    Raises ``KeyError`` for a name that is neither configured nor defaulted.
    """
    configured = getattr(settings, "FOLIO", None) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]
