"""
Field helpers so that every content column follows the same conventions.

MySQL compares text case-insensitively out of the box while SQLite does not.
Searchable columns (titles, teasers, creators...) are declared with explicit
case-insensitive collations so that LIKE searches and title ordering behave
the same on both.
"""
from __future__ import annotations

from django.db import models

from .collations import MultiCollationMixin
from .validators import validate_utc_datetime

CASE_INSENSITIVE_COLLATIONS = {
    "sqlite": "NOCASE",
    # utf8mb4_unicode_ci is shared by MySQL and MariaDB.
    "mysql": "utf8mb4_unicode_ci",
}


class MultiCollationCharField(MultiCollationMixin, models.CharField):
    """
    CharField with one collation per database vendor.
    """


class MultiCollationTextField(MultiCollationMixin, models.TextField):
    """
    TextField with one collation per database vendor.
    """


def case_insensitive_char_field(**kwargs) -> MultiCollationCharField:
    """
    Return a case-insensitive ``MultiCollationCharField``.

    Defaults to an optional column with an empty-string default, which is what
    nearly every content column wants. Any keyword can be overridden.
    """
    final_kwargs = {
        "max_length": 255,
        "blank": True,
        "null": False,
        "default": "",
        "db_collations": CASE_INSENSITIVE_COLLATIONS,
    }
    final_kwargs.update(kwargs)
    return MultiCollationCharField(**final_kwargs)


def case_insensitive_text_field(**kwargs) -> MultiCollationTextField:
    """
    Return a case-insensitive ``MultiCollationTextField`` for HTML bodies.
    """
    final_kwargs = {
        "blank": True,
        "null": False,
        "default": "",
        "db_collations": CASE_INSENSITIVE_COLLATIONS,
    }
    final_kwargs.update(kwargs)
    return MultiCollationTextField(**final_kwargs)


def manual_date_time_field(**kwargs) -> models.DateTimeField:
    """
    DateTimeField that never fills itself in.

    The caller stamps the value explicitly (and *must* use UTC), so one write
    that touches several rows can give all of them the same time.
    """
    final_kwargs = {
        "auto_now": False,
        "auto_now_add": False,
        "null": False,
        "validators": [validate_utc_datetime],
    }
    final_kwargs.update(kwargs)
    return models.DateTimeField(**final_kwargs)
