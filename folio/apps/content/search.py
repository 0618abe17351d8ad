"""
Free-text search over published content.
"""
from __future__ import annotations

import html
from dataclasses import dataclass, field
from functools import reduce
from operator import and_, or_

from django.db.models import Q

from folio.conf import folio_setting
from folio.lib.validators import clean_int, trim_string

from .api import DEFAULT_ORDERING, rows_to_entities
from .entities import ContentEntity
from .models import ContentObject
from .types import ContentType

__all__ = [
    "SearchResults",
    "search_content",
]

SEARCH_OPERATORS = ("AND", "OR", "exact")

# Plain-text columns are matched against the terms as typed.
TEXT_COLUMNS = ("title", "caption", "creator", "publisher")
# HTML columns hold entity-escaped text, so they are matched against escaped terms.
HTML_COLUMNS = ("teaser", "description")


@dataclass(frozen=True)
class SearchResults:
    """
    One page of search results plus the total number of matches.
    """
    count: int
    objects: list[ContentEntity] = field(default_factory=list)


def _search_terms(search_terms: str, operator: str) -> list[tuple[str, str]]:
    """
    (raw, escaped) pairs for the usable terms.

    AND/OR split on whitespace, "exact" keeps the whole phrase. Terms shorter
    than ``MIN_SEARCH_LENGTH`` are dropped.
    """
    min_length = folio_setting("MIN_SEARCH_LENGTH")
    search_terms = trim_string(search_terms)
    raw_terms = search_terms.split() if operator in ("AND", "OR") else [search_terms]
    pairs = []
    for term in raw_terms:
        term = trim_string(term)
        if term and len(term) >= min_length:
            pairs.append((term, html.escape(term, quote=False)))
    return pairs


def _term_q(raw: str, escaped: str) -> Q:
    q = Q()
    for column in TEXT_COLUMNS:
        q |= Q(**{f"{column}__icontains": raw})
    for column in HTML_COLUMNS:
        q |= Q(**{f"{column}__icontains": escaped})
    return q


def search_content(search_terms: str, operator: str = "AND", limit: int | None = None, offset: int = 0) -> SearchResults:
    """
    Search online, non-Block content for ``search_terms``.

    ``operator`` is "AND" (every term must match), "OR" (any term) or
    "exact" (the whole phrase); anything else is treated as "AND". Results
    are newest first, ``limit`` defaults to ``SEARCH_PAGINATION``.
    """
    if operator not in SEARCH_OPERATORS:
        operator = "AND"
    limit = clean_int(limit, field="limit") if limit else folio_setting("SEARCH_PAGINATION")
    offset = clean_int(offset or 0, field="offset")

    terms = _search_terms(search_terms, operator)
    if not terms:
        return SearchResults(count=0)

    combine = or_ if operator == "OR" else and_
    q = reduce(combine, (_term_q(raw, escaped) for raw, escaped in terms))
    queryset = (
        ContentObject.objects.online()
        .exclude(type=ContentType.BLOCK)
        .filter(q)
        .order_by(*DEFAULT_ORDERING)
    )
    count = queryset.count()
    if not count:
        return SearchResults(count=0)
    return SearchResults(count=count, objects=rows_to_entities(queryset[offset:offset + limit]))
