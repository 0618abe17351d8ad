"""
Links between content objects and the Tags attached to them.

An object's tags are always replaced as a set. Every tag id in a batch is
checked before any row is written, and each batch is written in a single
transaction.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from django.core.exceptions import ValidationError
from django.db.transaction import atomic
from django.utils.translation import gettext_lazy as _

from folio.lib.validators import clean_int

from .models import ContentObject, Taglink
from .types import ContentType, parse_content_type

log = logging.getLogger(__name__)

__all__ = [
    "delete_taglinks",
    "get_tag_ids",
    "get_tag_ids_for",
    "insert_taglinks",
    "update_taglinks",
]


def _clean_tag_ids(tag_ids: Iterable) -> list[int]:
    clean: list[int] = []
    for tag_id in tag_ids or ():
        tag_id = clean_int(tag_id, field="tags", minimum=1)
        if tag_id not in clean:
            clean.append(tag_id)
    return clean


def insert_taglinks(content_id: int, content_type: str, tag_ids: Iterable) -> list[Taglink]:
    """
    Link ``content_id`` to every tag in ``tag_ids``.

    Raises ``ValidationError`` (writing nothing) if any id is malformed or is
    not an existing Tag, or if the content is itself a Tag.
    """
    content_id = clean_int(content_id, field="content_id", minimum=1)
    content_type = parse_content_type(content_type)
    tag_ids = _clean_tag_ids(tag_ids)
    if not tag_ids:
        return []
    if content_type == ContentType.TAG:
        raise ValidationError(_("Tags cannot be tagged."), code="tagged_tag")

    known = set(
        ContentObject.objects.of_type(ContentType.TAG)
        .filter(id__in=tag_ids)
        .values_list("id", flat=True)
    )
    unknown = [tag_id for tag_id in tag_ids if tag_id not in known]
    if unknown:
        raise ValidationError(
            _("Unknown tag ids: %(tags)s"),
            params={"tags": ", ".join(str(tag_id) for tag_id in unknown)},
            code="unknown_tag",
        )

    with atomic():
        return Taglink.objects.bulk_create(
            [
                Taglink(content_id=content_id, tag_id=tag_id, content_type=content_type)
                for tag_id in tag_ids
            ]
        )


def update_taglinks(content_id: int, content_type: str, tag_ids: Iterable) -> list[Taglink]:
    """
    Replace the tags held by ``content_id`` with ``tag_ids``.

    A Tag holds no taglinks, so for a Tag this only removes old links.
    """
    content_type = parse_content_type(content_type)
    with atomic():
        removed, _details = Taglink.objects.filter(content_id=content_id).delete()
        if removed:
            log.debug("Removed %d taglinks from content %s", removed, content_id)
        if content_type == ContentType.TAG:
            return []
        return insert_taglinks(content_id, content_type, tag_ids)


def delete_taglinks(content_id: int, content_type: str) -> int:
    """
    Remove the taglinks belonging to an object that is going away.

    For a Tag that means every link pointing at it; for anything else, the
    links it holds. Returns the number of links removed.
    """
    if parse_content_type(content_type) == ContentType.TAG:
        links = Taglink.objects.filter(tag_id=content_id)
    else:
        links = Taglink.objects.filter(content_id=content_id)
    removed, _details = links.delete()
    return removed


def get_tag_ids(content_id: int) -> list[int]:
    return list(
        Taglink.objects.filter(content_id=content_id)
        .order_by("id")
        .values_list("tag_id", flat=True)
    )


def get_tag_ids_for(content_ids: Iterable[int]) -> dict[int, list[int]]:
    """
    Tag ids for many objects at once, in one query.
    """
    content_ids = list(content_ids)
    tag_map: dict[int, list[int]] = defaultdict(list)
    if not content_ids:
        return tag_map
    links = (
        Taglink.objects.filter(content_id__in=content_ids)
        .order_by("id")
        .values_list("content_id", "tag_id")
    )
    for content_id, tag_id in links:
        tag_map[content_id].append(tag_id)
    return tag_map
