"""
Content API: create, read, update and delete content objects.

This module works with content entities (see ``entities.py``) rather than
model instances. Reads rebuild entities from rows plus their tag ids; writes
map entities to rows, keep ``Taglink`` rows in step and handle the uploaded
files an entity carries.

Database work for a single write happens in one transaction. Files are not
transactional, so they are handled around it: new uploads are stored before
the transaction and removed again if it fails, and files that a write made
obsolete are only deleted once the transaction has committed.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import partial

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Case, F, Value, When
from django.db.transaction import atomic
from django.utils.translation import gettext_lazy as _

from . import storage
from .criteria import Criteria
from .entities import ContentEntity, create_entity, entity_from_dict
from .exceptions import ContentWriteError
from .mimetypes import mimetype_for
from .models import ContentObject, Taglink
from .rows import entity_to_row_values, row_to_entity
from .taglinks import delete_taglinks, get_tag_ids, get_tag_ids_for, insert_taglinks, update_taglinks
from .types import ContentType, is_sanctioned_type, parse_content_type

log = logging.getLogger(__name__)

# The public API that will be re-exported by folio.api.content is listed in
# __all__. Helpers that are private to this module start with an underscore.
__all__ = [
    "create_entity",
    "delete",
    "delete_parental_references",
    "entity_from_dict",
    "get_active_tag_list",
    "get_count",
    "get_list_of_object_titles",
    "get_object",
    "get_objects",
    "get_tag_list",
    "get_tags",
    "insert",
    "is_sanctioned_type",
    "toggle_online_status",
    "update",
    "update_counter",
]

DEFAULT_ORDERING = ("-date", "-submission_time")


def _check_entity(entity) -> ContentEntity:
    if not isinstance(entity, ContentEntity):
        raise TypeError(f"Expected a content entity, got {entity.__class__.__name__}")
    # Re-checks the discriminator in case the class was built outside the registry.
    parse_content_type(entity.type)
    return entity


def _clean_id(content_id) -> int:
    """
    ``content_id`` as a positive int, or 0 if it isn't one.
    """
    if isinstance(content_id, bool):
        return 0
    try:
        content_id = int(content_id)
    except (TypeError, ValueError):
        return 0
    return content_id if content_id > 0 else 0


def _queryset(criteria: Criteria | None, content_type):
    queryset = ContentObject.objects.all()
    if content_type is not None:
        content_type = parse_content_type(content_type)
        criteria = criteria.copy() if criteria else Criteria()
        criteria.unset_type()
        queryset = queryset.of_type(content_type)
    if criteria is not None:
        queryset = criteria.filter_queryset(queryset)
    return queryset, criteria


def rows_to_entities(rows) -> list[ContentEntity]:
    """
    Entities for ``rows``, with the tag ids of all of them fetched in one query.
    """
    rows = list(rows)
    tag_map = get_tag_ids_for(row.id for row in rows if row.type != ContentType.TAG)
    return [row_to_entity(row, tag_map.get(row.id, ())) for row in rows]


# -- Reads -----------------------------------------------------------------

def get_object(content_id) -> ContentEntity | None:
    """
    Get the content object with ``content_id``, or None if there isn't one.
    """
    content_id = _clean_id(content_id)
    if not content_id:
        return None
    try:
        row = ContentObject.objects.get(pk=content_id)
    except ContentObject.DoesNotExist:
        return None
    tag_ids = [] if row.type == ContentType.TAG else get_tag_ids(row.id)
    return row_to_entity(row, tag_ids)


def get_objects(criteria: Criteria | None = None, *, content_type: str | None = None) -> list[ContentEntity]:
    """
    Get the content objects matching ``criteria``.

    Ordered by ``criteria``'s order, or newest first by date and then
    submission time. ``content_type`` restricts the listing to one type,
    replacing any type condition in ``criteria``.

    Tag ids for the whole page are fetched in a single extra query.
    """
    queryset, criteria = _queryset(criteria, content_type)
    ordering = criteria.order_by() if criteria else []
    queryset = queryset.order_by(*(ordering or DEFAULT_ORDERING))
    if criteria is not None:
        queryset = criteria.paginate(queryset)
    return rows_to_entities(queryset)


def get_count(criteria: Criteria | None = None, *, content_type: str | None = None) -> int:
    """
    Count the content objects matching ``criteria``, ignoring limit/offset.
    """
    queryset, _criteria = _queryset(criteria, content_type)
    return queryset.count()


def get_list_of_object_titles(criteria: Criteria | None = None) -> dict[int, str]:
    """
    ``{id: title}`` for the objects matching ``criteria``, in listing order.
    """
    queryset, criteria = _queryset(criteria, None)
    ordering = criteria.order_by() if criteria else []
    queryset = queryset.order_by(*(ordering or DEFAULT_ORDERING))
    if criteria is not None:
        queryset = criteria.paginate(queryset)
    return dict(queryset.values_list("id", "title"))


def get_tags(online_only: bool = False) -> list[ContentEntity]:
    """
    All Tag objects, sorted by title.
    """
    queryset = ContentObject.objects.of_type(ContentType.TAG).order_by("title")
    if online_only:
        queryset = queryset.online()
    return [row_to_entity(row) for row in queryset]


def get_tag_list(online_only: bool = True) -> dict[int, str]:
    """
    ``{id: title}`` for Tags, sorted by title.
    """
    queryset = ContentObject.objects.of_type(ContentType.TAG)
    if online_only:
        queryset = queryset.online()
    return dict(queryset.order_by("title").values_list("id", "title"))


def get_active_tag_list(content_type: str | None = None, online_only: bool = True) -> dict[int, str]:
    """
    Like ``get_tag_list()``, but only Tags that something is tagged with.

    ``content_type`` narrows that to Tags used by objects of one type.
    """
    links = Taglink.objects.all()
    if content_type is not None:
        links = links.filter(content_type=parse_content_type(content_type))
    queryset = ContentObject.objects.of_type(ContentType.TAG).filter(
        id__in=links.values("tag_id")
    )
    if online_only:
        queryset = queryset.online()
    return dict(queryset.order_by("title").values_list("id", "title"))


# -- Writes ----------------------------------------------------------------

def _store_uploads(entity: ContentEntity) -> dict[str, str]:
    """
    Store the entity's pending uploads. Returns ``{kind: stored name}`` for
    the ones that were stored.
    """
    stored = {}
    for kind, uploaded_file in entity.pending_uploads.items():
        name = storage.upload_file(uploaded_file, kind)
        if name:
            stored[kind] = name
        else:
            log.warning("Upload of %s for %r failed", kind, entity)
    return stored


def _discard_uploads(stored: dict[str, str]):
    for kind, name in stored.items():
        storage.delete_file(storage.file_path(kind, name))


def _delete_files_on_commit(files: list[tuple[str, str]]):
    for kind, name in files:
        transaction.on_commit(partial(storage.delete_file, storage.file_path(kind, name)))


def _clear_file(values: dict, kind: str):
    values[kind] = ""
    if kind == "media":
        values["format"] = ""
        values["file_size"] = 0


def _reconcile_files(entity: ContentEntity, saved: ContentObject, values: dict, stored: dict[str, str]):
    """
    Decide the image/media columns for an update.

    For each kind the outcome is one of: the type does not use it (cleared),
    a new upload replaces it, deletion was requested (cleared), or the saved
    file is kept. A kept media file is dropped if the (possibly new) type
    does not accept its file type. Returns the (kind, name) files that are no
    longer referenced.
    """
    whitelist = entity.get_property_whitelist()
    stale = []
    for kind in storage.FILE_KINDS:
        existing = getattr(saved, kind)
        if kind not in whitelist:
            _clear_file(values, kind)
        elif kind in stored:
            values[kind] = stored[kind]
        elif kind in entity.delete_requests:
            _clear_file(values, kind)
        elif kind == "media" and existing and mimetype_for(existing, entity.allowed_media_mimetypes) is None:
            log.info("Dropping media %r: not accepted by %s", existing, entity.type)
            _clear_file(values, kind)
        else:
            values[kind] = existing
            if kind == "media":
                values["format"] = saved.format
                values["file_size"] = saved.file_size
            continue
        if existing:
            stale.append((kind, existing))
    return stale


def insert(entity: ContentEntity) -> ContentEntity:
    """
    Save a new content object and return it as stored, with its new id.

    Pending uploads are stored first. The row and its taglinks are written
    in one transaction; if that fails, the uploads are removed again.
    """
    entity = _check_entity(entity)
    values = entity_to_row_values(entity)
    values["submission_time"] = datetime.now(tz=timezone.utc)
    values["last_updated"] = None

    stored = _store_uploads(entity)
    for kind in entity.pending_uploads:
        if kind in stored:
            values[kind] = stored[kind]
        else:
            _clear_file(values, kind)
    tag_ids = entity.tags if "tags" in entity.get_property_whitelist() else []

    try:
        with atomic():
            row = ContentObject(**values)
            row.full_clean()
            row.save()
            if not row.pk:
                raise ContentWriteError(f"Insert of {entity!r} returned no id")
            insert_taglinks(row.pk, row.type, tag_ids)
    except Exception:
        _discard_uploads(stored)
        raise

    log.info("Inserted %s %s", row.type, row.pk)
    return row_to_entity(row, get_tag_ids(row.pk) if tag_ids else ())


def update(entity: ContentEntity) -> ContentEntity:
    """
    Save changes to an existing content object and return it as stored.

    ``submission_time`` is never changed; ``last_updated`` is stamped. The
    entity's type may differ from the stored one: columns the new type does
    not use are cleared, children of a former Collection lose their parent,
    and links to a former Tag are removed.

    Raises ``ContentObject.DoesNotExist`` if the object was never saved.
    """
    entity = _check_entity(entity)
    saved = ContentObject.objects.get(pk=entity.id)

    tag_ids = entity.tags if "tags" in entity.get_property_whitelist() else []
    if saved.id in tag_ids:
        # A Tag being retyped is still a Tag row when its taglinks are checked.
        raise ValidationError(_("An object cannot be tagged with itself."), code="self_tag")

    values = entity_to_row_values(entity)
    del values["submission_time"]
    values["last_updated"] = datetime.now(tz=timezone.utc)

    stored = _store_uploads(entity)
    stale = _reconcile_files(entity, saved, values, stored)

    try:
        with atomic():
            if saved.type == ContentType.COLLECTION and entity.type != ContentType.COLLECTION:
                delete_parental_references(saved.id)
            if saved.type == ContentType.TAG and entity.type != ContentType.TAG:
                Taglink.objects.filter(tag_id=saved.id).delete()
            update_taglinks(saved.id, entity.type, tag_ids)

            for name, value in values.items():
                setattr(saved, name, value)
            saved.full_clean()
            saved.save()
            _delete_files_on_commit(stale)
    except Exception:
        _discard_uploads(stored)
        raise

    log.info("Updated %s %s", saved.type, saved.id)
    return row_to_entity(saved, get_tag_ids(saved.id) if tag_ids else ())


def delete(content_id) -> bool:
    """
    Delete a content object. Returns False if it does not exist.

    Its taglinks go first (for a Tag, every link pointing at it), then the
    parent reference of any children if it is a Collection, then the row.
    Its image and media files are deleted after the transaction commits.
    """
    entity = get_object(content_id)
    if entity is None:
        return False

    with atomic():
        delete_taglinks(entity.id, entity.type)
        if entity.type == ContentType.COLLECTION:
            delete_parental_references(entity.id)
        ContentObject.objects.filter(pk=entity.id).delete()
        _delete_files_on_commit(
            [(kind, getattr(entity, kind)) for kind in storage.FILE_KINDS if getattr(entity, kind, "")]
        )

    log.info("Deleted %s %s", entity.type, entity.id)
    return True


def delete_parental_references(content_id) -> int:
    """
    Reset ``parent`` to 0 on the children of ``content_id``. Returns how many
    children there were.
    """
    content_id = _clean_id(content_id)
    if not content_id:
        return 0
    return ContentObject.objects.children_of(content_id).update(parent=0)


def toggle_online_status(content_id) -> bool:
    """
    Flip an object between online and offline. Returns False if it does not
    exist.
    """
    updated = ContentObject.objects.filter(pk=_clean_id(content_id)).update(
        online=Case(When(online=True, then=Value(False)), default=Value(True))
    )
    return bool(updated)


def update_counter(content_id) -> bool:
    """
    Increment an object's view counter. Returns False if it does not exist.
    """
    updated = ContentObject.objects.filter(pk=_clean_id(content_id)).update(counter=F("counter") + 1)
    return bool(updated)
