"""
Translation between content entities and ``ContentObject`` rows.

This is the only module that knows how entity fields line up with table
columns, including what a zeroed field looks like in storage.
"""
from __future__ import annotations

from typing import Any, Iterable

from django.db import models

from .entities import ContentEntity, create_entity
from .models import ContentObject

__all__ = [
    "row_to_entity",
    "entity_to_row_values",
]


def _column_fields() -> list[models.Field]:
    return [field for field in ContentObject._meta.concrete_fields if not field.primary_key]


def empty_value(field: models.Field) -> Any:
    """
    What a column holds for a type that does not use it.
    """
    if field.null:
        return None
    if field.has_default():
        return field.get_default()
    return ""


def entity_to_row_values(entity: ContentEntity) -> dict[str, Any]:
    """
    Column values for saving ``entity``, with zeroed columns emptied.

    The primary key is not included; callers decide whether they are
    inserting or updating.
    """
    values = entity.to_dict()
    return {
        field.name: values[field.name] if field.name in values else empty_value(field)
        for field in _column_fields()
    }


def row_to_entity(row: ContentObject, tag_ids: Iterable[int] = ()) -> ContentEntity:
    """
    Rebuild the entity for ``row``.

    Raises ``UnknownContentTypeError`` if the row's type is not recognised.
    Stored values are trusted and bypass the setters; a NULL in a column the
    type uses keeps the entity's initial value.
    """
    entity = create_entity(row.type)
    stored = {"id": row.id}
    for field in _column_fields():
        if field.name == "type":
            continue
        value = getattr(row, field.name)
        if value is not None:
            stored[field.name] = value
    stored["tags"] = list(tag_ids)
    entity.load_stored_values(stored)
    return entity
