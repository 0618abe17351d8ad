"""
The closed set of content types.

Every row in the content table carries one of these discriminators, and it
decides which entity class the row is rebuilt as.
"""
from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _

from .exceptions import UnknownContentTypeError


class ContentType(models.TextChoices):
    ARTICLE = "Article", _("Article")
    AUDIO = "Audio", _("Audio")
    BLOCK = "Block", _("Block")
    COLLECTION = "Collection", _("Collection")
    DOWNLOAD = "Download", _("Download")
    IMAGE = "Image", _("Image")
    STATIC = "Static", _("Static")
    TAG = "Tag", _("Tag")
    VIDEO = "Video", _("Video")


def parse_content_type(value: str | ContentType) -> ContentType:
    """
    Return the ``ContentType`` for ``value`` or raise ``UnknownContentTypeError``.
    """
    try:
        return ContentType(value)
    except ValueError as exc:
        raise UnknownContentTypeError(value) from exc


def is_sanctioned_type(value) -> bool:
    """
    True if ``value`` names one of the known content types.
    """
    return value in ContentType.values
