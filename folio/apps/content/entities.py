"""
Content entities: the in-memory, typed view of a content row.

There is one class per content type. All of them share the same superset of
fields, but each type can "zero" the fields it does not use. A zeroed field
does not exist on the instance at all: reading it raises ``AttributeError``
(so ``hasattr()`` is False), its setter refuses to run, and it is left out of
``get_property_whitelist()`` and ``to_dict()``.

Fields are read-only attributes. Values are changed through the typed
``set_<field>()`` methods, which clean and validate their input and raise
``ValidationError`` for bad values. File names containing a directory
traversal or null byte raise ``SuspiciousFileOperation`` instead, since they
are never a plain mistake.

Entities never touch the database. ``rows.py`` maps them to and from
``ContentObject`` rows, and the functions in ``api.py`` persist them.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, ClassVar, Iterable, Mapping

from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from django.utils.translation import gettext_lazy as _

from folio.conf import SITE_URL_PLACEHOLDER, folio_setting
from folio.lib.html import filter_html
from folio.lib.validators import (
    check_file_name,
    clean_bool,
    clean_int,
    is_utf8,
    trim_string,
    validate_utc_datetime,
)

from .mimetypes import (
    AUDIO_MIMETYPES,
    IMAGE_MIMETYPES,
    PERMITTED_UPLOAD_MIMETYPES,
    VIDEO_MIMETYPES,
    mimetype_for,
)
from .types import ContentType, parse_content_type
from .vocabularies import get_list_of_languages, get_list_of_rights

log = logging.getLogger(__name__)

__all__ = [
    "ContentEntity",
    "Article",
    "Audio",
    "Block",
    "Collection",
    "Download",
    "Image",
    "Static",
    "Tag",
    "Video",
    "ENTITY_CLASSES",
    "FIELD_NAMES",
    "create_entity",
    "entity_from_dict",
]

# Every field a content entity can have, in column order. "tags" is the only
# one that is not a column on the content table.
FIELD_NAMES = (
    "id",
    "type",
    "title",
    "teaser",
    "description",
    "media",
    "format",
    "file_size",
    "creator",
    "image",
    "caption",
    "date",
    "parent",
    "language",
    "rights",
    "publisher",
    "tags",
    "online",
    "submission_time",
    "last_updated",
    "expires_on",
    "counter",
    "meta_title",
    "meta_description",
    "seo",
)

# Class-level metadata that is never stored.
DERIVED_FIELDS = ("handler", "template", "module", "icon")

# Rich text fields, filtered on input and not escaped for display.
HTML_FIELDS = ("teaser", "description", "icon")

FILE_KINDS = ("image", "media")

DATE_FORMAT = "%Y-%m-%d"


def _parse_date(text: str) -> date | None:
    """
    Parse exactly "YYYY-MM-DD", or return None.
    """
    if len(text) != 10:
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def _initial_values() -> dict[str, Any]:
    return {
        "id": 0,
        "type": "",
        "title": "",
        "teaser": "",
        "description": "",
        "media": "",
        "format": "",
        "file_size": 0,
        "creator": "",
        "image": "",
        "caption": "",
        "date": None,
        "parent": 0,
        "language": "",
        "rights": 1,
        "publisher": "",
        "tags": [],
        "online": True,
        "submission_time": None,
        "last_updated": None,
        "expires_on": None,
        "counter": 0,
        "meta_title": "",
        "meta_description": "",
        "seo": "",
    }


class ContentField:
    """
    Read-only accessor for one entity field.

    Raises ``AttributeError`` when the field is zeroed on the instance's type.
    """

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance._values[self.name]
        except KeyError:
            raise AttributeError(
                f"{instance.__class__.__name__} has no {self.name!r} property"
            ) from None

    def __set__(self, instance, value):
        raise AttributeError(f"Use set_{self.name}() to change {self.name!r}")


class ContentEntity:
    """
    Base class for all content types.

    Subclasses set ``content_type`` and may list ``zeroed_properties``.
    Instances can be built empty or with keyword arguments, which go through
    the typed setters: ``Article(title="Hello", tags=[3, 7])``.
    """
    content_type: ClassVar[ContentType]
    zeroed_properties: ClassVar[tuple[str, ...]] = ()
    # Media file extension -> mimetype accepted by this type.
    allowed_media_mimetypes: ClassVar[Mapping[str, str]] = PERMITTED_UPLOAD_MIMETYPES

    handler = "content"
    template = ""
    module = ""
    icon = ""

    id = ContentField()
    type = ContentField()
    title = ContentField()
    teaser = ContentField()
    description = ContentField()
    media = ContentField()
    format = ContentField()
    file_size = ContentField()
    creator = ContentField()
    image = ContentField()
    caption = ContentField()
    date = ContentField()
    parent = ContentField()
    language = ContentField()
    rights = ContentField()
    publisher = ContentField()
    tags = ContentField()
    online = ContentField()
    submission_time = ContentField()
    last_updated = ContentField()
    expires_on = ContentField()
    counter = ContentField()
    meta_title = ContentField()
    meta_description = ContentField()
    seo = ContentField()

    def __init__(self, **properties):
        initial = _initial_values()
        self._values: dict[str, Any] = {
            name: initial[name] for name in FIELD_NAMES if name not in self.zeroed_properties
        }
        self._values["type"] = self.content_type.value

        # Uploaded files waiting to be stored, keyed by "image" / "media".
        self.pending_uploads: dict[str, Any] = {}
        # File kinds whose current file the editor asked to remove.
        self.delete_requests: set[str] = set()

        for name, value in properties.items():
            self._setter(name)(value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}> ({self._values['id']}:{self._values.get('title', '')})"

    def _setter(self, name: str):
        setter = getattr(self, f"set_{name}", None)
        if setter is None:
            raise AttributeError(f"{self.__class__.__name__} has no setter for {name!r}")
        return setter

    def _set(self, name: str, value: Any):
        if name not in self._values:
            raise AttributeError(
                f"{self.__class__.__name__} does not use the {name!r} property"
            )
        self._values[name] = value

    def load_stored_values(self, values: Mapping[str, Any]):
        """
        Fill in values read back from storage, without validation.

        Names this type does not use are ignored.
        """
        for name, value in values.items():
            if name in self._values and name != "type":
                self._values[name] = value

    # -- Introspection ----------------------------------------------------

    @classmethod
    def get_list_of_zeroed_properties(cls) -> list[str]:
        return list(cls.zeroed_properties)

    def get_property_whitelist(self) -> list[str]:
        """
        Names of the fields this type uses, derived metadata excluded.
        """
        return list(self._values)

    def to_dict(self) -> dict[str, Any]:
        """
        Persistent values by field name. Tags are stored separately and are
        left out.
        """
        return {name: value for name, value in self._values.items() if name != "tags"}

    def is_valid_media(self) -> bool:
        """
        True if the attached media's format can be played/shown by this type.
        """
        if not self._values.get("media"):
            return False
        return self._values.get("format") in self.allowed_media_mimetypes.values()

    # -- Setters ----------------------------------------------------------

    def set_property(self, name: str, value: Any):
        """
        Set ``name`` through its typed setter.

        Does nothing for names this type does not use, including zeroed
        fields and names that are not fields at all.
        """
        if name not in self._values:
            return
        setter = getattr(self, f"set_{name}", None)
        if setter is not None:
            setter(value)

    def set_id(self, value):
        value = clean_int(value, field="id")
        if value and self._values.get("parent") == value:
            raise ValidationError(_("An object cannot be its own parent."), code="self_parent")
        self._set("id", value)

    def set_title(self, value):
        self._set("title", trim_string(value))

    def set_teaser(self, value):
        self._set("teaser", filter_html(trim_string(value)))

    def set_description(self, value):
        self._set("description", filter_html(trim_string(value)))

    def set_icon(self, value):
        self.icon = filter_html(trim_string(value))

    def set_creator(self, value):
        self._set("creator", trim_string(value))

    def set_caption(self, value):
        self._set("caption", trim_string(value))

    def set_publisher(self, value):
        self._set("publisher", trim_string(value))

    def set_meta_title(self, value):
        self._set("meta_title", trim_string(value))

    def set_meta_description(self, value):
        self._set("meta_description", trim_string(value))

    def set_seo(self, value):
        value = "" if value is None else str(value)
        if not is_utf8(value):
            raise ValidationError(_("SEO string is not valid UTF-8."), code="invalid")
        self._set("seo", trim_string(value).replace(" ", "-"))

    def set_date(self, value):
        """
        Accepts a ``date``/``datetime`` or a "YYYY-MM-DD" string. Anything
        unparseable is replaced by today's date. ``None`` clears the date.
        """
        if value is None:
            self._set("date", None)
            return
        if isinstance(value, datetime):
            value = value.date()
        if not isinstance(value, date):
            text = trim_string(value)
            value = _parse_date(text)
            if value is None:
                log.warning("Unparseable date %r on %r, using today", text, self)
                value = timezone.localdate()
        self._set("date", value)

    def set_parent(self, value):
        value = clean_int(value, field="parent")
        own_id = self._values["id"]
        if value and own_id and value == own_id:
            raise ValidationError(_("An object cannot be its own parent."), code="self_parent")
        self._set("parent", value)

    def set_language(self, value):
        value = trim_string(value)
        if value and value not in get_list_of_languages():
            raise ValidationError(
                _("Unknown language %(language)s."), params={"language": value}, code="invalid",
            )
        self._set("language", value)

    def set_rights(self, value):
        value = clean_int(value, field="rights", minimum=1)
        if value not in get_list_of_rights():
            raise ValidationError(
                _("Unknown license %(rights)s."), params={"rights": value}, code="invalid",
            )
        self._set("rights", value)

    def set_online(self, value):
        self._set("online", clean_bool(value, field="online"))

    def set_counter(self, value):
        self._set("counter", clean_int(value, field="counter"))

    def set_file_size(self, value):
        self._set("file_size", clean_int(value, field="file_size"))

    def set_format(self, value):
        value = trim_string(value).lower()
        if value and value not in PERMITTED_UPLOAD_MIMETYPES.values():
            raise ValidationError(
                _("Illegal mimetype %(format)s."), params={"format": value}, code="invalid",
            )
        self._set("format", value)

    def set_image(self, value):
        """
        Set the image file name. Only gif, jpg and png are accepted; anything
        else clears the image and raises ``ValidationError``.
        """
        value = check_file_name("" if value is None else str(value))
        value = trim_string(value)
        if value and mimetype_for(value, IMAGE_MIMETYPES) is None:
            self._set("image", "")
            raise ValidationError(
                _("Illegal image file type: %(image)s."), params={"image": value}, code="invalid",
            )
        self._set("image", value)

    def set_media(self, value):
        """
        Set the media file name.

        A file type this content type does not accept clears media, format and
        file_size together.
        """
        value = check_file_name("" if value is None else str(value))
        value = trim_string(value)
        if value and mimetype_for(value, self.allowed_media_mimetypes) is None:
            log.warning("Rejected media file %r for %s", value, self.__class__.__name__)
            self._set("media", "")
            self._set("format", "")
            self._set("file_size", 0)
            return
        self._set("media", value)

    def set_tags(self, value: Iterable | None):
        tags: list[int] = []
        for tag_id in value or ():
            tag_id = clean_int(tag_id, field="tags", minimum=1)
            if tag_id not in tags:
                tags.append(tag_id)
        self._set("tags", tags)

    def set_submission_time(self, value):
        self._set("submission_time", self._clean_datetime(value, required=True))

    def set_last_updated(self, value):
        self._set("last_updated", self._clean_datetime(value))

    def set_expires_on(self, value):
        self._set("expires_on", self._clean_datetime(value))

    def set_template(self, value):
        self.template = self._clean_identifier(value)

    def set_module(self, value):
        self.module = self._clean_identifier(value)

    @staticmethod
    def _clean_datetime(value, required=False):
        if value in (None, ""):
            if required:
                raise ValidationError(_("A timestamp is required."), code="required")
            return None
        if isinstance(value, str):
            parsed = parse_datetime(value.strip())
            if parsed is None:
                raise ValidationError(
                    _("Unparseable timestamp %(value)s."), params={"value": value}, code="invalid",
                )
            value = parsed
        if not isinstance(value, datetime):
            raise ValidationError(_("Expected a datetime."), code="invalid")
        validate_utc_datetime(value)
        return value

    @staticmethod
    def _clean_identifier(value):
        value = trim_string(value)
        if not value.replace("_", "").isalnum() or not value.isascii():
            raise ValidationError(
                _("%(value)s must be alphanumeric."), params={"value": value}, code="invalid",
            )
        return value

    # -- Files ------------------------------------------------------------

    def attach_file(self, kind: str, uploaded_file):
        """
        Queue an uploaded file (a Django ``File``) to be stored on save.

        The file name goes through the usual image/media checks first. Media
        uploads also set ``format`` and ``file_size``.
        """
        if kind not in FILE_KINDS:
            raise ValueError(f"Unknown file kind {kind!r}")
        name = trim_string(uploaded_file.name)
        if not name:
            return
        if kind == "image":
            self.set_image(name)
        else:
            self.set_media(name)
            if not self._values["media"]:
                return
            self.set_format(mimetype_for(name) or "")
            self.set_file_size(uploaded_file.size or 0)
        self.pending_uploads[kind] = uploaded_file

    def request_file_deletion(self, kind: str):
        """
        Ask for the currently saved image/media file to be removed on update.
        """
        if kind not in FILE_KINDS:
            raise ValueError(f"Unknown file kind {kind!r}")
        if kind in self._values:
            self.delete_requests.add(kind)

    # -- Form ingestion ---------------------------------------------------

    def load_properties_from_dict(self, data: Mapping, files: Mapping | None = None, live_urls: bool = True):
        """
        Populate this entity from untrusted form data.

        Every field this type uses that is present in ``data`` is set through
        its setter. Validation errors are collected and raised together as
        one ``ValidationError`` keyed by field name, after all other fields
        have been applied.

        * An empty or missing ``date`` defaults to today.
        * ``live_urls=True`` swaps the site URL in teaser/description for a
          placeholder (for storage); ``False`` does the reverse.
        * ``delete_image`` / ``delete_media`` (or ``deleteImage`` /
          ``deleteMedia``) request removal of the saved file.
        * ``files`` (e.g. ``request.FILES``) may hold "image" and "media"
          uploads.
        """
        errors: dict[str, list] = {}
        whitelist = self.get_property_whitelist()

        for name in whitelist:
            if name == "type" or name not in data:
                continue
            if name == "date" and not data[name]:
                continue
            if name == "tags" and hasattr(data, "getlist"):
                value = data.getlist("tags")
            else:
                value = data[name]
            if name in ("teaser", "description") and value:
                value = convert_base_url(str(value), live_urls)
            try:
                self._setter(name)(value)
            except ValidationError as exc:
                errors[name] = exc.messages

        if "date" in whitelist and not data.get("date"):
            self.set_date(timezone.localdate())

        for kind in FILE_KINDS:
            if data.get(f"delete_{kind}") or data.get(f"delete{kind.capitalize()}"):
                self.request_file_deletion(kind)
            uploaded = files.get(kind) if files else None
            if uploaded is not None and kind in whitelist:
                try:
                    self.attach_file(kind, uploaded)
                except ValidationError as exc:
                    errors.setdefault(kind, []).extend(exc.messages)

        if errors:
            raise ValidationError(errors)


def convert_base_url(html: str, live_urls: bool = True) -> str:
    """
    Swap the site URL for a placeholder (``live_urls=True``) or back again.
    """
    site_url = folio_setting("SITE_URL")
    if not site_url:
        return html
    if live_urls:
        return html.replace(site_url, SITE_URL_PLACEHOLDER)
    return html.replace(SITE_URL_PLACEHOLDER, site_url)


class Article(ContentEntity):
    content_type = ContentType.ARTICLE
    template = "article"
    module = "articles"
    icon = '<i class="fas fa-file-alt"></i>'


class Audio(ContentEntity):
    content_type = ContentType.AUDIO
    allowed_media_mimetypes = AUDIO_MIMETYPES
    template = "audio"
    module = "soundtracks"
    icon = '<i class="fas fa-headphones"></i>'


class Block(ContentEntity):
    """
    A fragment of content placed in page layouts, never listed on its own.
    """
    content_type = ContentType.BLOCK
    zeroed_properties = (
        "teaser",
        "creator",
        "parent",
        "rights",
        "publisher",
        "counter",
        "meta_title",
        "meta_description",
        "seo",
    )
    handler = "block"
    template = "block"
    module = "blocks"
    icon = '<i class="fas fa-cube"></i>'


class Collection(ContentEntity):
    """
    Parent of other content objects, which point at it through ``parent``.
    """
    content_type = ContentType.COLLECTION
    handler = "collection"
    template = "collection"
    module = "collections"
    icon = '<i class="fas fa-folder-open"></i>'


class Download(ContentEntity):
    content_type = ContentType.DOWNLOAD
    template = "download"
    module = "downloads"
    icon = '<i class="fas fa-file-download"></i>'


class Image(ContentEntity):
    content_type = ContentType.IMAGE
    allowed_media_mimetypes = IMAGE_MIMETYPES
    template = "image"
    module = "images"
    icon = '<i class="fas fa-image"></i>'


class Static(ContentEntity):
    content_type = ContentType.STATIC
    template = "static"
    module = "static"
    icon = '<i class="fas fa-file"></i>'


class Tag(ContentEntity):
    """
    A label other objects link to. Tags cannot carry tags themselves.
    """
    content_type = ContentType.TAG
    zeroed_properties = (
        "creator",
        "language",
        "rights",
        "publisher",
        "tags",
    )
    handler = "tag"
    template = "tag"
    module = "tags"
    icon = '<i class="fas fa-tag"></i>'


class Video(ContentEntity):
    content_type = ContentType.VIDEO
    allowed_media_mimetypes = VIDEO_MIMETYPES
    template = "video"
    module = "videos"
    icon = '<i class="fas fa-film"></i>'


ENTITY_CLASSES: dict[ContentType, type[ContentEntity]] = {
    cls.content_type: cls
    for cls in (Article, Audio, Block, Collection, Download, Image, Static, Tag, Video)
}


def create_entity(content_type: str | ContentType, **properties) -> ContentEntity:
    """
    Build an empty entity of ``content_type``.

    Raises ``UnknownContentTypeError`` for anything that is not a known type.
    """
    return ENTITY_CLASSES[parse_content_type(content_type)](**properties)


def entity_from_dict(data: Mapping, files: Mapping | None = None, live_urls: bool = True) -> ContentEntity:
    """
    Build an entity of ``data["type"]`` and load the rest of ``data`` into it.
    """
    entity = create_entity(data.get("type", ""))
    entity.load_properties_from_dict(data, files=files, live_urls=live_urls)
    return entity
