"""
Storage models for content.

All content types share one wide table, ``ContentObject``. A row's ``type``
column says which entity class it belongs to, and each entity class uses only
a subset of the columns (see ``entities.py``). Columns a type does not use are
written back as their empty value on every save so that stale data never
lingers after an object changes type.

These models are storage only. Code outside this app should work with the
entity classes through ``folio.api.content`` rather than with these rows
directly; ``rows.py`` is the one place that translates between the two.

Tags are content objects too (type ``Tag``). The tags attached to an object
are kept in ``Taglink`` rows rather than in a column.
"""
from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _

from folio.lib.fields import case_insensitive_char_field, case_insensitive_text_field, manual_date_time_field
from folio.lib.validators import validate_utc_datetime

from .types import ContentType

__all__ = [
    "ContentObject",
    "Taglink",
]


class ContentObjectQuerySet(models.QuerySet):
    """
    Shortcuts for the filters that nearly every listing needs.
    """
    def online(self):
        return self.filter(online=True)

    def of_type(self, content_type: str):
        return self.filter(type=content_type)

    def children_of(self, parent_id: int):
        return self.filter(parent=parent_id)


class ContentObject(models.Model):
    """
    One piece of content of any type.
    """
    objects = ContentObjectQuerySet.as_manager()

    id = models.AutoField(primary_key=True)

    type = models.CharField(
        max_length=20,
        choices=ContentType.choices,
        help_text=_("Which kind of content this row holds."),
    )

    title = case_insensitive_char_field()
    teaser = case_insensitive_text_field(help_text=_("Short HTML summary."))
    description = case_insensitive_text_field(help_text=_("Full HTML body."))

    # File references are names relative to the media storage root.
    media = models.CharField(max_length=255, blank=True, default="")
    format = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text=_("Mimetype of the media file."),
    )
    file_size = models.PositiveIntegerField(default=0, help_text=_("Media file size in bytes."))

    creator = case_insensitive_char_field()
    image = models.CharField(max_length=255, blank=True, default="")
    caption = case_insensitive_char_field()
    date = models.DateField(null=True, blank=True, help_text=_("Publication date."))

    # Id of the parent Collection, 0 for none. Deleting the parent resets
    # its children to 0 instead of cascading.
    parent = models.PositiveIntegerField(default=0)

    language = models.CharField(max_length=16, blank=True, default="")
    rights = models.PositiveSmallIntegerField(null=True, blank=True, default=1)
    publisher = case_insensitive_char_field()
    online = models.BooleanField(default=True)

    submission_time = manual_date_time_field()
    last_updated = models.DateTimeField(null=True, blank=True, validators=[validate_utc_datetime])
    expires_on = models.DateTimeField(null=True, blank=True, validators=[validate_utc_datetime])

    counter = models.PositiveIntegerField(default=0, help_text=_("View count."))
    meta_title = models.CharField(max_length=255, blank=True, default="")
    meta_description = models.CharField(max_length=255, blank=True, default="")
    seo = models.CharField(max_length=255, blank=True, default="", help_text=_("URL slug."))

    class Meta:
        verbose_name = _("Content object")
        verbose_name_plural = _("Content objects")
        indexes = [
            models.Index(fields=["type", "online"], name="folio_content_type_online"),
            models.Index(fields=["date", "submission_time"], name="folio_content_date_subtime"),
            models.Index(fields=["parent"], name="folio_content_parent"),
        ]

    def __repr__(self) -> str:
        """
        Developer-facing representation of a ContentObject.
        """
        return str(self)

    def __str__(self) -> str:
        """
        User-facing string representation of a ContentObject.
        """
        return f"<{self.__class__.__name__}> ({self.id}:{self.type}:{self.title})"


class Taglink(models.Model):
    """
    Content -> Tag association.

    ``content_type`` duplicates the owner's type so that "tags in use by
    Videos" style queries do not have to join back to the content table.
    """
    content = models.ForeignKey(
        ContentObject,
        on_delete=models.CASCADE,
        related_name="taglinks",
    )
    tag = models.ForeignKey(
        ContentObject,
        on_delete=models.CASCADE,
        related_name="tagged",
    )
    content_type = models.CharField(max_length=20, choices=ContentType.choices)

    class Meta:
        constraints = [
            # An object is linked to a given tag at most once.
            models.UniqueConstraint(
                fields=[
                    "content",
                    "tag",
                ],
                name="folio_taglink_uniq_content_tag",
            ),
        ]
        indexes = [
            models.Index(fields=["tag", "content_type"], name="folio_taglink_tag_type"),
        ]

    def __str__(self) -> str:
        return f"<{self.__class__.__name__}> ({self.content_id} -> tag {self.tag_id})"
