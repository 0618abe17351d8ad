"""
Exceptions for content storage
"""
from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured
from django.utils.translation import gettext as _


class UnknownContentTypeError(ImproperlyConfigured):
    """
    Raised for a type discriminator that is not one of the sanctioned types.

    This is a configuration/whitelist violation rather than bad user input: a
    row or request carrying an unknown type should never reach the handler.
    """

    def __init__(self, content_type: object = ""):
        super().__init__()
        self.content_type = content_type
        self.message = _("Illegal content type: {content_type!r}").format(content_type=content_type)

    def __str__(self):
        return str(self.message)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)})"


class ContentWriteError(RuntimeError):
    """
    Raised when the database accepted a write but the result is unusable,
    e.g. an insert that did not produce a primary key.
    """
