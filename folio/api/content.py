"""
This is the public API for content in Folio.

Code outside of the ``folio.apps.content`` package should import from here.
It re-exports the public functions and classes of the content app: the
handler API, search, criteria, the entity classes, the display helpers and
the license and language vocabularies.
"""
# These wildcard imports are okay because these modules declare __all__.
# pylint: disable=wildcard-import
from ..apps.content.api import *
from ..apps.content.criteria import *
from ..apps.content.display import *
from ..apps.content.entities import *
from ..apps.content.exceptions import ContentWriteError, UnknownContentTypeError
from ..apps.content.search import *
from ..apps.content.types import ContentType
from ..apps.content.vocabularies import *
