"""
The content models, for callers that need to make foreign keys to them.

Callers should never create or modify these rows directly; use the functions
in ``folio.api.content`` so that rows, taglinks and files stay consistent.
"""
# These wildcard imports are okay because these modules declare __all__.
# pylint: disable=wildcard-import
from ..apps.content.models import *
