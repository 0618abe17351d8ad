"""
Controlled vocabularies for content metadata: licenses and languages.
"""
from __future__ import annotations

from django.utils.translation import gettext_lazy as _

from folio.conf import folio_setting

__all__ = [
    "get_list_of_languages",
    "get_list_of_rights",
]

RIGHTS = {
    1: _("Copyright, all rights reserved."),
    2: _("Creative Commons Attribution."),
    3: _("Creative Commons Attribution-ShareAlike."),
    4: _("Creative Commons Attribution-NoDerivs."),
    5: _("Creative Commons Attribution-NonCommercial."),
    6: _("Creative Commons Attribution-NonCommercial-ShareAlike."),
    7: _("Creative Commons Attribution-NonCommercial-NoDerivs."),
    8: _("GNU General Public License Version 2."),
    9: _("GNU General Public License Version 3."),
    10: _("Public domain."),
}


def get_list_of_rights() -> dict[int, str]:
    return dict(RIGHTS)


def get_list_of_languages() -> dict[str, str]:
    """
    Language code -> name, from ``FOLIO["LANGUAGES"]``.
    """
    return dict(folio_setting("LANGUAGES"))
