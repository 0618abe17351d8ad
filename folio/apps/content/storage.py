"""
Storage of uploaded image and media files.

Files live in a Django storage backend configured by ``FOLIO["MEDIA"]``,
under an ``image/`` or ``media/`` folder. Content rows only hold the bare
file name; ``file_path()`` turns it back into a storage path.
"""
from __future__ import annotations

import logging
import time

from django.core.exceptions import ImproperlyConfigured
from django.core.files.storage import Storage
from django.utils.module_loading import import_string

from folio.conf import folio_setting
from folio.lib.cache import lru_cache
from folio.lib.validators import check_file_name, trim_string

from .mimetypes import mimetype_for

log = logging.getLogger(__name__)

FILE_KINDS = ("image", "media")


@lru_cache(maxsize=None)
def get_storage() -> Storage:
    """
    Return the Storage instance for uploaded content files.

    Raises ``ImproperlyConfigured`` if ``FOLIO["MEDIA"]`` is not set. There is
    no fallback to the default storage, which is served under MEDIA_URL.
    """
    try:
        config = folio_setting("MEDIA")
    except KeyError as exc:
        raise ImproperlyConfigured(
            "FOLIO['MEDIA'] must be configured to store content files."
        ) from exc
    storage_cls = import_string(config["BACKEND"])
    return storage_cls(**config.get("OPTIONS", {}))


def file_path(kind: str, file_name: str) -> str:
    if kind not in FILE_KINDS:
        raise ValueError(f"Unknown file kind {kind!r}")
    return f"{kind}/{check_file_name(file_name)}"


def upload_file(uploaded_file, kind: str) -> str | None:
    """
    Store ``uploaded_file`` (a Django ``File``) and return its stored name.

    The stored name is ``<unix time>_<lower-cased name>``. Returns None if the
    extension is not permitted or the backend fails to write; the reason is
    logged.
    """
    if kind not in FILE_KINDS:
        raise ValueError(f"Unknown file kind {kind!r}")
    name = check_file_name(trim_string(uploaded_file.name))
    name = name.replace("\\", "/").rsplit("/", 1)[-1].lower()
    if mimetype_for(name) is None:
        log.warning("Refusing upload of %r: file type not permitted", name)
        return None

    target = file_path(kind, f"{int(time.time())}_{name}")
    try:
        stored = get_storage().save(target, uploaded_file)
    except OSError:
        log.exception("Could not store uploaded file %r", target)
        return None
    return stored.rsplit("/", 1)[-1]


def delete_file(path: str) -> bool:
    """
    Delete the file at storage ``path``. Returns False if it did not exist.
    """
    check_file_name(path)
    storage = get_storage()
    if not storage.exists(path):
        log.warning("Cannot delete missing file %r", path)
        return False
    storage.delete(path)
    return True
