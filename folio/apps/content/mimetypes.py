"""
File extension -> mimetype whitelists.

Uploads are accepted by extension only; the mimetype stored in the ``format``
column is looked up here rather than trusted from the client.
"""
from __future__ import annotations

from folio.lib.validators import file_extension

IMAGE_MIMETYPES: dict[str, str] = {
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "png": "image/png",
}

AUDIO_MIMETYPES: dict[str, str] = {
    "mp3": "audio/mpeg",
    "oga": "audio/ogg",
    "ogg": "audio/ogg",
    "wav": "audio/x-wav",
}

# Ogg video must use .ogv; .ogg is treated as audio.
VIDEO_MIMETYPES: dict[str, str] = {
    "mp4": "video/mp4",
    "ogv": "video/ogg",
    "webm": "video/webm",
}

PERMITTED_UPLOAD_MIMETYPES: dict[str, str] = {
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pdf": "application/pdf",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "odt": "application/vnd.oasis.opendocument.text",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "odp": "application/vnd.oasis.opendocument.presentation",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    **IMAGE_MIMETYPES,
    **AUDIO_MIMETYPES,
    **VIDEO_MIMETYPES,
    "zip": "application/zip",
    "gz": "application/x-gzip",
    "tar": "application/x-tar",
}


def mimetype_for(file_name: str, allowed: dict[str, str] | None = None) -> str | None:
    """
    Mimetype for ``file_name``'s extension, or None if it isn't in ``allowed``.

    ``allowed`` defaults to every permitted upload type.
    """
    if allowed is None:
        allowed = PERMITTED_UPLOAD_MIMETYPES
    return allowed.get(file_extension(file_name))
