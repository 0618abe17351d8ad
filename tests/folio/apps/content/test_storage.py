"""
Tests for uploaded file storage.
"""
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, SuspiciousFileOperation
from django.core.files.base import ContentFile
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from freezegun import freeze_time

from folio.apps.content import storage
from folio.apps.content.mimetypes import AUDIO_MIMETYPES, mimetype_for
from folio.lib.test_utils import TestCase


@freeze_time("2024-01-01")
class StorageTestCase(TestCase):
    """
    Storing and deleting files in the configured backend.
    """

    def test_upload(self):
        name = storage.upload_file(SimpleUploadedFile("Annual Report.PDF", b"data"), "media")
        assert name == "1704067200_annual report.pdf"
        assert storage.get_storage().exists("media/1704067200_annual report.pdf")

    def test_image_upload(self):
        name = storage.upload_file(SimpleUploadedFile("photo.png", b"png"), "image")
        assert name == "1704067200_photo.png"
        assert storage.get_storage().exists("image/1704067200_photo.png")

    def test_refused_extension(self):
        with self.assertLogs("folio.apps.content.storage", level="WARNING"):
            assert storage.upload_file(SimpleUploadedFile("setup.exe", b"MZ"), "media") is None

    def test_mimetype_lookup(self):
        assert mimetype_for("Clip.OGV") == "video/ogg"
        assert mimetype_for("clip.ogv", AUDIO_MIMETYPES) is None
        assert mimetype_for("README") is None

    def test_unknown_kind(self):
        with self.assertRaises(ValueError):
            storage.upload_file(SimpleUploadedFile("photo.png", b"png"), "thumbnails")
        with self.assertRaises(ValueError):
            storage.file_path("thumbnails", "photo.png")

    def test_traversal(self):
        with self.assertRaises(SuspiciousFileOperation):
            storage.file_path("image", "../../settings.py")
        with self.assertRaises(SuspiciousFileOperation):
            storage.delete_file("image/..\\secret.png")

    def test_delete(self):
        storage.get_storage().save("image/old.png", ContentFile(b"png"))
        assert storage.delete_file("image/old.png")
        assert not storage.get_storage().exists("image/old.png")
        with self.assertLogs("folio.apps.content.storage", level="WARNING"):
            assert not storage.delete_file("image/old.png")

    def test_storage_is_cached(self):
        assert storage.get_storage() is storage.get_storage()


class MisconfiguredStorageTestCase(TestCase):
    """
    There is no fallback when FOLIO["MEDIA"] is missing.
    """

    @override_settings(FOLIO={"LANGUAGES": {"en": "English"}})
    def test_missing_media_setting(self):
        with self.assertRaises(ImproperlyConfigured):
            storage.get_storage()

    @override_settings()
    def test_missing_folio_setting(self):
        del settings.FOLIO
        with self.assertRaises(ImproperlyConfigured):
            storage.get_storage()
