"""
Django metadata for the Content Django application.
"""
from django.apps import AppConfig


class ContentConfig(AppConfig):
    """
    Configuration for the Content Django application.
    """

    name = "folio.apps.content"
    verbose_name = "Folio > Content"
    default_auto_field = "django.db.models.BigAutoField"
    label = "folio_content"
