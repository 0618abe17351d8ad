"""
Shared test scaffolding for Folio.
"""
import django.test

from .cache import clear_lru_caches


class TestCase(django.test.TestCase):
    """
    Every test starts and ends with empty lru caches.

    The media storage backend is cached per process but built from settings
    that tests override, so a stale instance must never leak between tests.
    """
    def setUp(self) -> None:
        super().setUp()
        clear_lru_caches()
        self.addCleanup(clear_lru_caches)
