"""
Tests for the taglink manager.
"""
from django.core.exceptions import ValidationError

from folio.api import content as api
from folio.api.content_models import Taglink
from folio.apps.content import taglinks
from folio.lib.test_utils import TestCase


class TaglinksTestCase(TestCase):
    """
    Writing and reading links between content and Tags.
    """

    @classmethod
    def setUpTestData(cls) -> None:
        cls.news = api.insert(api.Tag(title="News"))
        cls.sport = api.insert(api.Tag(title="Sport"))
        cls.article = api.insert(api.Article(title="Match report"))
        cls.video = api.insert(api.Video(title="Highlights"))

    def test_insert(self):
        links = taglinks.insert_taglinks(self.article.id, "Article", [self.news.id, str(self.sport.id), self.news.id])
        assert len(links) == 2
        assert taglinks.get_tag_ids(self.article.id) == [self.news.id, self.sport.id]

    def test_nothing_to_insert(self):
        assert taglinks.insert_taglinks(self.article.id, "Article", []) == []

    def test_validation_happens_before_writing(self):
        with self.assertRaises(ValidationError):
            taglinks.insert_taglinks(self.article.id, "Article", [self.news.id, "x"])
        with self.assertRaises(ValidationError):
            taglinks.insert_taglinks(self.article.id, "Article", [self.news.id, self.video.id])
        with self.assertRaises(ValidationError):
            taglinks.insert_taglinks(0, "Article", [self.news.id])
        with self.assertRaises(api.UnknownContentTypeError):
            taglinks.insert_taglinks(self.article.id, "Podcast", [self.news.id])
        assert not Taglink.objects.exists()

    def test_tags_cannot_be_tagged(self):
        with self.assertRaises(ValidationError):
            taglinks.insert_taglinks(self.news.id, "Tag", [self.sport.id])

    def test_update_replaces_the_set(self):
        taglinks.insert_taglinks(self.article.id, "Article", [self.news.id])
        taglinks.update_taglinks(self.article.id, "Article", [self.sport.id])
        assert taglinks.get_tag_ids(self.article.id) == [self.sport.id]
        assert taglinks.update_taglinks(self.article.id, "Article", []) == []
        assert taglinks.get_tag_ids(self.article.id) == []

    def test_update_with_same_set_is_stable(self):
        """
        Writing the same tags twice leaves exactly that set.
        """
        for _attempt in range(2):
            taglinks.update_taglinks(self.article.id, "Article", [self.news.id, self.sport.id])
            assert taglinks.get_tag_ids(self.article.id) == [self.news.id, self.sport.id]
        assert Taglink.objects.filter(content_id=self.article.id).count() == 2

    def test_delete(self):
        taglinks.insert_taglinks(self.article.id, "Article", [self.news.id, self.sport.id])
        taglinks.insert_taglinks(self.video.id, "Video", [self.news.id])
        assert taglinks.delete_taglinks(self.news.id, "Tag") == 2
        assert taglinks.get_tag_ids(self.article.id) == [self.sport.id]
        assert taglinks.delete_taglinks(self.article.id, "Article") == 1
        assert not Taglink.objects.exists()

    def test_get_tag_ids_for(self):
        taglinks.insert_taglinks(self.article.id, "Article", [self.sport.id, self.news.id])
        taglinks.insert_taglinks(self.video.id, "Video", [self.news.id])
        with self.assertNumQueries(1):
            tag_map = taglinks.get_tag_ids_for([self.article.id, self.video.id, self.news.id])
        assert tag_map[self.article.id] == [self.sport.id, self.news.id]
        assert tag_map[self.video.id] == [self.news.id]
        assert tag_map[self.news.id] == []
