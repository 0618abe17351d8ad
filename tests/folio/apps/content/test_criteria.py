"""
Tests for listing criteria.
"""
from datetime import date

import ddt  # type: ignore[import]
from django.core.exceptions import ValidationError

from folio.api import content as api
from folio.api.content_models import ContentObject
from folio.lib.test_utils import TestCase


@ddt.ddt
class CriteriaItemTestCase(TestCase):
    """
    Building single conditions.
    """

    def test_bad_column(self):
        with self.assertRaises(ValueError):
            api.CriteriaItem("title; DROP TABLE", "x")
        with self.assertRaises(ValueError):
            api.CriteriaItem("tags", 1)

    def test_bad_operator(self):
        with self.assertRaises(ValueError):
            api.CriteriaItem("title", "x", "IN")

    @ddt.data(
        ("%alpha%", "title__icontains"),
        ("alpha%", "title__istartswith"),
        ("%alpha", "title__iendswith"),
        ("alpha", "title__iexact"),
    )
    @ddt.unpack
    def test_like_lookups(self, pattern, lookup):
        q = api.CriteriaItem("title", pattern, "LIKE").to_q()
        assert q.children == [(lookup, "alpha")]

    def test_not_equal_is_negated(self):
        q = api.CriteriaItem("type", "Tag", "<>").to_q()
        assert q.negated
        assert q.children == [("type__exact", "Tag")]


class CriteriaTestCase(TestCase):
    """
    Applying criteria to the content table.
    """

    @classmethod
    def setUpTestData(cls) -> None:
        for title, content_type, day, online in (
            ("Alpha", "Article", 1, True),
            ("Beta", "Article", 2, False),
            ("Gamma", "Video", 3, True),
            ("Delta", "Static", 4, True),
        ):
            ContentObject.objects.create(
                type=content_type,
                title=title,
                date=date(2024, 1, day),
                online=online,
                submission_time="2024-01-01T00:00:00Z",
            )

    def _titles(self, criteria):
        queryset = criteria.filter_queryset(ContentObject.objects.all())
        return sorted(queryset.values_list("title", flat=True))

    def test_and_binds_tighter_than_or(self):
        """
        type=Article AND online OR type=Video means (Article AND online) OR Video.
        """
        criteria = api.Criteria()
        criteria.add(api.CriteriaItem("type", "Article"))
        criteria.add(api.CriteriaItem("online", True))
        criteria.add(api.CriteriaItem("type", "Video"), "OR")
        assert self._titles(criteria) == ["Alpha", "Gamma"]

    def test_comparisons(self):
        criteria = api.Criteria()
        criteria.add(api.CriteriaItem("date", date(2024, 1, 2), ">="))
        criteria.add(api.CriteriaItem("date", date(2024, 1, 4), "<"))
        assert self._titles(criteria) == ["Beta", "Gamma"]

    def test_like_is_case_insensitive(self):
        criteria = api.Criteria().add(api.CriteriaItem("title", "%ET%", "LIKE"))
        assert self._titles(criteria) == ["Beta"]

    def test_bad_condition(self):
        with self.assertRaises(ValueError):
            api.Criteria().add(api.CriteriaItem("title", "x"), "XOR")
        with self.assertRaises(TypeError):
            api.Criteria().add(("title", "x"))

    def test_unset_type(self):
        criteria = api.Criteria()
        criteria.add(api.CriteriaItem("type", "Article"))
        criteria.add(api.CriteriaItem("online", True))
        criteria.unset_type()
        assert self._titles(criteria) == ["Alpha", "Delta", "Gamma"]

    def test_order_by(self):
        criteria = api.Criteria(order="title", order_type="asc", secondary_order="date")
        assert criteria.order_by() == ["title", "-date"]
        assert api.Criteria().order_by() == []
        with self.assertRaises(ValueError):
            api.Criteria(order="title", order_type="SIDEWAYS").order_by()
        with self.assertRaises(ValueError):
            api.Criteria(order="nonsense").order_by()

    def test_paginate(self):
        queryset = ContentObject.objects.order_by("date")
        page = api.Criteria(limit=2, offset=1).paginate(queryset)
        assert [row.title for row in page] == ["Beta", "Gamma"]
        assert len(api.Criteria(offset=3).paginate(queryset)) == 1
        with self.assertRaises(ValidationError):
            api.Criteria(limit=-1).paginate(queryset)

    def test_copy_is_independent(self):
        criteria = api.Criteria(tags=[1])
        criteria.add(api.CriteriaItem("type", "Article"))
        duplicate = criteria.copy()
        duplicate.unset_type()
        duplicate.tags.append(2)
        assert len(criteria.items) == 1
        assert criteria.tags == [1]
