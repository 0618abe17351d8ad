"""
Query criteria for content listings.

A ``Criteria`` collects conditions (``CriteriaItem``), a tag filter, ordering
and a limit/offset window, then applies them to a ``ContentObject``
queryset. Conditions combine the way they would in SQL: AND binds tighter
than OR, so ``a AND b OR c`` means ``(a AND b) OR c``.
"""
from __future__ import annotations

import copy
from functools import reduce
from operator import and_, or_
from typing import Any, Iterable

from django.db.models import Q, QuerySet

from folio.lib.validators import clean_int

from .models import ContentObject, Taglink

__all__ = [
    "Criteria",
    "CriteriaItem",
]

OPERATORS = ("=", "==", "<", "<=", ">", ">=", "!=", "<>", "LIKE")

_LOOKUPS = {
    "=": "exact",
    "==": "exact",
    "<": "lt",
    "<=": "lte",
    ">": "gt",
    ">=": "gte",
    "!=": "exact",
    "<>": "exact",
}

CONDITIONS = ("AND", "OR")
ORDER_TYPES = ("ASC", "DESC")


def _content_columns() -> set[str]:
    return {field.name for field in ContentObject._meta.concrete_fields}


def _check_column(column: str) -> str:
    if column not in _content_columns():
        raise ValueError(f"Unknown content column {column!r}")
    return column


class CriteriaItem:
    """
    A single ``column <operator> value`` condition.

    ``LIKE`` understands ``%`` at either end of the value: ``"%foo%"``
    matches anywhere, ``"foo%"`` matches a prefix and ``"%foo"`` a suffix.
    LIKE matching is case-insensitive.
    """

    def __init__(self, column: str, value: Any, operator: str = "="):
        if operator not in OPERATORS:
            raise ValueError(f"Illegal operator {operator!r}")
        self.column = _check_column(column)
        self.value = value
        self.operator = operator

    def __repr__(self) -> str:
        return f"CriteriaItem({self.column!r}, {self.value!r}, {self.operator!r})"

    def to_q(self) -> Q:
        if self.operator == "LIKE":
            return self._like_q()
        q = Q(**{f"{self.column}__{_LOOKUPS[self.operator]}": self.value})
        if self.operator in ("!=", "<>"):
            return ~q
        return q

    def _like_q(self) -> Q:
        pattern = str(self.value)
        starts = pattern.startswith("%")
        ends = pattern.endswith("%") and len(pattern) > 1
        term = pattern.strip("%")
        if starts and ends:
            lookup = "icontains"
        elif starts:
            lookup = "iendswith"
        elif ends:
            lookup = "istartswith"
        else:
            lookup = "iexact"
        return Q(**{f"{self.column}__{lookup}": term})


class Criteria:
    """
    Filtering, ordering and paging for a content listing.

    Example::

        criteria = Criteria(order="title", order_type="ASC", limit=10)
        criteria.add(CriteriaItem("type", "Article"))
        criteria.add(CriteriaItem("online", True))
        criteria.tags = [12]
    """

    def __init__(
        self,
        *,
        order: str | None = None,
        order_type: str = "DESC",
        secondary_order: str | None = None,
        secondary_order_type: str = "DESC",
        limit: int = 0,
        offset: int = 0,
        tags: Iterable[int] = (),
    ):
        self.items: list[tuple[str, CriteriaItem]] = []
        self.order = order
        self.order_type = order_type
        self.secondary_order = secondary_order
        self.secondary_order_type = secondary_order_type
        self.limit = limit
        self.offset = offset
        self.tags = list(tags)

    def add(self, item: CriteriaItem, condition: str = "AND") -> Criteria:
        """
        Append ``item``, joined to what came before by ``condition``.

        The condition of the first item is ignored.
        """
        if not isinstance(item, CriteriaItem):
            raise TypeError("Criteria.add() expects a CriteriaItem")
        condition = condition.upper()
        if condition not in CONDITIONS:
            raise ValueError(f"Illegal condition {condition!r}")
        self.items.append((condition, item))
        return self

    def unset_type(self):
        """
        Drop any condition on the ``type`` column.
        """
        self.items = [(condition, item) for condition, item in self.items if item.column != "type"]

    def copy(self) -> Criteria:
        return copy.deepcopy(self)

    def to_q(self) -> Q | None:
        if not self.items:
            return None
        groups: list[list[Q]] = []
        for index, (condition, item) in enumerate(self.items):
            if index == 0 or condition == "OR":
                groups.append([item.to_q()])
            else:
                groups[-1].append(item.to_q())
        return reduce(or_, (reduce(and_, group) for group in groups))

    def filter_queryset(self, queryset: QuerySet) -> QuerySet:
        """
        Apply the conditions and tag filter, but not ordering or paging.
        """
        q = self.to_q()
        if q is not None:
            queryset = queryset.filter(q)
        if self.tags:
            tag_ids = [clean_int(tag_id, field="tags", minimum=1) for tag_id in self.tags]
            queryset = queryset.filter(
                id__in=Taglink.objects.filter(tag_id__in=tag_ids).values("content_id")
            )
        return queryset

    def order_by(self) -> list[str]:
        """
        ``order_by()`` arguments, or an empty list if no order was set.
        """
        ordering = []
        for column, order_type in (
            (self.order, self.order_type),
            (self.secondary_order, self.secondary_order_type),
        ):
            if not column:
                continue
            _check_column(column)
            order_type = order_type.upper()
            if order_type not in ORDER_TYPES:
                raise ValueError(f"Illegal order type {order_type!r}")
            ordering.append(f"-{column}" if order_type == "DESC" else column)
        return ordering

    def paginate(self, queryset: QuerySet) -> QuerySet:
        limit = clean_int(self.limit, field="limit")
        offset = clean_int(self.offset, field="offset")
        if limit:
            return queryset[offset:offset + limit]
        if offset:
            return queryset[offset:]
        return queryset
