"""
Useful utilities for testing multi-category code.
"""
from __future__ import annotations

from typing import Any

from attrs import frozen

from openedx_customfields.core.multicategory.data import SelectableSet
from openedx_customfields.core.multicategory.hierarchy import CategoryDoesNotExist, flatten_tree
from openedx_customfields.core.multicategory.models.utils import parse_category_id


@frozen
class FakeCategory:
    """
    A category node that doesn't live in the database.
    """
    id: int
    name: str
    parent_id: int | None = None


class InMemoryCategoryProvider:
    """
    CategoryProvider over a list of FakeCategory nodes.

    Records the IDs it is asked to look up in `lookups`.
    """

    def __init__(self, nodes: list[FakeCategory]):
        self.lookups: list[Any] = []
        self._by_id = {node.id: node for node in nodes}
        self._children: dict[int | None, list[FakeCategory]] = {}
        for node in nodes:
            self._children.setdefault(node.parent_id, []).append(node)

    def get_category(self, category_id: Any) -> FakeCategory | None:
        self.lookups.append(category_id)
        pk = parse_category_id(category_id)
        if pk is None:
            return None
        return self._by_id.get(pk)

    def get_category_strict(self, category_id: Any) -> FakeCategory:
        category = self.get_category(category_id)
        if category is None:
            raise CategoryDoesNotExist(f"No category {category_id!r}")
        return category

    def get_children(self, category: FakeCategory) -> list[FakeCategory]:
        return self._children.get(category.id, [])

    def list_all_flattened(self, separator: str) -> SelectableSet:
        return flatten_tree(self._children.get(None, []), self.get_children, separator)


def make_chain(depth: int, name: str = "n", first_id: int = 1) -> list[FakeCategory]:
    """
    Returns a linear chain of `depth` FakeCategory nodes, each the parent of the next.
    """
    return [
        FakeCategory(
            id=first_id + i,
            name=name,
            parent_id=first_id + i - 1 if i else None,
        )
        for i in range(depth)
    ]
