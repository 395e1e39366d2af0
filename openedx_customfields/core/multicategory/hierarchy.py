"""
Category hierarchy access, and resolution of the categories a field allows.

The category tree is owned by whoever provides it; this module only reads it
through a CategoryProvider. DjangoCategoryProvider reads the Category model
and is used whenever no other provider is passed in.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Iterable, Sequence

from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _
from typing_extensions import Protocol

from .data import CategoryNode, SelectableSet
from .models import Category
from .models.utils import PATH_SEPARATOR, is_unrestricted, parse_category_id

log = logging.getLogger(__name__)

# Raised by CategoryProvider.get_category_strict()
CategoryDoesNotExist = Category.DoesNotExist


class CategoryProvider(Protocol):
    """
    Read-only access to a tree of categories.
    """

    def get_category(self, category_id: Any) -> CategoryNode | None:
        """
        Returns the category with the given ID, or None if there is no such category.

        Must not raise for missing or malformed IDs.
        """

    def get_category_strict(self, category_id: Any) -> CategoryNode:
        """
        Returns the category with the given ID, or raises CategoryDoesNotExist.
        """

    def get_children(self, category: CategoryNode) -> Sequence[CategoryNode]:
        """
        Returns the direct children of the given category, in display order.
        """

    def list_all_flattened(self, separator: str) -> SelectableSet:
        """
        Returns every category in the tree, mapped to its full qualified label.
        """


class DjangoCategoryProvider:
    """
    CategoryProvider backed by the Category model.
    """

    def get_category(self, category_id: Any) -> Category | None:
        pk = parse_category_id(category_id)
        if pk is None:
            return None
        return Category.objects.filter(pk=pk).first()

    def get_category_strict(self, category_id: Any) -> Category:
        pk = parse_category_id(category_id)
        if pk is None:
            raise CategoryDoesNotExist(f"Invalid category ID: {category_id!r}")
        return Category.objects.get(pk=pk)

    def get_children(self, category: CategoryNode) -> list[Category]:
        return list(Category.objects.filter(parent_id=category.id).order_by("sortorder", "id"))

    def list_all_flattened(self, separator: str = PATH_SEPARATOR) -> SelectableSet:
        """
        Loads the whole tree with a single query and flattens it in tree order.

        Categories that can't be reached from a top-level category (a parent
        loop saved without validation) are listed last, labelled from the
        first of them that is visited.
        """
        categories = list(Category.objects.order_by("sortorder", "id"))
        children_by_parent: dict[int | None, list[Category]] = defaultdict(list)
        for category in categories:
            children_by_parent[category.parent_id].append(category)

        def get_children(category: CategoryNode) -> list[Category]:
            return children_by_parent.get(category.id, [])

        selectable = flatten_tree(children_by_parent[None], get_children, separator)
        unreachable = [category for category in categories if category.id not in selectable]
        if unreachable:
            log.warning(f"{len(unreachable)} categories are not under any top-level category; check for parent loops.")
            selectable.update(flatten_tree(unreachable, get_children, separator))
        return selectable


def get_default_provider() -> CategoryProvider:
    """
    Returns the provider used when callers don't supply one.
    """
    return DjangoCategoryProvider()


def flatten_tree(
    roots: Iterable[CategoryNode],
    get_children: Callable[[CategoryNode], Sequence[CategoryNode]],
    separator: str = PATH_SEPARATOR,
) -> SelectableSet:
    """
    Walks the trees under `roots` depth-first and returns {id: qualified label}.

    Each category comes before its children, and siblings keep the order
    get_children() returns them in. Labels are prefixed with the names of the
    ancestors visited from the given roots, so a root's label is just its name.

    Uses an explicit stack, so the depth of the tree is not limited by Python's
    recursion limit. A category that has already been visited is not visited again.
    """
    selectable: SelectableSet = {}
    stack = [(root, "") for root in reversed(list(roots))]
    while stack:
        category, prefix = stack.pop()
        if category.id in selectable:
            continue
        selectable[category.id] = prefix + category.name
        child_prefix = prefix + category.name + separator
        stack.extend((child, child_prefix) for child in reversed(list(get_children(category))))
    return selectable


def resolve_selectable(
    restriction_root_id: Any,
    provider: CategoryProvider | None = None,
) -> SelectableSet:
    """
    Returns the categories that may be selected, given a field's parent category restriction.

    With no restriction (None, "", or 0 as an int or as text), every category
    is selectable, labelled with its full path from the top of the tree.

    With a restriction, the restricting category and all of its descendants are
    selectable, labelled with their path from the restricting category. If the
    restricting category no longer exists, nothing is selectable.
    """
    provider = provider or get_default_provider()
    if is_unrestricted(restriction_root_id):
        return provider.list_all_flattened(PATH_SEPARATOR)

    root = provider.get_category(restriction_root_id)
    if root is None:
        log.info(f"Parent category {restriction_root_id} not found; no categories are selectable.")
        return {}

    return flatten_tree([root], provider.get_children, PATH_SEPARATOR)


def validate_parent_category(
    parent_category_id: Any,
    provider: CategoryProvider | None = None,
) -> CategoryNode | None:
    """
    Checks a parent category restriction entered when configuring a field.

    Returns the restricting category, or None if the field is unrestricted.
    Raises ValidationError if the ID doesn't match an existing category.
    """
    if is_unrestricted(parent_category_id):
        return None
    provider = provider or get_default_provider()
    try:
        return provider.get_category_strict(parent_category_id)
    except CategoryDoesNotExist as e:
        raise ValidationError(
            _("The selected parent category does not exist."),
            code="invalid_category",
        ) from e
