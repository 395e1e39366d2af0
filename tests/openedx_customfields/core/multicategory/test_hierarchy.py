"""
Test the category hierarchy provider and the selectable categories resolver
"""
from __future__ import annotations

import sys

import ddt  # type: ignore[import]
import pytest
from django.core.exceptions import ValidationError
from django.test.testcases import TestCase

from openedx_customfields.core.multicategory.hierarchy import (
    CategoryDoesNotExist,
    DjangoCategoryProvider,
    flatten_tree,
    resolve_selectable,
    validate_parent_category,
)
from openedx_customfields.core.multicategory.models import Category

from .test_models import TestCategoryFieldMixin
from .utils import FakeCategory, InMemoryCategoryProvider, make_chain


@ddt.ddt
class TestDjangoCategoryProvider(TestCategoryFieldMixin, TestCase):
    """
    Test the Category model backed provider.
    """

    def setUp(self):
        super().setUp()
        self.provider = DjangoCategoryProvider()

    @ddt.data(
        "Science",
        "Genetics",
    )
    def test_get_category(self, name):
        category = getattr(self, name.lower())
        assert self.provider.get_category(category.id) == category
        assert self.provider.get_category(str(category.id)) == category

    @ddt.data(
        123456,
        "123456",
        None,
        "",
        "abc",
        "-1",
        -1,
        True,
        1.0,
        "9" * 40,
        2**63,
    )
    def test_get_category_missing(self, category_id):
        assert self.provider.get_category(category_id) is None

    def test_get_category_strict(self):
        assert self.provider.get_category_strict(self.biology.id) == self.biology
        with pytest.raises(CategoryDoesNotExist):
            self.provider.get_category_strict(123456)
        with pytest.raises(CategoryDoesNotExist):
            self.provider.get_category_strict("abc")

    def test_get_children(self):
        assert self.provider.get_children(self.science) == [self.biology, self.chemistry]
        assert self.provider.get_children(self.humanities) == [self.philosophy, self.history]
        assert not self.provider.get_children(self.languages)

    def test_list_all_flattened(self):
        with self.assertNumQueries(1):
            selectable = self.provider.list_all_flattened(" / ")
        assert list(selectable.items()) == [
            (self.science.id, "Science"),
            (self.biology.id, "Science / Biology"),
            (self.genetics.id, "Science / Biology / Genetics"),
            (self.ecology.id, "Science / Biology / Ecology"),
            (self.chemistry.id, "Science / Chemistry"),
            (self.humanities.id, "Humanities"),
            (self.philosophy.id, "Humanities / Philosophy"),
            (self.history.id, "Humanities / History"),
            (self.languages.id, "Languages"),
        ]

    def test_list_all_flattened_separator(self):
        selectable = self.provider.list_all_flattened("::")
        assert selectable[self.genetics.id] == "Science::Biology::Genetics"

    def test_list_all_flattened_saved_loop(self):
        category_a = Category.objects.create(name="A")
        category_b = Category.objects.create(name="B", parent=category_a)
        Category.objects.filter(pk=category_a.pk).update(parent=category_b)
        with self.assertLogs("openedx_customfields.core.multicategory.hierarchy", level="WARNING"):
            selectable = self.provider.list_all_flattened(" / ")
        assert len(selectable) == 11
        assert selectable[category_a.id] == "A"
        assert selectable[category_b.id] == "A / B"
        assert list(selectable)[-2:] == [category_a.id, category_b.id]


@ddt.ddt
class TestResolveSelectable(TestCategoryFieldMixin, TestCase):
    """
    Test resolving the categories that a field allows.
    """

    @ddt.data(0, None, "", "0", " 0 ")
    def test_unrestricted(self, restriction):
        selectable = resolve_selectable(restriction)
        assert len(selectable) == 9
        # Categories without children are selectable too
        assert selectable[self.languages.id] == "Languages"
        assert selectable[self.genetics.id] == "Science / Biology / Genetics"

    def test_restricted_to_root(self):
        selectable = resolve_selectable(self.science.id)
        assert list(selectable.items()) == [
            (self.science.id, "Science"),
            (self.biology.id, "Science / Biology"),
            (self.genetics.id, "Science / Biology / Genetics"),
            (self.ecology.id, "Science / Biology / Ecology"),
            (self.chemistry.id, "Science / Chemistry"),
        ]

    def test_restricted_labels_start_at_restriction(self):
        selectable = resolve_selectable(self.biology.id)
        assert list(selectable.values()) == [
            "Biology",
            "Biology / Genetics",
            "Biology / Ecology",
        ]

    def test_restricted_to_leaf(self):
        assert resolve_selectable(self.languages.id) == {self.languages.id: "Languages"}

    def test_restricted_siblings_in_sortorder(self):
        selectable = resolve_selectable(self.humanities.id)
        assert list(selectable) == [self.humanities.id, self.philosophy.id, self.history.id]

    def test_restricted_chain(self):
        chain = self.create_chain(5)
        selectable = resolve_selectable(chain[0].id)
        assert len(selectable) == 5
        label = selectable[chain[-1].id]
        assert label == "Level1 / Level2 / Level3 / Level4 / Level5"
        assert "Level1" in label
        assert "Level5" in label
        assert label.count(" / ") == 4

    def test_restricted_deleted_root(self):
        category_id = self.chemistry.id
        self.chemistry.delete()
        assert resolve_selectable(category_id) == {}

    @ddt.data(123456, "abc", -5)
    def test_restricted_missing_root(self, restriction):
        with self.assertLogs("openedx_customfields.core.multicategory.hierarchy", level="INFO"):
            assert resolve_selectable(restriction) == {}

    def test_text_zero_matches_validation(self):
        assert validate_parent_category("0") is None
        assert resolve_selectable("0") == resolve_selectable(0)

    def test_does_not_change_the_tree(self):
        assert resolve_selectable(self.science.id) == resolve_selectable(self.science.id)
        assert Category.objects.count() == 9


class TestResolveSelectableProvider:
    """
    Test resolving selectable categories from a provider that isn't backed by the database.
    """

    def test_in_memory_provider(self):
        provider = InMemoryCategoryProvider([
            FakeCategory(10, "Root"),
            FakeCategory(11, "Child A", parent_id=10),
            FakeCategory(12, "Child B", parent_id=10),
            FakeCategory(13, "Grandchild", parent_id=11),
            FakeCategory(20, "Other root"),
        ])
        assert resolve_selectable(10, provider) == {
            10: "Root",
            11: "Root / Child A",
            13: "Root / Child A / Grandchild",
            12: "Root / Child B",
        }
        assert list(resolve_selectable(0, provider)) == [10, 11, 13, 12, 20]
        assert resolve_selectable(99, provider) == {}

    def test_deeper_than_recursion_limit(self):
        depth = sys.getrecursionlimit() * 2
        provider = InMemoryCategoryProvider(make_chain(depth))
        selectable = resolve_selectable(1, provider)
        assert len(selectable) == depth
        assert selectable[depth].count(" / ") == depth - 1

    def test_cycle_is_visited_once(self):
        provider = InMemoryCategoryProvider([
            FakeCategory(1, "A", parent_id=2),
            FakeCategory(2, "B", parent_id=1),
        ])
        assert resolve_selectable(1, provider) == {1: "A", 2: "A / B"}

    def test_flatten_tree_separator(self):
        nodes = make_chain(3, name="x")
        provider = InMemoryCategoryProvider(nodes)
        assert flatten_tree([nodes[0]], provider.get_children, "|") == {
            1: "x",
            2: "x|x",
            3: "x|x|x",
        }


@ddt.ddt
class TestValidateParentCategory(TestCategoryFieldMixin, TestCase):
    """
    Test the configuration time check of a field's parent category.
    """

    @ddt.data(None, "", 0, "0")
    def test_unrestricted(self, parent_category_id):
        assert validate_parent_category(parent_category_id) is None

    def test_existing(self):
        assert validate_parent_category(self.biology.id) == self.biology
        assert validate_parent_category(str(self.biology.id)) == self.biology

    @ddt.data(123456, "123456", "abc", -1, 1.5)
    def test_missing(self, parent_category_id):
        with pytest.raises(ValidationError) as exc:
            validate_parent_category(parent_category_id)
        assert exc.value.messages == ["The selected parent category does not exist."]
        assert exc.value.code == "invalid_category"

    def test_provider(self):
        provider = InMemoryCategoryProvider([FakeCategory(5, "Five")])
        assert validate_parent_category(5, provider) == FakeCategory(5, "Five")
        with pytest.raises(ValidationError):
            validate_parent_category(6, provider)
