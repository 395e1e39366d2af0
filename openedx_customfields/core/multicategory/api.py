"""
Multi-category custom field API

Anyone using the multicategory app should use these APIs instead of creating
or modifying the models directly, since there might be other related model
changes that you may not know about.

No permissions/rules are enforced by these methods -- these must be enforced in the views.

Please look at the models package for more information about the kinds of data
are stored in this app.
"""
from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet
from django.utils.translation import gettext as _

from . import display, membership
from .data import EmptyDisplay, SelectableSet, Submission
from .export import ExportFormat, get_exporter
from .hierarchy import CategoryProvider, get_default_provider, resolve_selectable, validate_parent_category
from .models import Category, CategoryField, CategoryFieldData

log = logging.getLogger(__name__)

# Export this as part of the API
CategoryDoesNotExist = Category.DoesNotExist


def create_category(
    name: str,
    parent: Category | None = None,
    sortorder: int = 0,
) -> Category:
    """
    Creates, saves, and returns a new Category under `parent` (or at the top of the tree).
    """
    category = Category(name=name, parent=parent, sortorder=sortorder)
    category.full_clean()
    category.save()
    return category


def get_category(category_id: Any) -> Category | None:
    """
    Returns the Category with the given ID, or None if it doesn't exist.
    """
    return get_default_provider().get_category(category_id)


def delete_category(category: Category) -> None:
    """
    Deletes a Category and all of its descendants.

    Stored field values that reference the deleted categories are left as they
    are; those IDs are skipped whenever the values are displayed.
    """
    log.info(f"Deleting {category} and its descendants")
    category.delete()


def create_field(
    name: str,
    shortname: str,
    parent_category_id: int | None = 0,
    description: str = "",
) -> CategoryField:
    """
    Creates, saves, and returns a new multi-category CategoryField.

    Raises ValidationError (and saves nothing) if `parent_category_id` doesn't
    match an existing category.
    """
    field = CategoryField(name=name, shortname=shortname, description=description)
    field.restriction = parent_category_id
    field.full_clean()
    field.save()
    return field


def update_field_config(field: CategoryField, parent_category_id: int | None) -> CategoryField:
    """
    Changes the parent category restriction of a field.

    Raises ValidationError (and saves nothing) if `parent_category_id` doesn't
    match an existing category. Values already stored for the field are not
    re-validated.
    """
    validate_parent_category(parent_category_id)
    field.restriction = parent_category_id
    field.save()
    return field


def get_field(field_id: int) -> CategoryField | None:
    """
    Returns the CategoryField with the given ID, or None.
    """
    return CategoryField.objects.filter(pk=field_id).first()


def get_field_by_shortname(shortname: str) -> CategoryField | None:
    """
    Returns the CategoryField with the given shortname, or None.
    """
    return CategoryField.objects.filter(shortname=shortname).first()


def get_fields() -> QuerySet[CategoryField]:
    """
    Returns a queryset containing all the fields, sorted by name.
    """
    return CategoryField.objects.order_by("name", "id")


def get_selectable_categories(
    field: CategoryField,
    provider: CategoryProvider | None = None,
) -> SelectableSet:
    """
    Returns the categories that can be selected for `field`, as {id: qualified label}.

    An empty result means there is nothing to select, e.g. because the
    restricting parent category was deleted.
    """
    return resolve_selectable(field.restriction, provider)


def save_object_data(
    field: CategoryField,
    object_id: str,
    submission: Submission,
    provider: CategoryProvider | None = None,
) -> CategoryFieldData:
    """
    Stores the submitted category selection of `field` for the given object.

    Replaces any previously stored selection. Category IDs outside the field's
    parent category restriction are dropped, and submissions which are not a
    list of IDs store an empty selection.
    """
    value = membership.build_membership_value(submission, field.restriction, provider)
    with transaction.atomic():
        data = CategoryFieldData.objects.filter(field=field, object_id=object_id).first()
        if data is None:
            data = CategoryFieldData(field=field, object_id=object_id)
        data.value = value
        data.full_clean()
        data.save()
    return data


def get_object_data(object_id: str, field: CategoryField | None = None) -> QuerySet[CategoryFieldData]:
    """
    Returns a Queryset of the stored field values for a given object.

    Pass `field` to limit the returned values to a specific field.
    """
    filters = {"field": field} if field else {}
    return (
        CategoryFieldData.objects
        .filter(object_id=object_id, **filters)
        .select_related("field")
        .order_by("field__name", "field_id")
    )


def get_value(field: CategoryField, object_id: str) -> str:
    """
    Returns the stored value of `field` for the object, or "" if nothing was ever stored.
    """
    data = CategoryFieldData.objects.filter(field=field, object_id=object_id).first()
    return data.value if data else ""


def get_category_ids(field: CategoryField, object_id: str) -> list[str]:
    """
    Returns the category IDs stored in `field` for the object.
    """
    return membership.decode(get_value(field, object_id))


def export_value(
    field: CategoryField,
    object_id: str,
    provider: CategoryProvider | None = None,
) -> str | EmptyDisplay:
    """
    Returns the stored categories of `field` for the object as display text.

    Returns EMPTY if there is nothing to display.
    """
    return display.project(get_value(field, object_id), provider)


def delete_object_data(object_id: str) -> None:
    """
    Delete all stored field values for a given object, e.g. when the object is deleted.
    """
    CategoryFieldData.objects.filter(object_id=object_id).delete()


def export_field_data(
    field: CategoryField,
    output_format: ExportFormat,
    provider: CategoryProvider | None = None,
) -> str:
    """
    Returns a string with all the stored values of the given field
    """
    if not isinstance(output_format, ExportFormat):
        raise ValueError(_("Invalid export format: {output_format}").format(output_format=output_format))
    exporter = get_exporter(output_format)
    return exporter.export(field, provider)
