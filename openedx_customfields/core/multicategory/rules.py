"""
Django rules-based permissions for multi-category fields
"""
from __future__ import annotations

from typing import Callable, Union

import django.contrib.auth.models
# typing support in rules depends on https://github.com/dfunckt/django-rules/pull/177
import rules  # type: ignore[import]
from attrs import define

from .models import CategoryField

UserType = Union[
    django.contrib.auth.models.User, django.contrib.auth.models.AnonymousUser
]


# Global staff are field admins.
# (Superusers can already do anything)
is_field_admin: Callable[[UserType], bool] = rules.is_staff


@define
class FieldDataPermissionItem:
    """
    Pair of field and object_id used for permission checking.
    """

    field: CategoryField
    object_id: str


@rules.predicate
def can_view_field(_user: UserType, _field: CategoryField | None = None) -> bool:
    """
    Anyone can view field definitions.
    """
    return True


@rules.predicate
def can_change_field(user: UserType, _field: CategoryField | None = None) -> bool:
    """
    Only field admins can create, configure or delete fields.
    """
    return is_field_admin(user)


@rules.predicate
def can_view_field_data_objectid(_user: UserType, _object_id: str) -> bool:
    """
    Everybody can view field values of any object.

    This rule could be defined in other apps for proper permission checking.
    """
    return True


@rules.predicate
def can_change_field_data_objectid(_user: UserType, _object_id: str) -> bool:
    """
    Nobody can change field values without checking the permission for the object.

    This rule should be defined in other apps for proper permission checking.
    """
    return False


@rules.predicate
def can_view_field_data(
    user: UserType, perm_obj: FieldDataPermissionItem | None = None
) -> bool:
    """
    Checks if the user has permissions to view the values of the given field on the given object.
    """

    # The following code allows METHOD permission (GET) in the viewset for everyone
    if perm_obj is None:
        return True

    if not user.has_perm("oel_multicategory.view_categoryfield", perm_obj.field):
        return False

    return user.has_perm(
        "oel_multicategory.view_categoryfielddata_objectid",
        # The obj arg expects an object, but we are passing a string
        perm_obj.object_id,  # type: ignore[arg-type]
    )


@rules.predicate
def can_change_field_data(
    user: UserType, perm_obj: FieldDataPermissionItem | None = None
) -> bool:
    """
    Checks if the user has permissions to change the values of the given field on the given object.

    Field admins may change any value; other users need the object permission.
    """

    # The following code allows METHOD permission (PUT) in the viewset for everyone
    if perm_obj is None:
        return True

    if is_field_admin(user):
        return True

    return user.has_perm(
        "oel_multicategory.change_categoryfielddata_objectid",
        # The obj arg expects an object, but we are passing a string
        perm_obj.object_id,  # type: ignore[arg-type]
    )


# Category
rules.add_perm("oel_multicategory.add_category", is_field_admin)
rules.add_perm("oel_multicategory.change_category", is_field_admin)
rules.add_perm("oel_multicategory.delete_category", is_field_admin)
rules.add_perm("oel_multicategory.view_category", rules.always_allow)

# CategoryField
rules.add_perm("oel_multicategory.add_categoryfield", can_change_field)
rules.add_perm("oel_multicategory.change_categoryfield", can_change_field)
rules.add_perm("oel_multicategory.delete_categoryfield", can_change_field)
rules.add_perm("oel_multicategory.view_categoryfield", can_view_field)

# CategoryFieldData
rules.add_perm("oel_multicategory.add_categoryfielddata", can_change_field_data)
rules.add_perm("oel_multicategory.change_categoryfielddata", can_change_field_data)
rules.add_perm("oel_multicategory.delete_categoryfielddata", can_change_field_data)
rules.add_perm("oel_multicategory.view_categoryfielddata", can_view_field_data)

# Object permissions; other apps may redefine these with rules.set_perm()
rules.add_perm("oel_multicategory.view_categoryfielddata_objectid", can_view_field_data_objectid)
rules.add_perm("oel_multicategory.change_categoryfielddata_objectid", can_change_field_data_objectid)
