"""
Multi-category permissions
"""
from rest_framework.permissions import DjangoObjectPermissions

from ...models import CategoryFieldData


class CategoryFieldObjectPermissions(DjangoObjectPermissions):
    """
    Maps each REST API methods to its corresponding CategoryField permission.
    """
    perms_map = {
        "GET": ["%(app_label)s.view_%(model_name)s"],
        "OPTIONS": [],
        "HEAD": ["%(app_label)s.view_%(model_name)s"],
        "POST": ["%(app_label)s.add_%(model_name)s"],
        "PUT": ["%(app_label)s.change_%(model_name)s"],
        "PATCH": ["%(app_label)s.change_%(model_name)s"],
        "DELETE": ["%(app_label)s.delete_%(model_name)s"],
    }


class CategoryFieldDataObjectPermissions(DjangoObjectPermissions):
    """
    Maps each REST API methods to its corresponding CategoryFieldData permission.

    The per-field and per-object checks happen in the view, using FieldDataPermissionItem.
    """
    perms_map = {
        "GET": ["%(app_label)s.view_%(model_name)s"],
        "OPTIONS": [],
        "HEAD": ["%(app_label)s.view_%(model_name)s"],
        "POST": ["%(app_label)s.add_%(model_name)s"],
        "PUT": ["%(app_label)s.change_%(model_name)s"],
        "PATCH": ["%(app_label)s.change_%(model_name)s"],
        "DELETE": ["%(app_label)s.delete_%(model_name)s"],
    }

    def _queryset(self, view):
        """
        Returns the queryset to use when checking model permissions.

        The view has no single queryset of field data, so we don't call view.get_queryset().
        """
        return CategoryFieldData.objects
