"""
Paginators uses by the REST API
"""
from typing import Type

from edx_rest_framework_extensions.paginators import DefaultPagination  # type: ignore[import]
from rest_framework.request import Request
from rest_framework.response import Response

from openedx_customfields.core.multicategory.models import CategoryField

from .utils import UserPermissionsHelper


class CanAddPermissionMixin(UserPermissionsHelper):  # pylint: disable=abstract-method
    """
    This mixin inserts a boolean "can_add_<model>" field at the top level of the paginated response.

    The value of the field indicates whether request user may create new instances of the current model.
    """
    @property
    def _request(self) -> Request:
        """
        Returns the current request.
        """
        return self.request  # type: ignore[attr-defined]

    def get_paginated_response(self, data) -> Response:
        """
        Injects the user's model-level permissions into the paginated response.
        """
        response_data = super().get_paginated_response(data).data  # type: ignore[misc]
        field_name = f"can_add_{self.model_name}"
        response_data[field_name] = self.get_can_add()
        return Response(response_data)


class CategoryFieldPagination(CanAddPermissionMixin, DefaultPagination):
    """
    Inserts permissions data for CategoryFields into the top level of the paginated response.
    """
    page_size = 100
    max_page_size = 500

    @property
    def _model(self) -> Type:
        """
        Returns the model that is being paginated.
        """
        return CategoryField
