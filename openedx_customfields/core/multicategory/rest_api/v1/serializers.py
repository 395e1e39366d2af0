"""
API Serializers for multi-category fields
"""
from __future__ import annotations

from typing import Type

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework.request import Request

from openedx_customfields.core.multicategory import hierarchy
from openedx_customfields.core.multicategory.models import CategoryField

from ..utils import UserPermissionsHelper


class UserPermissionsSerializerMixin(UserPermissionsHelper):
    """
    Provides methods for serializing user permissions.

    To use this mixin:

    1. Add it to your serializer's list of subclasses
    2. Add `can_<action>` fields for each permission/action you want to serialize.

    and this mixin will take care of the rest.

    Notes:
    * Assumes the serialized model should be used to check permissions (override _model to change).
    * Requires the current request to be passed into the serializer context (override _request to change).
    """
    @property
    def _model(self) -> Type:
        """
        Returns the model that is being serialized
        """
        return self.Meta.model  # type: ignore[attr-defined]

    @property
    def _request(self) -> Request:
        """
        Returns the current request from the serialize context.
        """
        return self.context.get('request')  # type: ignore[attr-defined]


class CategoryFieldSerializer(UserPermissionsSerializerMixin, serializers.ModelSerializer):
    """
    Serializer for the CategoryField model.

    `parent_category` is read from and written to the field's configdata.
    """
    parent_category = serializers.IntegerField(source="restriction", default=0, min_value=0)
    can_change_field = serializers.SerializerMethodField(method_name='get_can_change')
    can_delete_field = serializers.SerializerMethodField(method_name='get_can_delete')

    class Meta:
        model = CategoryField
        fields = [
            "id",
            "shortname",
            "name",
            "description",
            "parent_category",
            "can_change_field",
            "can_delete_field",
        ]

    def validate_parent_category(self, value: int) -> int:
        """
        Reject restrictions to categories that don't exist.
        """
        try:
            hierarchy.validate_parent_category(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages) from e
        return value


class SelectableCategorySerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for one entry of a field's selectable categories
    """
    id = serializers.IntegerField()
    label = serializers.CharField()


class FieldExportQueryParamsSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the query params for the export view
    """
    download = serializers.BooleanField(required=False, default=False)
    output_format = serializers.RegexField(r"(?i)^(json|csv)$", allow_blank=False)


class FieldDataQueryParamsSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the query params for the object data views
    """
    field = serializers.PrimaryKeyRelatedField(
        queryset=CategoryField.objects.all(), required=False
    )


class FieldDataSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the value of one field on one object.
    """
    field = serializers.IntegerField()
    shortname = serializers.CharField()
    name = serializers.CharField()
    value = serializers.CharField(allow_blank=True)
    category_ids = serializers.ListField(child=serializers.CharField())
    display = serializers.CharField(allow_null=True)
    can_change = serializers.BooleanField()
