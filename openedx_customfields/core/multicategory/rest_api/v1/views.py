"""
Multi-category API Views
"""
from __future__ import annotations

from collections.abc import Mapping

from django.core import exceptions
from django.db import models
from django.http import Http404, HttpResponse
from rest_framework import mixins
from rest_framework.decorators import action
from rest_framework.exceptions import MethodNotAllowed, PermissionDenied, ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet, ModelViewSet

from ...api import (
    create_field,
    export_field_data,
    get_field,
    get_fields,
    get_object_data,
    get_selectable_categories,
    save_object_data,
)
from ...data import Absent, Submission, submission_from_form
from ...display import project
from ...export import ExportFormat
from ...membership import decode
from ...models import CategoryField
from ...rules import FieldDataPermissionItem
from ..paginators import CategoryFieldPagination
from ..utils import view_auth_classes
from .permissions import CategoryFieldDataObjectPermissions, CategoryFieldObjectPermissions
from .serializers import (
    CategoryFieldSerializer,
    FieldDataQueryParamsSerializer,
    FieldDataSerializer,
    FieldExportQueryParamsSerializer,
    SelectableCategorySerializer,
)


@view_auth_classes
class CategoryFieldView(ModelViewSet):
    """
    View to list, create, retrieve, update, delete or export multi-category fields,
    and to list the categories a field allows.

    **List Query Parameters**
        * page (optional) - Page number (default: 1)
        * page_size (optional) - Number of items per page (default: 100)

    **List Example Requests**
        GET api/multicategory/v1/fields/                 - Get all fields

    **Retrieve Example Requests**
        GET api/multicategory/v1/fields/:pk/             - Get a specific field

    **Retrieve Query Returns**
        * 200 - Success
        * 404 - Field not found

    **Create Parameters**
        * shortname (required): Unique identifier of the field (a slug).
        * name (required): User-facing label of the field.
        * description (optional): Extra information for authors.
        * parent_category (optional): ID of the category whose subtree may be
          selected. 0 (default) allows every category.

    **Create Example Requests**
        POST api/multicategory/v1/fields/                - Create a field
        {
            "shortname": "subjects",
            "name": "Subjects",
            "parent_category": 3
        }

    **Create Query Returns**
        * 201 - Success
        * 400 - Invalid parameters provided, e.g. a parent category that doesn't exist
        * 403 - Permission denied

    **Update Example Requests**
        PUT api/multicategory/v1/fields/:pk/             - Update a field
        PATCH api/multicategory/v1/fields/:pk/           - Partially update a field

    **Delete Example Requests**
        DELETE api/multicategory/v1/fields/:pk/          - Delete a field and all its stored values

    **Selectable Example Requests**
        GET api/multicategory/v1/fields/:pk/selectable/  - Categories that may be selected
        [
            {"id": 3, "label": "Science"},
            {"id": 7, "label": "Science / Biology"}
        ]

    **Export Query Parameters**
        * output_format (required) - "json" or "csv"
        * download (optional) - Return the data as a file attachment

    **Export Example Requests**
        GET api/multicategory/v1/fields/:pk/export/?output_format=csv
    """

    serializer_class = CategoryFieldSerializer
    permission_classes = [CategoryFieldObjectPermissions]
    pagination_class = CategoryFieldPagination

    def get_object(self) -> CategoryField:
        """
        Return the requested field, if the user has appropriate permissions.
        """
        try:
            pk = int(self.kwargs["pk"])
        except ValueError as e:
            raise Http404("Field not found") from e
        field = get_field(pk)
        if not field:
            raise Http404("Field not found")
        self.check_object_permissions(self.request, field)

        return field

    def get_queryset(self) -> models.QuerySet:
        """
        Return a list of fields.
        """
        return get_fields()

    def perform_create(self, serializer) -> None:
        """
        Create a new field.
        """
        data = serializer.validated_data
        try:
            serializer.instance = create_field(
                name=data["name"],
                shortname=data["shortname"],
                parent_category_id=data.get("restriction", 0),
                description=data.get("description", ""),
            )
        except exceptions.ValidationError as e:
            raise ValidationError(e.messages) from e

    @action(detail=True, methods=["get"])
    def selectable(self, request, **_kwargs) -> Response:
        """
        List the categories that may be selected for a field.
        """
        field = self.get_object()
        selectable = get_selectable_categories(field)
        serializer = SelectableCategorySerializer(
            [{"id": category_id, "label": label} for category_id, label in selectable.items()],
            many=True,
        )
        return Response(serializer.data)

    @action(detail=True, methods=["get"])
    def export(self, request, **_kwargs) -> HttpResponse:
        """
        Export the stored values of a field.
        """
        field = self.get_object()
        query_params = FieldExportQueryParamsSerializer(
            data=request.query_params.dict()
        )
        query_params.is_valid(raise_exception=True)
        output_format = query_params.data.get("output_format")
        assert output_format is not None
        if output_format.lower() == "json":
            export_format = ExportFormat.JSON
            content_type = "application/json"
        else:
            export_format = ExportFormat.CSV
            if query_params.data.get("download"):
                content_type = "text/csv"
            else:
                content_type = "text"

        exported = export_field_data(field, export_format)
        if query_params.data.get("download"):
            response = HttpResponse(exported.encode('utf-8'), content_type=content_type)
            response["Content-Disposition"] = f'attachment; filename="{field.shortname}{export_format.value}"'
            return response

        return HttpResponse(exported, content_type=content_type)


@view_auth_classes
class ObjectDataView(
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    GenericViewSet,
):
    """
    View to retrieve or update the multi-category values of an object (object_id).

    **Retrieve Parameters**
        * object_id (required): - The Object ID to retrieve values for.
        * field (optional) - PK of the field to limit the results to.

    **Retrieve Example Requests**
        GET api/multicategory/v1/object_data/:object_id/
        GET api/multicategory/v1/object_data/:object_id/?field=1

    **Retrieve Query Returns**
        * 200 - Success
        * 400 - Invalid query parameter
        * 403 - Permission denied

        Response (one entry per field; fields with nothing stored have an empty value):
          [
            {
              field: int,
              shortname: str,
              name: str,
              value: str,
              category_ids: list[str],
              display: str | null,
              can_change: bool,
            },
            ...
          ]

    **Update Parameters**
        * object_id (required): - The Object ID to store values for.
        * field (required) - PK of the field to store.

    **Update Request Body**
        * category_ids: List of category IDs to select. IDs outside the
          field's parent category are dropped. A missing or non-list value
          clears the selection.

    **Update Example Requests**
        PUT api/multicategory/v1/object_data/:object_id/?field=1
        {
            "category_ids": [7, 12]
        }

    **Update Query Returns**
        * 200 - Success
        * 400 - Missing or invalid field
        * 403 - Permission denied
        * 405 - Method not allowed
    """

    serializer_class = FieldDataSerializer
    permission_classes = [CategoryFieldDataObjectPermissions]
    lookup_field = "object_id"
    lookup_value_regex = "[^/]+"

    def _get_query_field(self) -> CategoryField | None:
        """
        Returns the field given in the query params, if any.
        """
        query_params = FieldDataQueryParamsSerializer(
            data=self.request.query_params.dict()
        )
        query_params.is_valid(raise_exception=True)
        return query_params.validated_data.get("field", None)

    def _check_object_id(self, object_id: str) -> None:
        if object_id.endswith("*") or "," in object_id:
            raise ValidationError("Retrieving values from multiple objects is not supported.")

    def _serialize_object_data(self, object_id: str, fields: list[CategoryField]) -> list:
        """
        Returns the serialized values of the given fields for the object.
        """
        stored = {data.field_id: data for data in get_object_data(object_id)}
        rows = []
        for field in fields:
            perm_obj = FieldDataPermissionItem(field=field, object_id=object_id)
            if not self.request.user.has_perm(
                "oel_multicategory.view_categoryfielddata",
                # The obj arg expects a model, but we are passing an object
                perm_obj,  # type: ignore[arg-type]
            ):
                continue
            data = stored.get(field.id)
            value = data.value if data else ""
            display = project(value)
            rows.append({
                "field": field.id,
                "shortname": field.shortname,
                "name": field.name,
                "value": value,
                "category_ids": decode(value),
                "display": display or None,
                "can_change": self.request.user.has_perm(
                    "oel_multicategory.change_categoryfielddata",
                    perm_obj,  # type: ignore[arg-type]
                ),
            })
        return FieldDataSerializer(rows, many=True).data

    def retrieve(self, request, *args, **kwargs) -> Response:
        """
        Retrieve the multi-category values of a given object_id

        Note: We override `retrieve` here because the Object ID is passed in
        the path, and we return one entry per field rather than a single model
        instance.
        """
        object_id: str = self.kwargs["object_id"]
        self._check_object_id(object_id)
        field = self._get_query_field()
        fields = [field] if field else list(get_fields())
        return Response(self._serialize_object_data(object_id, fields))

    def update(self, request, *args, **kwargs) -> Response:
        """
        Store the selected categories of one field for a given object_id
        """
        partial = kwargs.pop('partial', False)
        if partial:
            raise MethodNotAllowed("PATCH", detail="PATCH not allowed")

        object_id: str = self.kwargs["object_id"]
        self._check_object_id(object_id)
        field = self._get_query_field()
        if not field:
            raise ValidationError("The 'field' query parameter is required.")

        perm_obj = FieldDataPermissionItem(field=field, object_id=object_id)
        if not request.user.has_perm(
            "oel_multicategory.change_categoryfielddata",
            # The obj arg expects a model, but we are passing an object
            perm_obj,  # type: ignore[arg-type]
        ):
            raise PermissionDenied(
                f"You do not have permission to change field {field.shortname} of object {object_id}."
            )

        submission = self._get_submission(request)
        try:
            save_object_data(field, object_id, submission)
        except exceptions.ValidationError as e:
            raise ValidationError(e.messages) from e

        return Response(self._serialize_object_data(object_id, [field]))

    def _get_submission(self, request: Request) -> Submission:
        """
        Returns the submitted "category_ids" from the request body.
        """
        if not isinstance(request.data, Mapping):
            return Absent()
        return submission_from_form(request.data, "category_ids")
