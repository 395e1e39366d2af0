"""
Exporters for the stored values of a multi-category field
"""
from __future__ import annotations

import csv
import json
from enum import Enum
from io import StringIO

from django.utils.translation import gettext as _

from .display import project
from .hierarchy import CategoryProvider
from .models import CategoryField


class ExportFormat(Enum):
    """
    Formats that field data can be exported to
    """

    JSON = ".json"
    CSV = ".csv"


class Exporter:
    """
    Base class to create an exporter

    Each exported row holds the object ID, the stored value and its display
    text. To create a new Exporter you need to implement `_export_data`.
    """

    fields = ["object_id", "value", "display"]

    # Set the format associated to the exporter
    format: ExportFormat

    @classmethod
    def export(cls, field: CategoryField, provider: CategoryProvider | None = None) -> str:
        """
        Returns the stored values of every object that has data for `field`.
        """
        rows = cls._load_rows_for_export(field, provider)
        return cls._export_data(rows, field)

    @classmethod
    def _load_rows_for_export(cls, field: CategoryField, provider: CategoryProvider | None) -> list[dict]:
        """
        Returns a list of dicts with the `fields` of each stored value, sorted by object ID.

        Values with nothing to display get an empty "display".
        """
        return [
            {
                "object_id": data.object_id,
                "value": data.value,
                "display": str(project(data.value, provider)),
            }
            for data in field.data.order_by("object_id")
        ]

    @classmethod
    def _export_data(cls, rows: list[dict], field: CategoryField) -> str:
        """
        Each exporter implements this function according to its format.
        Returns a string with the rows in the exporter format.
        Can use `field` to export field metadata.
        """
        raise NotImplementedError


class JSONExporter(Exporter):
    """
    Exporter used for .json files

    Output:
    ```
    {
        "shortname": "subjects",
        "name": "Subjects",
        "parent_category": 3,
        "data": [
            {"object_id": "course-v1:A+B+C", "value": "4,7", "display": "Biology, Chemistry"}
        ]
    }
    ```
    """

    format = ExportFormat.JSON

    @classmethod
    def _export_data(cls, rows: list[dict], field: CategoryField) -> str:
        """
        Export rows and field metadata in JSON format
        """
        json_result = {
            "shortname": field.shortname,
            "name": field.name,
            "parent_category": field.restriction,
            "data": rows,
        }
        return json.dumps(json_result)


class CSVExporter(Exporter):
    """
    Exporter used for .csv files

    Output:
    ```
    object_id,value,display
    course-v1:A+B+C,"4,7","Biology, Chemistry"
    ```
    """

    format = ExportFormat.CSV

    @classmethod
    def _export_data(cls, rows: list[dict], field: CategoryField) -> str:
        """
        Export rows in CSV format
        """
        with StringIO() as csv_buffer:
            csv_writer = csv.DictWriter(csv_buffer, fieldnames=cls.fields)
            csv_writer.writeheader()

            for row in rows:
                csv_writer.writerow(row)

            return csv_buffer.getvalue()


# Add exporters here
_exporters = [JSONExporter, CSVExporter]


def get_exporter(export_format: ExportFormat) -> type[Exporter]:
    """
    Get the exporter for the respective `format`

    Raise `ValueError` if no exporter found
    """
    for exporter in _exporters:
        if export_format == exporter.format:
            return exporter

    raise ValueError(_("Exporter not found for format {export_format}").format(export_format=export_format))
