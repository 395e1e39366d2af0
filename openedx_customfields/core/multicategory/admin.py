"""
Multi-category app admin
"""
from __future__ import annotations

from django.contrib import admin

from .models import Category, CategoryField, CategoryFieldData


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """
    Admin definition for Category model
    """
    autocomplete_fields = ["parent"]
    search_fields = ["name"]
    list_display = ["__str__", "parent", "sortorder"]


@admin.register(CategoryField)
class CategoryFieldAdmin(admin.ModelAdmin):
    """
    Admin definition for CategoryField model

    The change form runs CategoryField.clean(), so a restriction to a
    non-existent category is rejected.
    """
    search_fields = ["shortname", "name"]
    list_display = ["__str__", "name", "restriction"]


@admin.register(CategoryFieldData)
class CategoryFieldDataAdmin(admin.ModelAdmin):
    """
    Admin definition for CategoryFieldData model
    """
    fields = ["object_id", "field", "value"]
    list_display = ["object_id", "field", "value"]
    list_filter = ["field"]
    readonly_fields = ["object_id", "field"]

    def has_add_permission(self, request):
        """
        Don't create field values using the django admin. Use the API or UI.
        """
        return False
