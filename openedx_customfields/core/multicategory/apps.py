"""
multicategory Django application initialization.
"""

from django.apps import AppConfig


class MultiCategoryConfig(AppConfig):
    """
    Configuration for the multi-category custom field Django application.
    """

    name = "openedx_customfields.core.multicategory"
    verbose_name = "Multi-category custom fields"
    default_auto_field = "django.db.models.BigAutoField"
    label = "oel_multicategory"
