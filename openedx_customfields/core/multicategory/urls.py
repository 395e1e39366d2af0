"""
Multi-category API URLs.
"""

from django.urls import include, path

from .rest_api import urls

app_name = "oel_multicategory"
urlpatterns = [path("", include(urls))]
