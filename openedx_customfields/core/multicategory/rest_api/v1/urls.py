"""
Multi-category fields API v1 URLs.
"""

from django.urls.conf import include, path
from rest_framework.routers import DefaultRouter

from . import views

router = DefaultRouter()
router.register("fields", views.CategoryFieldView, basename="field")
router.register("object_data", views.ObjectDataView, basename="object_data")

urlpatterns = [
    path("", include(router.urls)),
]
