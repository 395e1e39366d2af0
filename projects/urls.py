from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("multicategory/rest_api/", include("openedx_customfields.core.multicategory.urls")),
]
