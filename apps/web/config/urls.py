"""
URL configuration for Savoria.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # Public + staff payment API
    path("payments/", include("apps.web.payments.urls")),
]
