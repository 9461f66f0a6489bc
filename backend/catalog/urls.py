"""
Catalog app URL configuration.

    GET /api/documents/        → DocumentViewSet.list
    GET /api/documents/{id}/   → DocumentViewSet.retrieve
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DocumentViewSet

router = DefaultRouter()
router.register(r"documents", DocumentViewSet, basename="document")

urlpatterns = [
    path("", include(router.urls)),
]
