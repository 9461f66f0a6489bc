"""
Document-requests app URL configuration.

All routes are registered under the ``/api/`` prefix.

Route Hierarchy
---------------
  /api/requests/                          → list / create
  /api/requests/{id}/                     → retrieve / partial_update / destroy

  ── Workflow @actions ───────────────────────────────────────────
  POST /api/requests/{id}/status/          → registrar changes status

  ── Sub-resources ───────────────────────────────────────────────
  GET  /api/requests/{id}/claim-slip/
  GET  /api/requests/{id}/status-logs/
  GET  /api/requests/{request_pk}/payments/
  POST /api/requests/{request_pk}/payments/

  ── Audit trail ─────────────────────────────────────────────────
  GET   /api/status-logs/
  PATCH /api/status-logs/{id}/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers as nested_routers

from payments.views import RequestPaymentViewSet

from .views import DocumentRequestViewSet, StatusLogViewSet

router = DefaultRouter()
router.register(
    prefix=r"requests",
    viewset=DocumentRequestViewSet,
    basename="request",
)
router.register(
    prefix=r"status-logs",
    viewset=StatusLogViewSet,
    basename="status-log",
)

# /api/requests/{request_pk}/payments/
requests_router = nested_routers.NestedDefaultRouter(
    router,
    r"requests",
    lookup="request",
)
requests_router.register(
    r"payments",
    RequestPaymentViewSet,
    basename="request-payment",
)

urlpatterns = [
    path("", include(router.urls)),
    path("", include(requests_router.urls)),
]
