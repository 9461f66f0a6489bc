"""
Core app URL configuration.

Provides system-wide constants and the notification inbox.

URL prefix (registered in ``backend/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET    /api/core/constants/                      — Request statuses and user roles.
GET    /api/core/notifications/                  — List notifications for the authenticated user.
GET    /api/core/notifications/unread-count/     — Unread badge count.
POST   /api/core/notifications/read-all/         — Mark every notification as read.
DELETE /api/core/notifications/clear/            — Delete every notification.
POST   /api/core/notifications/{id}/read/        — Mark a single notification as read.
DELETE /api/core/notifications/{id}/             — Delete a single notification.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "core"

# ── Router for ViewSet-based endpoints ───────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"notifications",
    viewset=views.NotificationViewSet,
    basename="notification",
)

urlpatterns = [
    # ── System Constants / Enums ─────────────────────────────────────
    path(
        "constants/",
        views.SystemConstantsView.as_view(),
        name="system-constants",
    ),

    # ── Notifications (router-generated URLs) ────────────────────────
    path("", include(router.urls)),
]
