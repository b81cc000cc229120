"""
URL configuration for core_backend project.

Every app mounts its own router under /api/<app>/.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/registers/", include("registers.urls")),
    path("api/", include("orders.urls")),  # the orders router registers its own "orders" prefix
    path("api/kitchen/", include("kds.urls")),
    path("api/payments/", include("payments.urls")),
    path("api/tables/", include("tables.urls")),
    path("api/delivery/", include("delivery.urls")),
]
