from django.conf import settings
from django.contrib import admin
from django.urls import path, include, re_path
from django.views.static import serve
from rest_framework.response import Response
from rest_framework.decorators import api_view
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView
)

from apps.reportes.views import EstadisticasDashboardView


@api_view(['GET'])
def api_root(request, format=None):
    """Vista raíz del API – muestra los módulos disponibles."""
    return Response({
        "auth": request.build_absolute_uri("/api/auth/"),
        "users": request.build_absolute_uri("/api/users/"),
        "sectors": request.build_absolute_uri("/api/sectors/"),
        "products": request.build_absolute_uri("/api/products/"),
        "stock_transactions": request.build_absolute_uri("/api/stock-transactions/"),
        "consumptions": request.build_absolute_uri("/api/consumptions/"),
        "dashboard": request.build_absolute_uri("/api/dashboard/stats/"),
        "documentacion": {
            "swagger": request.build_absolute_uri("/api/docs/"),
            "redoc": request.build_absolute_uri("/api/redoc/"),
            "schema": request.build_absolute_uri("/api/schema/")
        }
    })


urlpatterns = [
    path("admin/", admin.site.urls),

    # Vista raíz del API
    path("api/", api_root, name="api-root"),

    # Módulos
    path("api/auth/", include("apps.autenticacion.urls")),
    path("api/users/", include("apps.usuarios.urls")),
    path("api/sectors/", include("apps.sectores.urls")),
    path("api/products/", include("apps.productos.urls")),
    path("api/consumptions/", include("apps.consumos.urls")),
    path("api/reports/", include("apps.reportes.urls")),
    path("api/dashboard/stats/", EstadisticasDashboardView.as_view(), name="dashboard-stats"),
    path("api/", include("apps.inventario.urls")),  # stock-transactions, kpis, snapshots

    # Documentación automática
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Fotos de productos
    re_path(r"^uploads/(?P<path>.*)$", serve, {"document_root": settings.MEDIA_ROOT}),
]
