from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import (
    KpisInventarioView,
    MovimientoStockViewSet,
    MovimientosFiltradosView,
    RecomendacionesCompraView,
    SnapshotStockView,
)

router = SimpleRouter()
router.register(r"stock-transactions", MovimientoStockViewSet, basename="stock-transaction")

urlpatterns = [
    path("stock-movements/", MovimientosFiltradosView.as_view(), name="stock-movements"),
    path("inventory/kpis/", KpisInventarioView.as_view(), name="inventory-kpis"),
    path("stock-snapshots/", SnapshotStockView.as_view(), name="stock-snapshots"),
    path(
        "purchase-recommendations/",
        RecomendacionesCompraView.as_view(),
        name="purchase-recommendations",
    ),
    path("", include(router.urls)),
]
