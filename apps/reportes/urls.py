from django.urls import path

from .views import (
    ConsumoFoodstationView,
    ConsumoUsuarioView,
    ControlConsumoFoodstationView,
    ExportarControlConsumoView,
    ExportarMensualSectorView,
    ExportarReposicionFoodstationView,
    GestionSectorView,
    InventarioGeneralView,
    LimpiezaSectorView,
    MaquinaCafeView,
    MensualSectorView,
    PanoramaFoodstationView,
    ReposicionFoodstationView,
    TopConsumidosView,
)

urlpatterns = [
    path("top-consumed/", TopConsumidosView.as_view(), name="reportes-top-consumed"),
    path("user-consumption/", ConsumoUsuarioView.as_view(), name="reportes-user-consumption"),
    path(
        "foodstation/restock/",
        ReposicionFoodstationView.as_view(),
        name="reportes-foodstation-restock",
    ),
    path(
        "foodstation/restock/export/",
        ExportarReposicionFoodstationView.as_view(),
        name="reportes-foodstation-restock-export",
    ),
    path(
        "foodstation/consumption/",
        ConsumoFoodstationView.as_view(),
        name="reportes-foodstation-consumption",
    ),
    path(
        "foodstation/overview/",
        PanoramaFoodstationView.as_view(),
        name="reportes-foodstation-overview",
    ),
    path(
        "foodstation/consumption-control/",
        ControlConsumoFoodstationView.as_view(),
        name="reportes-foodstation-consumption-control",
    ),
    path(
        "foodstation/consumption-control/export/",
        ExportarControlConsumoView.as_view(),
        name="reportes-foodstation-consumption-control-export",
    ),
    path("sector/cleaning/", LimpiezaSectorView.as_view(), name="reportes-sector-cleaning"),
    path("sector/coffee/", MaquinaCafeView.as_view(), name="reportes-sector-coffee"),
    path(
        "sector/<int:sector_id>/monthly/",
        MensualSectorView.as_view(),
        name="reportes-sector-monthly",
    ),
    path(
        "sector/<int:sector_id>/monthly/export/",
        ExportarMensualSectorView.as_view(),
        name="reportes-sector-monthly-export",
    ),
    path("inventory/general/", InventarioGeneralView.as_view(), name="reportes-inventory-general"),
    path("sector-management/", GestionSectorView.as_view(), name="reportes-sector-management"),
]
