import logging

from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.usuarios.permissions import EsAdministrador
from core.constants import APIResponse, Messages
from utils.excel import respuesta_xlsx

from .exportacion import libro_control_consumo, libro_mensual_sector, libro_reposicion
from .serializers import (
    ConsumoFoodstationFiltroSerializer,
    ConsumoUsuarioFiltroSerializer,
    ControlConsumoFiltroSerializer,
    ExportacionControlConsumoSerializer,
    GestionSectorSerializer,
    InventarioGeneralSerializer,
    LimpiezaSectorSerializer,
    MaquinaCafeSerializer,
    MensualSectorSerializer,
    PanoramaFoodstationSerializer,
    TopConsumidosSerializer,
)
from .services import ReportesService

logger = logging.getLogger(__name__)


def validar_filtros(serializer_class, request):
    """Valida los query params; BooleanField no funciona bien con QueryDict, por eso .dict()."""
    serializer = serializer_class(data=request.query_params.dict())
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class ReporteAdminView(APIView):
    """Base de los reportes restringidos a administradores."""

    permission_classes = [IsAuthenticated, EsAdministrador]


class EstadisticasDashboardView(APIView):
    """
    Estadísticas del panel principal.
    Accesible para cualquier usuario autenticado.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return APIResponse.success(data=ReportesService.estadisticas_dashboard())


class TopConsumidosView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(TopConsumidosSerializer, request)
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.mas_consumidos(filtros["limit"]),
        )


class ConsumoUsuarioView(APIView):
    """
    Consumo de un usuario en un período.
    Un usuario común solo puede consultar su propio consumo.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        filtros = validar_filtros(ConsumoUsuarioFiltroSerializer, request)

        usuario_id = filtros.get("user_id") or request.user.id
        if not request.user.es_admin:
            usuario_id = request.user.id

        reporte = ReportesService.consumo_usuario(
            usuario_id, filtros.get("start_date"), filtros.get("end_date")
        )
        return APIResponse.success(message=Messages.REPORT_GENERATED, data=reporte)


# ==========================================================
# FOODSTATION
# ==========================================================


class ReposicionFoodstationView(ReporteAdminView):
    def get(self, request):
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.reposicion_foodstation(),
        )


class ExportarReposicionFoodstationView(ReporteAdminView):
    def get(self, request):
        reporte = ReportesService.reposicion_foodstation()
        logger.info(f"Exportación de reposición FoodStation por {request.user.matricula}")
        return respuesta_xlsx(libro_reposicion(reporte), "foodstation-restock.xlsx")


class ConsumoFoodstationView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(ConsumoFoodstationFiltroSerializer, request)
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.consumo_foodstation(filtros),
        )


class PanoramaFoodstationView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(PanoramaFoodstationSerializer, request)
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.panorama_foodstation(filtros["days"]),
        )


class ControlConsumoFoodstationView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(ControlConsumoFiltroSerializer, request)
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.control_consumo_foodstation(filtros),
        )


class ExportarControlConsumoView(ReporteAdminView):
    """Planilla de control de consumo (consolidated | detailed)."""

    def get(self, request):
        filtros = validar_filtros(ExportacionControlConsumoSerializer, request)
        reporte = ReportesService.control_consumo_foodstation(filtros)
        libro = libro_control_consumo(reporte, filtros["format"])

        logger.info(
            f"Exportación de control de consumo ({filtros['format']}, "
            f"{len(reporte['records'])} registros) por {request.user.matricula}"
        )
        return respuesta_xlsx(libro, "foodstation-consumption-control.xlsx")


# ==========================================================
# SETORES E INVENTÁRIO
# ==========================================================


class MensualSectorView(ReporteAdminView):
    def get(self, request, sector_id):
        filtros = validar_filtros(MensualSectorSerializer, request)
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.mensual_sector(sector_id, filtros["cadence"]),
        )


class ExportarMensualSectorView(ReporteAdminView):
    def get(self, request, sector_id):
        filtros = validar_filtros(MensualSectorSerializer, request)
        reporte = ReportesService.mensual_sector(sector_id, filtros["cadence"])
        return respuesta_xlsx(libro_mensual_sector(reporte), f"sector-{sector_id}-{filtros['cadence']}.xlsx")


class LimpiezaSectorView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(LimpiezaSectorSerializer, request)
        reporte = ReportesService.limpieza_sector(
            filtros["month"],
            filtros["cadence"],
            filtros.get("sector_id"),
            filtros["compare_previous"],
        )
        return APIResponse.success(message=Messages.REPORT_GENERATED, data=reporte)


class MaquinaCafeView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(MaquinaCafeSerializer, request)
        reporte = ReportesService.maquina_cafe(
            filtros.get("sector_id"), filtros["cadence"], filtros["weeks"]
        )
        return APIResponse.success(message=Messages.REPORT_GENERATED, data=reporte)


class InventarioGeneralView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(InventarioGeneralSerializer, request)
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.inventario_general(filtros),
        )


class GestionSectorView(ReporteAdminView):
    def get(self, request):
        filtros = validar_filtros(GestionSectorSerializer, request)
        return APIResponse.success(
            message=Messages.REPORT_GENERATED,
            data=ReportesService.gestion_sector(filtros["sector_id"], filtros["days"]),
        )
