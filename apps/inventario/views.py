import logging

from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.autenticacion.utils.helpers import obtener_ip_cliente
from apps.usuarios.permissions import EsAdministrador
from core.constants import APIResponse, Messages

from .models import MovimientoStock
from .serializers import (
    CrearMovimientoSerializer,
    FiltroMovimientosSerializer,
    MovimientoStockSerializer,
)
from .services.indicadores import kpis_por_sector, recomendaciones_compra, snapshot_stock
from .services.stock_service import aplicar_movimiento

logger = logging.getLogger(__name__)


class MovimientoStockViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    GET  /api/stock-transactions/   → listar (más recientes primero)
    POST /api/stock-transactions/   → registrar movimiento (admin)
    """
    queryset = MovimientoStock.objects.select_related('product', 'user').order_by('-created_at', '-id')
    serializer_class = MovimientoStockSerializer

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), EsAdministrador()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'create':
            return CrearMovimientoSerializer
        return MovimientoStockSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data

        movimiento = aplicar_movimiento(
            producto_id=datos['product_id'],
            change=datos['change'],
            usuario=request.user,
            transaction_type=datos.get('transaction_type'),
            reason=datos.get('reason'),
            document_origin=datos.get('document_origin'),
            notes=datos.get('notes'),
        )
        logger.info(f"Movimiento {movimiento.id} registrado desde IP {obtener_ip_cliente(request)}")

        movimiento.refresh_from_db()
        return APIResponse.created(
            message=Messages.TRANSACTION_CREATED,
            data=MovimientoStockSerializer(movimiento).data
        )


class MovimientosFiltradosView(APIView):
    """
    Movimientos con filtros: sector_id, product_id, transaction_type,
    user_id, start_date y end_date.
    """
    permission_classes = [IsAuthenticated, EsAdministrador]

    def get(self, request):
        serializer = FiltroMovimientosSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        filtros = serializer.validated_data

        queryset = MovimientoStock.objects.select_related('product', 'user')
        if filtros.get('sector_id'):
            queryset = queryset.filter(product__sector_id=filtros['sector_id'])
        if filtros.get('product_id'):
            queryset = queryset.filter(product_id=filtros['product_id'])
        if filtros.get('transaction_type'):
            queryset = queryset.filter(transaction_type=filtros['transaction_type'])
        if filtros.get('user_id'):
            queryset = queryset.filter(user_id=filtros['user_id'])
        if filtros.get('start_date'):
            queryset = queryset.filter(created_at__date__gte=filtros['start_date'])
        if filtros.get('end_date'):
            queryset = queryset.filter(created_at__date__lte=filtros['end_date'])

        queryset = queryset.order_by('-created_at', '-id')
        return APIResponse.success(data=MovimientoStockSerializer(queryset, many=True).data)


class KpisInventarioView(APIView):
    permission_classes = [IsAuthenticated, EsAdministrador]

    def get(self, request):
        return APIResponse.success(data=kpis_por_sector())


class SnapshotStockView(APIView):
    permission_classes = [IsAuthenticated, EsAdministrador]

    def get(self, request):
        return APIResponse.success(data=snapshot_stock())


class RecomendacionesCompraView(APIView):
    """Sugerencias de compra para productos zerados o abajo del mínimo."""
    permission_classes = [IsAuthenticated, EsAdministrador]

    def get(self, request):
        return APIResponse.success(data=recomendaciones_compra())
