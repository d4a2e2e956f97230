import logging
from datetime import timedelta

from django.db.models import Count, DecimalField, ProtectedError, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from rest_framework import viewsets, filters
from rest_framework.decorators import action

from apps.consumos.models import Consumo
from apps.inventario.models import MovimientoStock
from apps.inventario.serializers import MovimientoStockSerializer
from apps.productos.models import Producto
from apps.productos.serializers import ProductoSerializer
from apps.usuarios.permissions import EsAdministrador, EsAdministradorOSoloLectura
from core.constants import APIResponse, Messages, StockStatus
from core.exceptions import Conflicto
from .models import Sector
from .serializers import SectorSerializer

logger = logging.getLogger(__name__)


class SectorViewSet(viewsets.ModelViewSet):
    """
    Setores: lectura para cualquier usuario autenticado, escritura solo admin.
    Extras por setor: productos, movimientos e indicadores de desempeño.
    """
    queryset = Sector.objects.all()
    serializer_class = SectorSerializer
    permission_classes = [EsAdministradorOSoloLectura]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name']
    ordering = ['name']

    def get_permissions(self):
        if self.action in ['transacciones', 'desempeno']:
            return [EsAdministrador()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sector = serializer.save()
        logger.info(f"Setor creado - {sector.name} por {request.user.matricula}")
        return APIResponse.created(message=Messages.SECTOR_CREATED, data=serializer.data)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return APIResponse.success(message=Messages.SECTOR_UPDATED, data=serializer.data)

    def destroy(self, request, *args, **kwargs):
        sector = self.get_object()
        try:
            sector.delete()
        except ProtectedError:
            raise Conflicto(Messages.SECTOR_HAS_PRODUCTS)
        logger.info(f"Setor eliminado - {sector.name} por {request.user.matricula}")
        return APIResponse.success(message=Messages.SECTOR_DELETED)

    # =======================
    # DETALLE DEL SETOR
    # =======================

    @action(detail=True, methods=['get'], url_path='products')
    def productos(self, request, pk=None):
        """Productos del setor con su estado de stock."""
        sector = self.get_object()
        productos = Producto.objects.filter(sector=sector).select_related('sector').order_by('name')
        return APIResponse.success(data=ProductoSerializer(productos, many=True).data)

    @action(detail=True, methods=['get'], url_path='transactions')
    def transacciones(self, request, pk=None):
        sector = self.get_object()
        movimientos = (
            MovimientoStock.objects.filter(product__sector=sector)
            .select_related('product', 'user')
            .order_by('-created_at', '-id')
        )
        return APIResponse.success(data=MovimientoStockSerializer(movimientos, many=True).data)

    @action(detail=True, methods=['get'], url_path='performance')
    def desempeno(self, request, pk=None):
        """
        Indicadores del setor: cantidad y valor de productos, stock bajo/zerado
        y consumos de los últimos 30 días.
        """
        sector = self.get_object()
        productos = list(Producto.objects.filter(sector=sector))

        valor_total = sum((p.inventory_value for p in productos), 0)
        bajos = sum(1 for p in productos if p.stock_status == StockStatus.BAIXO)
        zerados = sum(1 for p in productos if p.stock_status == StockStatus.ZERADO)

        desde = timezone.now() - timedelta(days=30)
        consumo = Consumo.objects.filter(product__sector=sector, consumed_at__gte=desde).aggregate(
            total_qty=Coalesce(Sum('qty'), 0),
            total_value=Coalesce(Sum('total_price'), 0, output_field=DecimalField()),
            count=Count('id'),
        )

        return APIResponse.success(data={
            'sector_id': sector.id,
            'sector_name': sector.name,
            'total_products': len(productos),
            'total_inventory_value': valor_total,
            'low_stock_count': bajos,
            'out_of_stock_count': zerados,
            'stockout_frequency': zerados,
            'immobilized_value': valor_total,
            'consumption_last_30_days': {
                'total_qty': consumo['total_qty'],
                'total_value': consumo['total_value'],
                'count': consumo['count'],
            },
        })
