import logging
from datetime import date

from django.db.models import DecimalField, Sum
from django.db.models.functions import Coalesce
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from core.constants import APIResponse, Messages
from utils.excel import agregar_hoja, nuevo_libro, respuesta_xlsx

from apps.inventario.services.stock_service import registrar_consumo
from .models import Consumo
from .serializers import ConsumoSerializer, CrearConsumoSerializer, RangoFechasSerializer

logger = logging.getLogger(__name__)

COLUMNAS_EXPORTACION = [
    ('ID', 10),
    ('Product', 30),
    ('User', 25),
    ('Quantity', 12),
    ('Unit Price', 15),
    ('Total Price', 15),
    ('Date', 20),
]


def total_mensual_usuario(usuario, anio: int, mes: int):
    """Suma de total_price de los consumos del usuario en el mes indicado."""
    return Consumo.objects.filter(
        user=usuario, consumed_at__year=anio, consumed_at__month=mes
    ).aggregate(
        total=Coalesce(Sum('total_price'), 0, output_field=DecimalField(max_digits=14, decimal_places=2))
    )['total']


class ConsumoViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """
    GET  /api/consumptions/                   - Listar (admin: todos; usuario: propios)
    POST /api/consumptions/                   - Registrar consumo del usuario autenticado
    GET  /api/consumptions/recent/            - Los 10 más recientes
    GET  /api/consumptions/my/                - Propios, con rango de fechas
    GET  /api/consumptions/my-monthly-total/  - Total del mes en curso y límite
    GET  /api/consumptions/export/            - Planilla .xlsx
    """
    permission_classes = [IsAuthenticated]
    serializer_class = ConsumoSerializer

    def get_queryset(self):
        queryset = Consumo.objects.select_related('product', 'user').order_by('-consumed_at', '-id')
        if not self.request.user.es_admin:
            queryset = queryset.filter(user=self.request.user)
        return queryset

    def get_serializer_class(self):
        if self.action == 'create':
            return CrearConsumoSerializer
        return ConsumoSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        consumo = registrar_consumo(
            request.user,
            serializer.validated_data['product_id'],
            serializer.validated_data['qty'],
        )
        return APIResponse.created(
            message=Messages.CONSUMPTION_CREATED,
            data=ConsumoSerializer(consumo).data
        )

    @action(detail=False, methods=['get'], url_path='recent')
    def recientes(self, request):
        consumos = self.get_queryset()[:10]
        return APIResponse.success(data=ConsumoSerializer(consumos, many=True).data)

    @action(detail=False, methods=['get'], url_path='my')
    def propios(self, request):
        serializer = RangoFechasSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        filtros = serializer.validated_data

        consumos = Consumo.objects.select_related('product', 'user').filter(user=request.user)
        if filtros.get('start_date'):
            consumos = consumos.filter(consumed_at__date__gte=filtros['start_date'])
        if filtros.get('end_date'):
            consumos = consumos.filter(consumed_at__date__lte=filtros['end_date'])

        return APIResponse.success(
            data=ConsumoSerializer(consumos.order_by('-consumed_at', '-id'), many=True).data
        )

    @action(detail=False, methods=['get'], url_path='my-monthly-total')
    def total_mensual(self, request):
        hoy = date.today()
        usuario = request.user
        return APIResponse.success(data={
            'total': total_mensual_usuario(usuario, hoy.year, hoy.month),
            'year': hoy.year,
            'month': hoy.month,
            'monthly_limit': usuario.monthly_limit,
            'limit_enabled': usuario.limit_enabled,
        })

    @action(detail=False, methods=['get'], url_path='export')
    def exportar(self, request):
        filas = [
            [
                consumo.id,
                consumo.product.name,
                consumo.user.full_name,
                consumo.qty,
                consumo.unit_price,
                consumo.total_price,
                consumo.consumed_at.strftime('%d/%m/%Y %H:%M:%S'),
            ]
            for consumo in self.get_queryset()
        ]

        libro = nuevo_libro()
        agregar_hoja(libro, 'Consumptions', COLUMNAS_EXPORTACION, filas, color_encabezado='FFE0E0E0')

        logger.info(f"Exportación de consumos ({len(filas)} filas) por {request.user.matricula}")
        return respuesta_xlsx(libro, 'consumptions.xlsx')
