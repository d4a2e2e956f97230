import logging

from django.db.models import ProtectedError
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated

from apps.autenticacion.utils.helpers import obtener_ip_cliente
from apps.usuarios.permissions import EsAdministrador
from core.constants import APIResponse, Messages
from core.exceptions import Conflicto

from .models import Producto
from .serializers import (
    ImportacionProductosSerializer,
    ProductoEscrituraSerializer,
    ProductoSerializer,
)
from .services.fotos import eliminar_foto
from .services.importacion import importar_productos

logger = logging.getLogger(__name__)


class ProductoViewSet(viewsets.ModelViewSet):
    """
    ViewSet para gestión completa de productos

    Endpoints:
    - GET    /api/products/               - Listar productos
    - GET    /api/products/{id}/          - Obtener producto específico
    - POST   /api/products/               - Crear producto (admin, multipart con foto)
    - PUT    /api/products/{id}/          - Actualizar producto (admin)
    - DELETE /api/products/{id}/          - Eliminar producto (admin)

    Acciones personalizadas:
    - GET    /api/products/low-stock/     - Productos con stock bajo
    - POST   /api/products/bulk-import/   - Importación masiva (admin)
    """

    queryset = Producto.objects.select_related('sector')
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['sector', 'status', 'visible_to_users']
    search_fields = ['name', 'sku', 'category']
    ordering_fields = ['name', 'unit_price', 'stock_quantity', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        """Retorna el serializer según la acción"""
        if self.action in ['create', 'update', 'partial_update']:
            return ProductoEscrituraSerializer
        elif self.action == 'importacion_masiva':
            return ImportacionProductosSerializer
        return ProductoSerializer

    def get_permissions(self):
        """
        Permisos por acción:
        - Listar, ver y stock bajo: cualquier usuario autenticado
        - Crear, editar, eliminar e importar: administradores
        """
        if self.action in ['list', 'retrieve', 'stock_bajo']:
            return [IsAuthenticated()]
        return [IsAuthenticated(), EsAdministrador()]

    def create(self, request, *args, **kwargs):
        """Crear nuevo producto"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        producto = serializer.save()

        logger.info(
            f"Producto creado - {producto.id} ({producto.name}) stock {producto.stock_quantity} "
            f"por {request.user.matricula}, IP: {obtener_ip_cliente(request)}"
        )

        return APIResponse.created(
            data=ProductoSerializer(producto).data,
            message=Messages.PRODUCT_CREATED
        )

    def update(self, request, *args, **kwargs):
        """Actualizar producto (PUT completo o PATCH parcial)"""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        foto_anterior = instance.photo.name if instance.photo else None

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        producto = serializer.save()

        # La foto reemplazada se borra después de guardar el registro
        if 'photo' in serializer.validated_data and foto_anterior:
            if not producto.photo or producto.photo.name != foto_anterior:
                eliminar_foto(foto_anterior)

        logger.info(f"Producto actualizado - {producto.id} por {request.user.matricula}")

        return APIResponse.success(
            data=ProductoSerializer(producto).data,
            message=Messages.PRODUCT_UPDATED
        )

    def destroy(self, request, *args, **kwargs):
        """Eliminar producto; con historial de consumos se rechaza"""
        producto = self.get_object()
        foto = producto.photo.name if producto.photo else None
        producto_id = producto.id

        try:
            producto.delete()
        except ProtectedError:
            logger.warning(f"Eliminación rechazada - producto {producto_id} tiene consumos")
            raise Conflicto(Messages.PRODUCT_HAS_CONSUMPTIONS)

        eliminar_foto(foto)
        logger.info(f"Producto eliminado - {producto_id} por {request.user.matricula}")
        return APIResponse.success(message=Messages.PRODUCT_DELETED)

    # =======================
    # ACCIONES PERSONALIZADAS
    # =======================

    @action(detail=False, methods=['get'], url_path='low-stock')
    def stock_bajo(self, request):
        """Productos con stock_quantity <= low_stock_threshold, menor stock primero."""
        productos = Producto.objects.stock_bajo().select_related('sector').order_by('stock_quantity', 'name')
        return APIResponse.success(data=ProductoSerializer(productos, many=True).data)

    @action(detail=False, methods=['post'], url_path='bulk-import')
    def importacion_masiva(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        resultado = importar_productos(serializer.validated_data['file'])

        logger.info(
            f"Importación masiva por {request.user.matricula}: "
            f"{resultado['imported']} importados, {len(resultado['errors'])} errores"
        )
        return APIResponse.created(
            message=Messages.IMPORT_SUCCESS.format(cantidad=resultado['imported']),
            data=resultado
        )
