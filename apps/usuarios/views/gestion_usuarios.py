from rest_framework import viewsets, permissions
from rest_framework.decorators import action
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import SearchFilter, OrderingFilter
from django.db.models import ProtectedError
import logging

from apps.autenticacion.utils.helpers import obtener_ip_cliente
from core.constants import APIResponse, Messages
from core.exceptions import Conflicto
from ..models import Usuario
from ..permissions import EsAdministrador
from ..serializers import (
    UsuarioSerializer,
    UsuarioCrearSerializer,
    UsuarioActualizarSerializer,
    LimiteMensualSerializer,
)

logger = logging.getLogger(__name__)


# ====================================
# VIEWSET DE GESTIÓN DE USUARIOS
# ====================================
class UsuarioViewSet(viewsets.ModelViewSet):
    """
    Gestión de usuarios.

    GET    /api/users/               - Listar (cualquier usuario autenticado)
    GET    /api/users/{id}/          - Detalle
    POST   /api/users/               - Crear (admin)
    PUT    /api/users/{id}/          - Actualizar (admin)
    DELETE /api/users/{id}/          - Eliminar (admin, no puede eliminarse a sí mismo)
    PATCH  /api/users/me/limit/      - Límite mensual del usuario autenticado
    """
    queryset = Usuario.objects.all()
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ['role', 'limit_enabled']
    search_fields = ['full_name', 'matricula']
    ordering_fields = ['full_name', 'matricula', 'created_at']
    ordering = ['full_name']

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'limite_mensual']:
            permission_classes = [permissions.IsAuthenticated]
        else:
            permission_classes = [permissions.IsAuthenticated, EsAdministrador]
        return [permission() for permission in permission_classes]

    def get_serializer_class(self):
        if self.action == 'create':
            return UsuarioCrearSerializer
        elif self.action in ['update', 'partial_update']:
            return UsuarioActualizarSerializer
        elif self.action == 'limite_mensual':
            return LimiteMensualSerializer
        return UsuarioSerializer

    # =======================
    # OPERACIONES CRUD
    # =======================

    def create(self, request, *args, **kwargs):
        """Crear nuevo usuario"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        usuario = serializer.save()

        logger.info(
            f"Usuario creado - {usuario.matricula} ({usuario.role}) por "
            f"{request.user.matricula}, IP: {obtener_ip_cliente(request)}"
        )

        return APIResponse.created(
            message=Messages.USER_CREATED,
            data=UsuarioSerializer(usuario).data
        )

    def update(self, request, *args, **kwargs):
        """Actualizar usuario"""
        partial = kwargs.pop('partial', False)
        usuario = self.get_object()
        serializer = self.get_serializer(usuario, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        usuario = serializer.save()

        logger.info(f"Usuario actualizado - {usuario.matricula} por {request.user.matricula}")

        return APIResponse.success(
            message=Messages.USER_UPDATED,
            data=UsuarioSerializer(usuario).data
        )

    def destroy(self, request, *args, **kwargs):
        """Eliminar usuario"""
        usuario = self.get_object()

        if usuario.pk == request.user.pk:
            return APIResponse.bad_request(
                message=Messages.CANNOT_DELETE_SELF,
                errors={'code': 'cannot_delete_self'}
            )

        try:
            usuario.delete()
        except ProtectedError:
            raise Conflicto(Messages.USER_HAS_CONSUMPTIONS)

        logger.info(f"Usuario eliminado - {usuario.matricula} por {request.user.matricula}")
        return APIResponse.success(message=Messages.USER_DELETED)

    # =======================
    # ACCIONES PERSONALIZADAS
    # =======================

    @action(detail=False, methods=['patch'], url_path='me/limit')
    def limite_mensual(self, request):
        """Configura el límite de consumo mensual del usuario autenticado."""
        serializer = self.get_serializer(request.user, data=request.data)
        serializer.is_valid(raise_exception=True)
        usuario = serializer.save()

        return APIResponse.success(
            message=Messages.LIMIT_UPDATED,
            data=UsuarioSerializer(usuario).data
        )
