from rest_framework import permissions

from core.constants import Messages
from core.exceptions import Prohibido

# =====================================================
# PERMISOS POR ROL
# =====================================================


class EsAdministrador(permissions.BasePermission):
    """
    Permiso: solo usuarios con rol admin.
    Un usuario no autenticado recibe 401; un usuario común recibe 403.
    """
    message = Messages.FORBIDDEN

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if not request.user.es_admin:
            raise Prohibido()
        return True


class EsAdministradorOSoloLectura(permissions.BasePermission):
    """
    Permiso: cualquier usuario autenticado puede leer, solo admin puede escribir.
    """
    message = Messages.FORBIDDEN

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.es_admin
