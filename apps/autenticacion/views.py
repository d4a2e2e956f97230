from rest_framework.decorators import api_view, permission_classes, throttle_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from django.utils import timezone
import logging

from apps.usuarios.serializers import UsuarioSerializer
from core.constants import APIResponse, Messages
from core.exceptions import NoAutorizado
from .serializers import LoginSerializer, RefreshTokenSerializer
from .utils.helpers import obtener_ip_cliente
from .utils.jwt_manager import JWTManager
from .utils.throttling import LoginRateThrottle

logger = logging.getLogger(__name__)


# ============================================
# LOGIN
# ============================================
@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_usuario(request):
    """
    Login por matrícula; los tokens JWT viajan en cookies HttpOnly.
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    usuario = serializer.validated_data["usuario"]

    usuario.last_login = timezone.now()
    usuario.save(update_fields=["last_login"])

    tokens = JWTManager.generar_tokens(usuario)

    response = APIResponse.success(
        message=Messages.WELCOME_USER.format(nombre=usuario.full_name),
        data={"user": UsuarioSerializer(usuario).data},
    )
    JWTManager.set_tokens_in_cookies(response, tokens)

    logger.info(
        f"Login exitoso - {usuario.matricula} ({usuario.role}), IP: {obtener_ip_cliente(request)}"
    )
    return response


# ============================================
# LOGOUT
# ============================================
@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def logout_usuario(request):
    """
    Cierra la sesión: invalida el refresh token (si existe) y borra las cookies.
    Funciona aunque no haya sesión activa.
    """
    refresh_token = JWTManager.get_token_from_cookie(request, "refresh")

    if refresh_token:
        JWTManager.invalidar_refresh_token(refresh_token)

    response = APIResponse.success(message=Messages.LOGOUT_SUCCESS)
    JWTManager.clear_cookies(response)

    logger.info(f"Logout, IP: {obtener_ip_cliente(request)}")
    return response


# ============================================
# REFRESH TOKEN
# ============================================
@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def refresh_token(request):
    """
    Renueva el par de tokens a partir del refresh token (rotación con blacklist).
    """
    entrada = RefreshTokenSerializer(
        data=request.data,
        context={"refresh_token": JWTManager.get_token_from_cookie(request, "refresh")},
    )
    entrada.is_valid(raise_exception=True)

    serializer = TokenRefreshSerializer(data={"refresh": entrada.validated_data["refresh"]})
    try:
        serializer.is_valid(raise_exception=True)
    except (TokenError, AuthenticationFailed):
        logger.warning(f"Refresh token inválido, IP: {obtener_ip_cliente(request)}")
        raise NoAutorizado(Messages.INVALID_REFRESH_TOKEN)

    tokens = serializer.validated_data
    response = APIResponse.success(message=Messages.TOKEN_REFRESHED)
    JWTManager.set_tokens_in_cookies(response, tokens)
    return response


# ============================================
# USUARIO ACTUAL
# ============================================
@api_view(["GET"])
@permission_classes([IsAuthenticated])
def usuario_actual(request):
    return APIResponse.success(data={"user": UsuarioSerializer(request.user).data})
