from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from django.conf import settings
import logging

from core.constants import SecurityConstants

logger = logging.getLogger(__name__)


class JWTManager:
    @staticmethod
    def generar_tokens(usuario):
        """
        Genera access y refresh tokens para un usuario.
        """
        refresh = RefreshToken.for_user(usuario)

        # Claims propios del sistema
        refresh['matricula'] = usuario.matricula
        refresh['role'] = usuario.role

        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh)
        }

    @staticmethod
    def _escribir_cookie(response, nombre, valor, duracion, path):
        response.set_cookie(
            key=nombre,
            value=valor,
            httponly=True,
            secure=not settings.DEBUG,
            samesite="Lax",
            max_age=int(duracion.total_seconds()),
            path=path,
        )

    @staticmethod
    def set_tokens_in_cookies(response, tokens):
        """
        Escribe el par de tokens en cookies HttpOnly (secure fuera de DEBUG, SameSite Lax).
        El refresh solo viaja al endpoint de refresh.
        """
        duraciones = settings.SIMPLE_JWT
        JWTManager._escribir_cookie(
            response, SecurityConstants.COOKIE_ACCESS, tokens["access"],
            duraciones["ACCESS_TOKEN_LIFETIME"], SecurityConstants.COOKIE_ACCESS_PATH,
        )
        if tokens.get("refresh"):
            JWTManager._escribir_cookie(
                response, SecurityConstants.COOKIE_REFRESH, tokens["refresh"],
                duraciones["REFRESH_TOKEN_LIFETIME"], SecurityConstants.COOKIE_REFRESH_PATH,
            )
        return response

    @staticmethod
    def get_token_from_cookie(request, token_type="access"):
        cookie_name = f"{token_type}_token"
        return request.COOKIES.get(cookie_name)

    @staticmethod
    def clear_cookies(response):
        """
        Elimina las cookies de autenticación.
        """
        response.delete_cookie(SecurityConstants.COOKIE_ACCESS, path=SecurityConstants.COOKIE_ACCESS_PATH)
        response.delete_cookie(SecurityConstants.COOKIE_REFRESH, path=SecurityConstants.COOKIE_REFRESH_PATH)
        return response

    @staticmethod
    def invalidar_refresh_token(refresh_token_str):
        """
        Invalida un refresh token agregándolo a la blacklist.
        """
        try:
            token = RefreshToken(refresh_token_str)
            token.blacklist()
            return True
        except TokenError as e:
            # Token ya inválido, expirado o en blacklist
            logger.info(f"Refresh token no invalidado: {e}")
            return False
