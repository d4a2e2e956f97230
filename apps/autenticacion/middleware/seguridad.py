"""
Middlewares de seguridad: JWT desde cookies y headers de respuesta.
"""
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from core.constants import Messages, SecurityConstants
import logging

logger = logging.getLogger(__name__)


class JWTCookieAuthenticationMiddleware(MiddlewareMixin):
    """
    Pasa el access token de la cookie al header Authorization para que
    JWTAuthentication de DRF lo valide. Las rutas protegidas del API sin
    token reciben 401 antes de llegar a la vista.
    """
    def process_request(self, request):
        # Clientes que ya envían Bearer (tests, integraciones)
        if request.META.get("HTTP_AUTHORIZATION"):
            return None

        path = request.path or ""

        # Fuera del API: admin, media, estáticos
        if not path.startswith("/api/"):
            return None

        if path in SecurityConstants.RUTAS_PUBLICAS_API:
            return None

        access_token = request.COOKIES.get(SecurityConstants.COOKIE_ACCESS)
        if access_token:
            request.META["HTTP_AUTHORIZATION"] = f"Bearer {access_token}"
            return None

        logger.debug(f"Petición sin token a ruta protegida: {path}")
        return JsonResponse(
            {"success": False, "message": Messages.UNAUTHORIZED},
            status=401,
        )


class SecurityHeadersMiddleware(MiddlewareMixin):
    """
    Agrega headers de seguridad sin sobrescribir los de django-cors-headers.
    """
    def process_response(self, request, response):
        response.setdefault("X-Frame-Options", "DENY")
        response.setdefault("X-Content-Type-Options", "nosniff")
        response.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")

        # Las respuestas de autenticación no se cachean
        if request.path.startswith("/api/auth/"):
            response["Cache-Control"] = "no-store"

        return response
