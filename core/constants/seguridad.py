"""
Constantes de seguridad centralizadas.
Incluye las rutas públicas del API y los nombres de cookies de sesión.
"""


class SecurityConstants:
    """Constantes de seguridad y validación del sistema."""

    # =====================================================
    # RUTAS PÚBLICAS (Sin autenticación requerida)
    # =====================================================
    RUTAS_PUBLICAS_API = [
        '/api/auth/login/',
        '/api/auth/logout/',
        '/api/auth/refresh/',
        '/api/schema/',
        '/api/docs/',
        '/api/redoc/',
    ]

    # =====================================================
    # COOKIES DE SESIÓN
    # =====================================================
    COOKIE_ACCESS = 'access_token'
    COOKIE_REFRESH = 'refresh_token'
    COOKIE_ACCESS_PATH = '/'
    COOKIE_REFRESH_PATH = '/api/auth/refresh/'

    # =====================================================
    # ARCHIVOS SUBIDOS
    # =====================================================
    EXTENSIONES_IMAGEN = ['jpeg', 'jpg', 'png', 'gif', 'webp']
    MAX_TAMANO_IMAGEN = 5 * 1024 * 1024          # 5MB
    EXTENSIONES_IMPORTACION = ['xlsx', 'csv']
    MAX_TAMANO_IMPORTACION = 10 * 1024 * 1024    # 10MB
