import logging

from rest_framework import serializers

from apps.usuarios.models import Usuario
from core.constants import Messages
from core.exceptions import NoAutorizado

logger = logging.getLogger(__name__)


class LoginSerializer(serializers.Serializer):
    """
    Login por matrícula. Los administradores además necesitan contraseña;
    los usuarios comunes se autentican solo con la matrícula.
    """
    matricula = serializers.CharField(
        max_length=50,
        error_messages={
            'required': Messages.MATRICULA_REQUIRED,
            'blank': Messages.MATRICULA_REQUIRED,
            'null': Messages.MATRICULA_REQUIRED,
        },
    )
    password = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        style={'input_type': 'password'},
    )

    def validate(self, data):
        matricula = data["matricula"].strip()
        password = data.get("password") or ""

        usuario = Usuario.objects.filter(matricula__iexact=matricula, is_active=True).first()
        if not usuario:
            logger.warning(f"Login fallido - matrícula inexistente: {matricula}")
            raise NoAutorizado(Messages.USER_NOT_FOUND_LOGIN)

        if usuario.es_admin:
            if not password:
                logger.warning(f"Login fallido - admin {usuario.matricula} sin contraseña")
                raise NoAutorizado(Messages.ADMIN_PASSWORD_REQUIRED)
            if not usuario.has_usable_password():
                logger.warning(f"Login fallido - admin {usuario.matricula} sin hash de contraseña")
                raise NoAutorizado(Messages.ADMIN_NOT_CONFIGURED)
            if not usuario.check_password(password):
                logger.warning(f"Login fallido - contraseña incorrecta para {usuario.matricula}")
                raise NoAutorizado(Messages.INVALID_PASSWORD)

        data["usuario"] = usuario
        return data


class RefreshTokenSerializer(serializers.Serializer):
    """
    Toma el refresh token del body o, si no viene, de la cookie.
    """
    refresh = serializers.CharField(required=False)

    def validate(self, data):
        refresh = data.get('refresh') or self.context.get('refresh_token')

        if not refresh:
            raise NoAutorizado(Messages.INVALID_REFRESH_TOKEN)

        data['refresh'] = refresh
        return data
