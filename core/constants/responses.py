"""
Clase para estandarizar las respuestas HTTP de la API.
Toda respuesta lleva `success` y `message`; los datos van en `data` y los errores en `errors`.
"""

from rest_framework.response import Response
from rest_framework import status
from .mensajes import Messages


class APIResponse:
    """Helpers estandarizados para las respuestas del API."""

    @staticmethod
    def success(message=None, data=None, status_code=200):
        """Respuesta exitosa con mensaje opcional."""
        if message is None:
            message = Messages.OPERATION_SUCCESS

        response_data = {
            'success': True,
            'message': message
        }
        if data is not None:
            response_data['data'] = data

        return Response(response_data, status=status_code)

    @staticmethod
    def error(message=None, errors=None, status_code=400, **kwargs):
        """Respuesta de error genérica."""
        if message is None:
            message = Messages.OPERATION_FAILED

        response_data = {
            'success': False,
            'message': message
        }
        if errors is not None:
            response_data['errors'] = errors
        response_data.update(kwargs)

        return Response(response_data, status=status_code)

    @staticmethod
    def created(message=None, data=None):
        """Atajo para respuestas 201."""
        return APIResponse.success(message, data, status_code=status.HTTP_201_CREATED)

    @staticmethod
    def bad_request(message=None, errors=None):
        """Atajo para respuestas 400."""
        if message is None:
            message = Messages.INVALID_DATA
        return APIResponse.error(message, errors, status_code=status.HTTP_400_BAD_REQUEST)

