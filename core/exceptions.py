"""
Taxonomía de errores del API y manejador de excepciones de DRF.

Todas las excepciones se convierten en la respuesta estándar
{"success": false, "message": ..., "errors": ...} en el borde del request.
"""
import logging

from django.db.models import ProtectedError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler, set_rollback

from core.constants import APIResponse, Messages

logger = logging.getLogger(__name__)


class ErrorNegocio(exceptions.APIException):
    """Base para errores de reglas de negocio con datos opcionales de contexto."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = Messages.OPERATION_FAILED
    default_code = 'error_negocio'

    def __init__(self, detail=None, code=None, errors=None):
        super().__init__(detail, code)
        self.errors = errors


class NoAutorizado(exceptions.AuthenticationFailed):
    default_detail = Messages.UNAUTHORIZED
    default_code = 'no_autorizado'


class Prohibido(exceptions.PermissionDenied):
    default_detail = Messages.FORBIDDEN
    default_code = 'prohibido'


class NoEncontrado(exceptions.NotFound):
    default_detail = Messages.NOT_FOUND
    default_code = 'no_encontrado'


class Conflicto(ErrorNegocio):
    """Duplicados o violaciones de integridad referencial."""
    default_code = 'conflicto'


class StockInsuficiente(ErrorNegocio):
    """El cambio llevaría el stock del producto por debajo de cero."""
    default_code = 'stock_insuficiente'


def _primer_mensaje(data):
    """Devuelve el primer texto de error encontrado en la estructura de DRF."""
    if isinstance(data, dict):
        for value in data.values():
            mensaje = _primer_mensaje(value)
            if mensaje:
                return mensaje
        return None
    if isinstance(data, (list, tuple)):
        for value in data:
            mensaje = _primer_mensaje(value)
            if mensaje:
                return mensaje
        return None
    return str(data) if data is not None else None


def manejador_excepciones(exc, context):
    """EXCEPTION_HANDLER de REST_FRAMEWORK."""
    if isinstance(exc, ProtectedError):
        exc = Conflicto(Messages.OPERATION_FAILED)

    response = exception_handler(exc, context)

    if response is None:
        vista = context.get('view').__class__.__name__ if context.get('view') else '-'
        logger.error(f"Error no controlado en {vista}: {exc}", exc_info=exc)
        set_rollback()
        return APIResponse.error(Messages.SERVER_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        body = {
            'success': False,
            'message': _primer_mensaje(response.data) or Messages.INVALID_DATA,
            'errors': response.data,
        }
    else:
        detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
        body = {
            'success': False,
            'message': str(detail) if detail else Messages.OPERATION_FAILED,
        }
        errors = getattr(exc, 'errors', None)
        if errors is not None:
            body['errors'] = errors

    response.data = body
    return response
