"""
Constantes centralizadas para el módulo core.
"""

from .estados import UserRole, ProductStatus, TransactionType, StockStatus
from .responses import APIResponse
from .mensajes import Messages
from .seguridad import SecurityConstants

__all__ = [
    'UserRole',
    'ProductStatus',
    'TransactionType',
    'StockStatus',
    'APIResponse',
    'Messages',
    'SecurityConstants',
]
