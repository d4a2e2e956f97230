"""
Paquete de utilidades para la app de autenticación.
"""
from .helpers import obtener_ip_cliente, es_ip_valida

__all__ = ['obtener_ip_cliente', 'es_ip_valida']
