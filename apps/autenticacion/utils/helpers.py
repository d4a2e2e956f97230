"""
Utilidades compartidas para la app de autenticación.
"""
import ipaddress
import logging
from django.conf import settings

logger = logging.getLogger(__name__)


def obtener_ip_cliente(request):
    """
    Obtiene la IP del cliente considerando proxies confiables.

    Sin TRUSTED_PROXY_COUNT configurado se usa REMOTE_ADDR. Con N proxies,
    la IP del cliente es la N+1-ésima desde el final de X-Forwarded-For;
    una cadena más corta o una IP inválida se tratan como spoofing.
    """
    remote_addr = request.META.get('REMOTE_ADDR')
    proxies_confiables = getattr(settings, 'TRUSTED_PROXY_COUNT', 0)

    if proxies_confiables == 0:
        return remote_addr

    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if not x_forwarded_for:
        return remote_addr

    ips = [ip.strip() for ip in x_forwarded_for.split(',')]
    if len(ips) <= proxies_confiables:
        logger.warning(
            f"X-Forwarded-For con menos IPs de las esperadas: {x_forwarded_for}. "
            f"Usando REMOTE_ADDR: {remote_addr}"
        )
        return remote_addr

    ip_cliente = ips[-(proxies_confiables + 1)]
    if not es_ip_valida(ip_cliente):
        logger.warning(f"IP inválida en X-Forwarded-For: '{ip_cliente}'. Usando REMOTE_ADDR")
        return remote_addr

    return ip_cliente


def es_ip_valida(ip_string):
    try:
        ipaddress.ip_address(ip_string)
        return True
    except ValueError:
        return False
