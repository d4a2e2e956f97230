"""
Indicadores de inventario: KPIs por setor, fotografía de stock y
recomendaciones de compra.
"""
from typing import Any, Dict, List

from apps.productos.models import Producto

SIN_SETOR = 'Sem Setor'
CANTIDAD_COMPRA_POR_DEFECTO = 10
ORDEN_PRIORIDAD = {'high': 0, 'medium': 1, 'low': 2}


def kpis_por_sector() -> List[Dict[str, Any]]:
    """Totales por setor; los productos sin setor se agrupan en 'Sem Setor'."""
    grupos: Dict[Any, Dict[str, Any]] = {}
    for producto in Producto.objects.select_related('sector'):
        clave = producto.sector_id
        grupo = grupos.setdefault(clave, {
            'sector_id': clave,
            'sector_name': producto.sector.name if producto.sector else SIN_SETOR,
            'total_products': 0,
            'total_value': 0,
            'low_stock_count': 0,
            'out_of_stock_count': 0,
        })
        grupo['total_products'] += 1
        grupo['total_value'] += producto.inventory_value
        if producto.stock_quantity == 0:
            grupo['out_of_stock_count'] += 1
        elif producto.stock_quantity <= producto.low_stock_threshold:
            grupo['low_stock_count'] += 1

    return sorted(grupos.values(), key=lambda g: g['sector_name'].lower())


def _necesita_compra(producto: Producto) -> bool:
    if producto.stock_quantity == 0:
        return True
    return producto.min_quantity is not None and producto.stock_quantity <= producto.min_quantity


def snapshot_stock() -> List[Dict[str, Any]]:
    """Fotografía del stock actual de cada producto."""
    resultado = []
    for producto in Producto.objects.select_related('sector').order_by('name'):
        resultado.append({
            'product_id': producto.id,
            'product_name': producto.name,
            'sector_id': producto.sector_id,
            'sector_name': producto.sector.name if producto.sector else None,
            'current_stock': producto.stock_quantity,
            'min_quantity': producto.min_quantity,
            'low_stock_threshold': producto.low_stock_threshold,
            'total_in': producto.total_in,
            'total_out': producto.total_out,
            'unit_price': producto.unit_price,
            'inventory_value': producto.inventory_value,
            'photo_path': producto.photo_path,
            'is_low_stock': producto.stock_quantity <= producto.low_stock_threshold,
            'is_out_of_stock': producto.stock_quantity == 0,
            'needs_purchase': _necesita_compra(producto),
        })
    return resultado


def prioridad_compra(stock: int, minimo) -> str:
    if stock == 0 or (minimo is not None and stock <= minimo * 0.5):
        return 'high'
    if minimo is not None and stock <= minimo:
        return 'medium'
    return 'low'


def recomendaciones_compra() -> List[Dict[str, Any]]:
    """Productos que necesitan compra, ordenados por prioridad."""
    recomendaciones = []
    for producto in Producto.objects.order_by('name'):
        if not _necesita_compra(producto):
            continue
        if producto.min_quantity:
            cantidad = max(producto.min_quantity - producto.stock_quantity, 0)
        else:
            cantidad = CANTIDAD_COMPRA_POR_DEFECTO
        recomendaciones.append({
            'productId': producto.id,
            'productName': producto.name,
            'currentStock': producto.stock_quantity,
            'recommendedQuantity': cantidad,
            'estimatedCost': producto.unit_price * cantidad,
            'priority': prioridad_compra(producto.stock_quantity, producto.min_quantity),
            'photoPath': producto.photo_path,
        })

    return sorted(recomendaciones, key=lambda r: ORDEN_PRIORIDAD[r['priority']])
