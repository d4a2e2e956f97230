# apps/inventario/services/stock_service.py
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F

from apps.consumos.models import Consumo
from apps.productos.models import Producto
from core.constants import Messages, TransactionType
from core.exceptions import ErrorNegocio, NoEncontrado, StockInsuficiente
from ..models import MovimientoStock

logger = logging.getLogger(__name__)


def _bloquear_producto(producto_id) -> Producto:
    """Obtiene el producto con la fila bloqueada hasta el fin de la transacción."""
    try:
        return Producto.objects.select_for_update().get(pk=producto_id)
    except Producto.DoesNotExist:
        raise NoEncontrado(Messages.PRODUCT_NOT_FOUND)


@transaction.atomic
def aplicar_movimiento(producto_id, change: int, usuario=None,
                       transaction_type=TransactionType.AJUSTE, reason=None,
                       document_origin=None, notes=None) -> MovimientoStock:
    """
    Registra un movimiento de stock y ajusta stock_quantity, total_in y total_out.
    Rechaza el cambio antes de tocar la fila si dejaría el stock negativo.
    """
    if change == 0:
        raise ErrorNegocio(Messages.TRANSACTION_ZERO)

    producto = _bloquear_producto(producto_id)

    if change < 0 and abs(change) > producto.stock_quantity:
        logger.warning(
            f"Movimiento rechazado - producto {producto.id} stock {producto.stock_quantity}, "
            f"cambio {change}"
        )
        raise StockInsuficiente(
            Messages.INSUFFICIENT_STOCK_TRANSACTION,
            errors={'current_stock': producto.stock_quantity, 'requested': abs(change)}
        )

    movimiento = MovimientoStock.objects.create(
        product=producto,
        user=usuario,
        change=change,
        transaction_type=transaction_type or TransactionType.AJUSTE,
        reason=reason,
        document_origin=document_origin,
        notes=notes,
    )

    if change > 0:
        Producto.objects.filter(pk=producto.pk).update(
            stock_quantity=F('stock_quantity') + change,
            total_in=F('total_in') + change,
        )
    else:
        Producto.objects.filter(pk=producto.pk).update(
            stock_quantity=F('stock_quantity') + change,
            total_out=F('total_out') + abs(change),
        )

    logger.info(
        f"Movimiento de stock - producto {producto.id} ({producto.name}) {change:+d} "
        f"[{movimiento.transaction_type}] por {getattr(usuario, 'matricula', '-')}"
    )
    return movimiento


@transaction.atomic
def registrar_consumo(usuario, producto_id, qty: int) -> Consumo:
    """
    Registra el consumo del usuario congelando el precio unitario actual
    y descuenta el stock del producto.
    """
    producto = _bloquear_producto(producto_id)

    if qty > producto.stock_quantity:
        logger.warning(
            f"Consumo rechazado - {usuario.matricula} pidió {qty} de producto {producto.id} "
            f"(stock {producto.stock_quantity})"
        )
        raise StockInsuficiente(
            Messages.INSUFFICIENT_STOCK_CONSUMPTION,
            errors={'current_stock': producto.stock_quantity, 'requested': qty}
        )

    unit_price = producto.unit_price or Decimal('0')
    consumo = Consumo.objects.create(
        user=usuario,
        product=producto,
        qty=qty,
        unit_price=unit_price,
        total_price=unit_price * qty,
    )

    Producto.objects.filter(pk=producto.pk).update(
        stock_quantity=F('stock_quantity') - qty,
        total_out=F('total_out') + qty,
    )

    logger.info(f"Consumo registrado - {usuario.matricula}: {qty}x producto {producto.id}")
    return consumo
