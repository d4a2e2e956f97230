from django.conf import settings
from django.db import models
from django.utils import timezone

from core.constants import TransactionType


class MovimientoStock(models.Model):
    """
    Movimiento manual de stock (entrada, saída, ajuste o devolução).
    `change` es con signo: positivo suma a total_in, negativo a total_out.
    """
    product = models.ForeignKey(
        'productos.Producto',
        on_delete=models.CASCADE,
        related_name='movimientos'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='movimientos_stock'
    )
    change = models.IntegerField()
    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionType.choices(),
        default=TransactionType.AJUSTE
    )
    reason = models.CharField(max_length=255, null=True, blank=True)
    document_origin = models.CharField(max_length=100, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'stock_transaction'
        verbose_name = 'Movimentação de Estoque'
        verbose_name_plural = 'Movimentações de Estoque'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.product_id} ({self.change:+d})"
