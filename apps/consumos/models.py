from django.conf import settings
from django.db import models
from django.utils import timezone


# ==========================================================
# TABLA: consumption
# ==========================================================
class Consumo(models.Model):
    """
    Consumo registrado por un usuario. El precio se congela al momento del consumo.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='consumos'
    )
    product = models.ForeignKey(
        'productos.Producto',
        on_delete=models.PROTECT,
        related_name='consumos'
    )
    qty = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    consumed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'consumption'
        verbose_name = 'Consumo'
        verbose_name_plural = 'Consumos'
        ordering = ['-consumed_at', '-id']

    def __str__(self):
        return f"{self.user_id} - {self.product_id} x{self.qty}"
