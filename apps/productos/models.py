from django.db import models

from core.constants import ProductStatus, StockStatus


def clasificar_stock(stock, umbral, maximo=None):
    """
    Estado de stock usado en listados y reportes:
    0 -> Zerado, <= umbral -> Baixo, > máximo -> Crítico, resto OK.
    """
    if stock <= 0:
        return StockStatus.ZERADO
    if umbral is not None and stock <= umbral:
        return StockStatus.BAIXO
    if maximo is not None and stock > maximo:
        return StockStatus.CRITICO
    return StockStatus.OK


class ProductoQuerySet(models.QuerySet):

    def stock_bajo(self):
        return self.filter(stock_quantity__lte=models.F('low_stock_threshold'))


# ==========================================================
# TABLA: producto
# ==========================================================
class Producto(models.Model):
    name = models.CharField(max_length=200)
    sector = models.ForeignKey(
        'sectores.Sector',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='productos'
    )
    sku = models.CharField(max_length=100, null=True, blank=True)
    category = models.CharField(max_length=100, null=True, blank=True)
    unit_measure = models.CharField(max_length=50, null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    stock_quantity = models.IntegerField(default=0)
    min_quantity = models.IntegerField(null=True, blank=True)
    max_quantity = models.IntegerField(null=True, blank=True)
    total_in = models.IntegerField(default=0)
    total_out = models.IntegerField(default=0)
    photo = models.ImageField(upload_to='products/', null=True, blank=True)
    low_stock_threshold = models.IntegerField(default=10)
    supplier = models.CharField(max_length=200, null=True, blank=True)
    last_purchase_date = models.DateField(null=True, blank=True)
    last_count_date = models.DateField(null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    warranty_date = models.DateField(null=True, blank=True)
    asset_number = models.CharField(max_length=100, null=True, blank=True)
    status = models.CharField(
        max_length=10,
        choices=ProductStatus.choices(),
        default=ProductStatus.ATIVO
    )
    visible_to_users = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductoQuerySet.as_manager()

    class Meta:
        db_table = 'producto'
        ordering = ['name']
        verbose_name = 'Produto'
        verbose_name_plural = 'Produtos'

    def __str__(self):
        return f"{self.id} - {self.name}"

    @property
    def photo_path(self):
        if self.photo:
            return self.photo.url
        return None

    @property
    def inventory_value(self):
        return self.unit_price * self.stock_quantity

    @property
    def stock_status(self):
        return clasificar_stock(self.stock_quantity, self.low_stock_threshold, self.max_quantity)

    @property
    def stock_bajo(self):
        return self.stock_quantity <= self.low_stock_threshold
