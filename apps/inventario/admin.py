from django.contrib import admin
from .models import MovimientoStock


@admin.register(MovimientoStock)
class MovimientoStockAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'change', 'transaction_type', 'user', 'created_at']
    list_filter = ['transaction_type']
    search_fields = ['product__name', 'reason', 'document_origin']
    ordering = ['-created_at']
