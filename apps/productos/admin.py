from django.contrib import admin
from .models import Producto


@admin.register(Producto)
class ProductoAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'name', 'sku', 'get_sector', 'unit_price', 'stock_quantity',
        'status', 'visible_to_users', 'estado_stock', 'created_at'
    ]
    list_filter = ['status', 'sector', 'visible_to_users']
    search_fields = ['name', 'sku', 'category']
    ordering = ['name']
    readonly_fields = ['total_in', 'total_out', 'created_at', 'updated_at']

    fieldsets = (
        ('Informação Básica', {
            'fields': ('name', 'sku', 'category', 'sector', 'unit_measure', 'photo')
        }),
        ('Preço e Estoque', {
            'fields': (
                'unit_price', 'sale_price', 'stock_quantity', 'min_quantity',
                'max_quantity', 'low_stock_threshold', 'total_in', 'total_out'
            )
        }),
        ('Controle', {
            'fields': (
                'supplier', 'last_purchase_date', 'last_count_date', 'expiry_date',
                'warranty_date', 'asset_number', 'status', 'visible_to_users'
            )
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_sector(self, obj):
        return obj.sector.name if obj.sector else 'Sem setor'
    get_sector.short_description = 'Setor'

    def estado_stock(self, obj):
        return obj.stock_status
    estado_stock.short_description = 'Estado Estoque'
