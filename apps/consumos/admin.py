from django.contrib import admin
from .models import Consumo


@admin.register(Consumo)
class ConsumoAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'product', 'qty', 'unit_price', 'total_price', 'consumed_at']
    search_fields = ['user__matricula', 'user__full_name', 'product__name']
    ordering = ['-consumed_at']
    readonly_fields = ['unit_price', 'total_price']
