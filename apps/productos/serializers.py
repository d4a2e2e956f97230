from django.db import transaction
from rest_framework import serializers

from apps.inventario.services.stock_service import aplicar_movimiento
from core.constants import Messages, TransactionType
from utils.validators import validate_image_upload, validate_import_upload
from .models import Producto

# Rango de las columnas IntegerField en PostgreSQL
ENTERO_MAXIMO = 2147483647

# ==========================================================
# SERIALIZERS DE PRODUCTO
# ==========================================================


class ProductoSerializer(serializers.ModelSerializer):
    """Representación de lectura para listados y detalle."""
    sector_name = serializers.CharField(source='sector.name', read_only=True, default=None)
    photo_path = serializers.CharField(read_only=True)
    stock_status = serializers.CharField(read_only=True)
    inventory_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Producto
        fields = [
            'id', 'name', 'sector', 'sector_name', 'sku', 'category', 'unit_measure',
            'unit_price', 'sale_price', 'stock_quantity', 'min_quantity', 'max_quantity',
            'total_in', 'total_out', 'photo_path', 'low_stock_threshold', 'supplier',
            'last_purchase_date', 'last_count_date', 'expiry_date', 'warranty_date',
            'asset_number', 'status', 'visible_to_users', 'stock_status', 'inventory_value',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ProductoEscrituraSerializer(serializers.ModelSerializer):
    """Alta y edición de productos (multipart con foto opcional)."""

    class Meta:
        model = Producto
        fields = [
            'name', 'sector', 'sku', 'category', 'unit_measure', 'unit_price', 'sale_price',
            'stock_quantity', 'min_quantity', 'max_quantity', 'photo', 'low_stock_threshold',
            'supplier', 'last_purchase_date', 'last_count_date', 'expiry_date',
            'warranty_date', 'asset_number', 'status', 'visible_to_users'
        ]
        extra_kwargs = {
            'stock_quantity': {'max_value': ENTERO_MAXIMO},
            'min_quantity': {'max_value': ENTERO_MAXIMO},
            'max_quantity': {'max_value': ENTERO_MAXIMO},
            'low_stock_threshold': {'max_value': ENTERO_MAXIMO},
        }

    def validate_unit_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError(Messages.PRICE_NEGATIVE)
        return value

    def validate_sale_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError(Messages.PRICE_NEGATIVE)
        return value

    def validate_stock_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError(Messages.STOCK_NEGATIVE)
        return value

    def validate_photo(self, value):
        if value:
            return validate_image_upload(value)
        return value

    def create(self, validated_data):
        stock = validated_data.get('stock_quantity', 0)
        return Producto.objects.create(total_in=stock, total_out=0, **validated_data)

    def update(self, instance, validated_data):
        """
        Guarda solo los campos enviados sobre la fila bloqueada.
        Un stock distinto se registra como movimiento de ajuste, así
        total_in y total_out siguen cuadrando con el stock.
        """
        nuevo_stock = validated_data.pop('stock_quantity', None)
        request = self.context.get('request')
        usuario = getattr(request, 'user', None)

        with transaction.atomic():
            producto = Producto.objects.select_for_update().get(pk=instance.pk)
            for campo, valor in validated_data.items():
                setattr(producto, campo, valor)
            if validated_data:
                producto.save(update_fields=[*validated_data, 'updated_at'])

            if nuevo_stock is not None and nuevo_stock != producto.stock_quantity:
                aplicar_movimiento(
                    producto.pk,
                    nuevo_stock - producto.stock_quantity,
                    usuario=usuario if getattr(usuario, 'is_authenticated', False) else None,
                    transaction_type=TransactionType.AJUSTE,
                    reason=Messages.STOCK_MANUAL_ADJUSTMENT,
                )

        producto.refresh_from_db()
        return producto


class ImportacionProductosSerializer(serializers.Serializer):
    """Archivo de la importación masiva (campo multipart `file`)."""
    file = serializers.FileField(required=False, allow_null=True)

    def validate(self, attrs):
        validate_import_upload(attrs.get('file'))
        return attrs
