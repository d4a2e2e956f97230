from rest_framework import serializers

from core.constants import Messages, TransactionType
from .models import MovimientoStock


class MovimientoStockSerializer(serializers.ModelSerializer):
    # campos de solo lectura para mostrar info útil
    product_name = serializers.CharField(source='product.name', read_only=True)
    user_name = serializers.CharField(source='user.full_name', read_only=True, default=None)

    class Meta:
        model = MovimientoStock
        fields = [
            'id', 'product', 'product_name', 'user', 'user_name', 'change',
            'transaction_type', 'reason', 'document_origin', 'notes', 'created_at'
        ]
        read_only_fields = fields


class CrearMovimientoSerializer(serializers.Serializer):
    """Datos de entrada para registrar un movimiento de stock."""
    product_id = serializers.IntegerField()
    change = serializers.IntegerField()
    transaction_type = serializers.ChoiceField(
        choices=TransactionType.choices(), default=TransactionType.AJUSTE
    )
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    document_origin = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_change(self, value):
        if value == 0:
            raise serializers.ValidationError(Messages.TRANSACTION_ZERO)
        return value


class FiltroMovimientosSerializer(serializers.Serializer):
    sector_id = serializers.IntegerField(required=False)
    product_id = serializers.IntegerField(required=False)
    transaction_type = serializers.ChoiceField(choices=TransactionType.choices(), required=False)
    user_id = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        inicio = attrs.get('start_date')
        fin = attrs.get('end_date')
        if inicio and fin and inicio > fin:
            raise serializers.ValidationError(Messages.INVALID_DATE_RANGE)
        return attrs
