from rest_framework import serializers

from core.constants import Messages
from .models import Consumo


class ConsumoSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    user_name = serializers.CharField(source='user.full_name', read_only=True)
    matricula = serializers.CharField(source='user.matricula', read_only=True)

    class Meta:
        model = Consumo
        fields = [
            'id', 'user', 'user_name', 'matricula', 'product', 'product_name',
            'qty', 'unit_price', 'total_price', 'consumed_at'
        ]
        read_only_fields = fields


class CrearConsumoSerializer(serializers.Serializer):
    """El usuario siempre es el autenticado; solo se recibe producto y cantidad."""
    product_id = serializers.IntegerField()
    qty = serializers.IntegerField(min_value=1, error_messages={'min_value': Messages.QTY_MIN})


class RangoFechasSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        inicio = attrs.get('start_date')
        fin = attrs.get('end_date')
        if inicio and fin and inicio > fin:
            raise serializers.ValidationError(Messages.INVALID_DATE_RANGE)
        return attrs
