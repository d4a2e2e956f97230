import re

from rest_framework import serializers

from core.constants import Messages


class RangoFechasMixin:
    """Valida que start_date no sea posterior a end_date."""

    def validate(self, attrs):
        fecha_desde = attrs.get("start_date")
        fecha_hasta = attrs.get("end_date")

        if fecha_desde and fecha_hasta and fecha_desde > fecha_hasta:
            raise serializers.ValidationError(Messages.INVALID_DATE_RANGE)
        return attrs


class TopConsumidosSerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)


class ConsumoUsuarioFiltroSerializer(RangoFechasMixin, serializers.Serializer):
    user_id = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class ConsumoFoodstationFiltroSerializer(RangoFechasMixin, serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    user_id = serializers.IntegerField(required=False)
    group_by = serializers.ChoiceField(
        choices=[("user", "user"), ("none", "none")], required=False
    )


class PanoramaFoodstationSerializer(serializers.Serializer):
    days = serializers.ChoiceField(choices=[(7, "7"), (15, "15"), (30, "30")], default=30)


class ControlConsumoFiltroSerializer(RangoFechasMixin, serializers.Serializer):
    user_id = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class ExportacionControlConsumoSerializer(ControlConsumoFiltroSerializer):
    # Formato de salida: consolidado (con totales mensuales) o solo detalle
    format = serializers.ChoiceField(
        choices=[("consolidated", "Consolidado"), ("detailed", "Detalhado")],
        default="consolidated",
    )


class MensualSectorSerializer(serializers.Serializer):
    cadence = serializers.ChoiceField(
        choices=[("weekly", "Semanal"), ("biweekly", "Quinzenal"), ("monthly", "Mensal")],
        default="monthly",
    )


class LimpiezaSectorSerializer(serializers.Serializer):
    month = serializers.CharField()
    cadence = serializers.ChoiceField(
        choices=[("first_half", "1ª quinzena"), ("second_half", "2ª quinzena"), ("full_month", "Mês completo")],
        default="full_month",
    )
    sector_id = serializers.IntegerField(required=False)
    compare_previous = serializers.BooleanField(required=False, default=False)

    def validate_month(self, value):
        value = value.strip()
        if not re.fullmatch(r"\d{4}-\d{2}", value) or not 1 <= int(value[5:]) <= 12:
            raise serializers.ValidationError(Messages.INVALID_MONTH)
        return value


class MaquinaCafeSerializer(serializers.Serializer):
    cadence = serializers.ChoiceField(
        choices=[("weekly", "Semanal"), ("biweekly", "Quinzenal")], default="weekly"
    )
    weeks = serializers.IntegerField(required=False, min_value=1, max_value=52, default=4)
    sector_id = serializers.IntegerField(required=False)


class InventarioGeneralSerializer(serializers.Serializer):
    sector_id = serializers.IntegerField(required=False)
    keyword = serializers.CharField(required=False, allow_blank=True)
    include_out_of_stock = serializers.BooleanField(required=False, default=True)


class GestionSectorSerializer(serializers.Serializer):
    sector_id = serializers.IntegerField()
    days = serializers.IntegerField(required=False, min_value=1, max_value=365, default=30)
