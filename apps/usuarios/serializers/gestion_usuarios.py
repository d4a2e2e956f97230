from rest_framework import serializers

from core.constants import Messages, UserRole
from utils.validators import validate_password_length, validate_unique_matricula
from ..models import Usuario

# =====================================================
# SERIALIZERS PARA GESTIÓN DE USUARIOS
# =====================================================


class UsuarioSerializer(serializers.ModelSerializer):
    """Representación pública del usuario (nunca expone el hash de la contraseña)."""
    has_password = serializers.BooleanField(source='tiene_password', read_only=True)

    class Meta:
        model = Usuario
        fields = [
            'id', 'full_name', 'matricula', 'role', 'monthly_limit',
            'limit_enabled', 'has_password', 'created_at'
        ]
        read_only_fields = fields


class UsuarioCrearSerializer(serializers.ModelSerializer):
    """Serializer para crear usuarios como administrador"""
    password = serializers.CharField(
        write_only=True, required=False, allow_blank=True, max_length=128
    )

    class Meta:
        model = Usuario
        fields = ['full_name', 'matricula', 'role', 'password', 'monthly_limit', 'limit_enabled']
        extra_kwargs = {
            'monthly_limit': {'min_value': 0},
            # La unicidad se valida sin distinguir mayúsculas en validate_matricula
            'matricula': {'validators': []},
        }

    def validate_matricula(self, value):
        return validate_unique_matricula(value)

    def validate_password(self, value):
        if value:
            return validate_password_length(value)
        return value

    def validate(self, attrs):
        if attrs.get('role') == UserRole.ADMIN and not attrs.get('password'):
            raise serializers.ValidationError({'password': Messages.ADMIN_PASSWORD_ON_CREATE})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password', None) or None
        return Usuario.objects.create_user(password=password, **validated_data)


class UsuarioActualizarSerializer(serializers.ModelSerializer):
    """
    Actualización administrativa.
    Promover a admin exige una contraseña existente o una nueva no vacía.
    """
    password = serializers.CharField(
        write_only=True, required=False, allow_blank=True, max_length=128
    )

    class Meta:
        model = Usuario
        fields = ['full_name', 'role', 'password', 'monthly_limit', 'limit_enabled']
        extra_kwargs = {'monthly_limit': {'min_value': 0}}

    def validate_password(self, value):
        if value and value.strip():
            return validate_password_length(value)
        return value

    def validate(self, attrs):
        role = attrs.get('role', self.instance.role if self.instance else None)
        nueva = (attrs.get('password') or '').strip()

        if role == UserRole.ADMIN:
            tiene_actual = self.instance is not None and self.instance.tiene_password
            if not tiene_actual and not nueva:
                raise serializers.ValidationError({'password': Messages.ADMIN_PASSWORD_ON_PROMOTE})
        return attrs

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        if password and password.strip():
            instance.set_password(password)

        instance.save()
        return instance


class LimiteMensualSerializer(serializers.ModelSerializer):
    """El propio usuario configura su límite de consumo mensual."""
    monthly_limit = serializers.DecimalField(
        max_digits=12, decimal_places=2, allow_null=True, required=True,
        min_value=0, error_messages={'min_value': Messages.LIMIT_NEGATIVE}
    )
    limit_enabled = serializers.BooleanField(required=True)

    class Meta:
        model = Usuario
        fields = ['monthly_limit', 'limit_enabled']
