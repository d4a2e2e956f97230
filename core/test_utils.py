"""
Utilidades de test y factories para crear datos de prueba
"""
from decimal import Decimal
import random
import string

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.consumos.models import Consumo
from apps.productos.models import Producto
from apps.sectores.models import Sector
from core.constants import UserRole

Usuario = get_user_model()


class TestDataFactory:
    """Factory de datos de prueba"""

    @staticmethod
    def random_string(length=8):
        return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))

    @staticmethod
    def create_user(matricula=None, full_name=None, password=None, role=UserRole.USER, **extra):
        """Usuario común (sin contraseña) salvo que se indique otra cosa"""
        if not matricula:
            matricula = f'U{TestDataFactory.random_string(6)}'
        return Usuario.objects.create_user(
            matricula=matricula,
            full_name=full_name or f'Usuário {matricula}',
            password=password,
            role=role,
            **extra
        )

    @staticmethod
    def create_admin(matricula=None, password='Admin123'):
        if not matricula:
            matricula = f'A{TestDataFactory.random_string(6)}'
        return TestDataFactory.create_user(
            matricula=matricula,
            full_name=f'Admin {matricula}',
            password=password,
            role=UserRole.ADMIN,
        )

    @staticmethod
    def create_sector(name=None):
        if not name:
            name = f'Setor {TestDataFactory.random_string(6)}'
        return Sector.objects.create(name=name)

    @staticmethod
    def create_product(name=None, sector=None, stock=20, unit_price=None, low_stock_threshold=10, **extra):
        """Producto con total_in igual al stock inicial, como lo crea el API"""
        if not name:
            name = f'Produto {TestDataFactory.random_string(6)}'
        return Producto.objects.create(
            name=name,
            sector=sector,
            sku=extra.pop('sku', f'SKU-{TestDataFactory.random_string(6)}'),
            unit_price=unit_price if unit_price is not None else Decimal('2.50'),
            stock_quantity=stock,
            total_in=stock,
            total_out=0,
            low_stock_threshold=low_stock_threshold,
            **extra
        )

    @staticmethod
    def create_consumption(user, product, qty=1, consumed_at=None):
        """Registra un consumo directo en la base, sin tocar el stock"""
        datos = {
            'user': user,
            'product': product,
            'qty': qty,
            'unit_price': product.unit_price,
            'total_price': product.unit_price * qty,
        }
        if consumed_at is not None:
            datos['consumed_at'] = consumed_at
        return Consumo.objects.create(**datos)


class AuthenticatedAPIClient(APIClient):
    """APIClient con helper de autenticación"""

    def authenticate_user(self, user):
        """Autentica el cliente con un usuario vía Bearer"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Quita la autenticación"""
        self.credentials()
