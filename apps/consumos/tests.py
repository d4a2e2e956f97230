"""
Tests de consumos: registro, lecturas por usuario y exportación
"""
import io
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status

from apps.consumos.models import Consumo
from core.constants import Messages
from core.test_utils import TestDataFactory, AuthenticatedAPIClient


class RegistrarConsumoTests(TestCase):
    """POST /api/consumptions/"""

    def setUp(self):
        cache.clear()
        self.usuario = TestDataFactory.create_user()
        self.producto = TestDataFactory.create_product(stock=5, unit_price=Decimal('3.50'))
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.usuario)

    def test_registrar_consumo(self):
        response = self.client.post('/api/consumptions/', {
            'product_id': self.producto.id, 'qty': 2
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        datos = response.data['data']
        self.assertEqual(datos['user'], self.usuario.id)
        self.assertEqual(datos['unit_price'], Decimal('3.50'))
        self.assertEqual(datos['total_price'], Decimal('7.00'))

        self.producto.refresh_from_db()
        self.assertEqual(self.producto.stock_quantity, 3)
        self.assertEqual(self.producto.total_out, 2)

    def test_precio_congelado(self):
        self.client.post('/api/consumptions/', {'product_id': self.producto.id, 'qty': 1}, format='json')
        self.producto.unit_price = Decimal('9.99')
        self.producto.save()

        consumo = Consumo.objects.get()
        self.assertEqual(consumo.unit_price, Decimal('3.50'))
        self.assertEqual(consumo.total_price, Decimal('3.50'))

    def test_cantidad_minima(self):
        response = self.client.post('/api/consumptions/', {
            'product_id': self.producto.id, 'qty': 0
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.QTY_MIN)

    def test_stock_insuficiente(self):
        response = self.client.post('/api/consumptions/', {
            'product_id': self.producto.id, 'qty': 6
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.INSUFFICIENT_STOCK_CONSUMPTION)
        self.producto.refresh_from_db()
        self.assertEqual(self.producto.stock_quantity, 5)
        self.assertFalse(Consumo.objects.exists())

    def test_producto_inexistente(self):
        response = self.client.post('/api/consumptions/', {'product_id': 99999, 'qty': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class LecturaConsumosTests(TestCase):

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.usuario = TestDataFactory.create_user(full_name='Davi Rocha')
        self.otro = TestDataFactory.create_user()
        self.producto = TestDataFactory.create_product(name='Biscoito', unit_price=Decimal('2.00'))
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.usuario)

    def test_usuario_ve_solo_sus_consumos(self):
        TestDataFactory.create_consumption(self.usuario, self.producto, qty=1)
        TestDataFactory.create_consumption(self.otro, self.producto, qty=2)

        response = self.client.get('/api/consumptions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['user'], self.usuario.id)

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/consumptions/')
        self.assertEqual(response.data['count'], 2)

    def test_recientes(self):
        for _ in range(12):
            TestDataFactory.create_consumption(self.usuario, self.producto)
        response = self.client.get('/api/consumptions/recent/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 10)

    def test_propios_con_rango(self):
        hoy = timezone.now()
        TestDataFactory.create_consumption(self.usuario, self.producto, consumed_at=hoy - timedelta(days=40))
        TestDataFactory.create_consumption(self.usuario, self.producto, consumed_at=hoy)

        inicio = (hoy - timedelta(days=7)).date().isoformat()
        response = self.client.get(f'/api/consumptions/my/?start_date={inicio}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)

    def test_total_mensual(self):
        self.usuario.monthly_limit = Decimal('50.00')
        self.usuario.limit_enabled = True
        self.usuario.save()
        TestDataFactory.create_consumption(self.usuario, self.producto, qty=3)
        TestDataFactory.create_consumption(self.otro, self.producto, qty=5)

        response = self.client.get('/api/consumptions/my-monthly-total/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['total'], Decimal('6.00'))
        self.assertEqual(datos['month'], timezone.now().month)
        self.assertEqual(datos['monthly_limit'], Decimal('50.00'))
        self.assertTrue(datos['limit_enabled'])

    def test_exportar_planilla(self):
        TestDataFactory.create_consumption(self.usuario, self.producto, qty=2)

        response = self.client.get('/api/consumptions/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('consumptions.xlsx', response['Content-Disposition'])

        hoja = load_workbook(io.BytesIO(response.content)).active
        encabezado = [celda.value for celda in hoja[1]]
        self.assertEqual(
            encabezado,
            ['ID', 'Product', 'User', 'Quantity', 'Unit Price', 'Total Price', 'Date']
        )
        self.assertTrue(hoja['A1'].font.bold)
        self.assertEqual(hoja['A1'].fill.fgColor.rgb, 'FFE0E0E0')
        self.assertEqual(hoja['B2'].value, 'Biscoito')
        self.assertEqual(hoja['C2'].value, 'Davi Rocha')
        self.assertEqual(hoja['D2'].value, 2)
