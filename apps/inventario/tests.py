"""
Tests de movimientos de stock e indicadores de inventario
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from apps.inventario.models import MovimientoStock
from apps.inventario.services.indicadores import prioridad_compra
from apps.inventario.services.stock_service import aplicar_movimiento, registrar_consumo
from core.constants import Messages, TransactionType
from core.exceptions import StockInsuficiente
from core.test_utils import TestDataFactory, AuthenticatedAPIClient


class MovimientoStockTests(TestCase):
    """POST/GET /api/stock-transactions/"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.usuario = TestDataFactory.create_user()
        self.producto = TestDataFactory.create_product(name='Papel A4', stock=10)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_entrada_suma_stock_y_total_in(self):
        response = self.client.post('/api/stock-transactions/', {
            'product_id': self.producto.id,
            'change': 5,
            'transaction_type': TransactionType.ENTRADA,
            'reason': 'Compra',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['product_name'], 'Papel A4')

        self.producto.refresh_from_db()
        self.assertEqual(self.producto.stock_quantity, 15)
        self.assertEqual(self.producto.total_in, 15)
        self.assertEqual(self.producto.total_out, 0)

    def test_salida_resta_stock_y_suma_total_out(self):
        response = self.client.post('/api/stock-transactions/', {
            'product_id': self.producto.id, 'change': -4, 'transaction_type': TransactionType.SAIDA
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.producto.refresh_from_db()
        self.assertEqual(self.producto.stock_quantity, 6)
        self.assertEqual(self.producto.total_out, 4)

    def test_stock_insuficiente_no_modifica_nada(self):
        response = self.client.post('/api/stock-transactions/', {
            'product_id': self.producto.id, 'change': -11
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.INSUFFICIENT_STOCK_TRANSACTION)
        self.assertEqual(response.data['errors'], {'current_stock': 10, 'requested': 11})

        self.producto.refresh_from_db()
        self.assertEqual(self.producto.stock_quantity, 10)
        self.assertFalse(MovimientoStock.objects.exists())

    def test_cambio_cero(self):
        response = self.client.post('/api/stock-transactions/', {
            'product_id': self.producto.id, 'change': 0
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.TRANSACTION_ZERO)

    def test_producto_inexistente(self):
        response = self.client.post('/api/stock-transactions/', {
            'product_id': 99999, 'change': 1
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], Messages.PRODUCT_NOT_FOUND)

    def test_usuario_no_puede_registrar(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.post('/api/stock-transactions/', {
            'product_id': self.producto.id, 'change': 1
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_listar_mas_recientes_primero(self):
        aplicar_movimiento(self.producto.id, 2, self.admin)
        aplicar_movimiento(self.producto.id, -1, self.admin)
        response = self.client.get('/api/stock-transactions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([m['change'] for m in response.data['results']], [-1, 2])

    def test_filtrar_movimientos(self):
        aplicar_movimiento(self.producto.id, 3, self.admin, transaction_type=TransactionType.ENTRADA)
        aplicar_movimiento(self.producto.id, -2, self.admin, transaction_type=TransactionType.SAIDA)
        response = self.client.get(
            f'/api/stock-movements/?product_id={self.producto.id}&transaction_type={TransactionType.SAIDA}'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([m['change'] for m in response.data['data']], [-2])

    def test_filtro_con_rango_invalido(self):
        response = self.client.get('/api/stock-movements/?start_date=2025-02-01&end_date=2025-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.INVALID_DATE_RANGE)


class InvarianteStockTests(TestCase):
    """El stock nunca queda negativo y los contadores cuadran con los movimientos"""

    def test_secuencia_de_operaciones(self):
        admin = TestDataFactory.create_admin()
        usuario = TestDataFactory.create_user()
        producto = TestDataFactory.create_product(stock=0)

        aplicar_movimiento(producto.id, 8, admin)
        aplicar_movimiento(producto.id, -3, admin)
        registrar_consumo(usuario, producto.id, 4)
        with self.assertRaises(StockInsuficiente):
            registrar_consumo(usuario, producto.id, 2)
        with self.assertRaises(StockInsuficiente):
            aplicar_movimiento(producto.id, -2, admin)
        aplicar_movimiento(producto.id, 6, admin)
        registrar_consumo(usuario, producto.id, 7)

        producto.refresh_from_db()
        self.assertEqual(producto.stock_quantity, 0)
        self.assertEqual(producto.total_in, 14)
        self.assertEqual(producto.total_out, 3 + 4 + 7)


class IndicadoresInventarioTests(TestCase):

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.sector = TestDataFactory.create_sector('Escritório')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_kpis_por_setor(self):
        TestDataFactory.create_product(sector=self.sector, stock=0)
        TestDataFactory.create_product(sector=self.sector, stock=4, unit_price=Decimal('2.00'))
        TestDataFactory.create_product(stock=50, unit_price=Decimal('1.00'))

        response = self.client.get('/api/inventory/kpis/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        por_nombre = {k['sector_name']: k for k in response.data['data']}
        self.assertEqual(por_nombre['Escritório']['total_products'], 2)
        self.assertEqual(por_nombre['Escritório']['low_stock_count'], 1)
        self.assertEqual(por_nombre['Escritório']['out_of_stock_count'], 1)
        self.assertEqual(por_nombre['Escritório']['total_value'], Decimal('8.00'))
        self.assertEqual(por_nombre['Sem Setor']['total_products'], 1)

    def test_snapshot(self):
        TestDataFactory.create_product(name='Caneta', stock=3, min_quantity=5)
        response = self.client.get('/api/stock-snapshots/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        fila = response.data['data'][0]
        self.assertTrue(fila['is_low_stock'])
        self.assertFalse(fila['is_out_of_stock'])
        self.assertTrue(fila['needs_purchase'])

    def test_recomendaciones_ordenadas_por_prioridad(self):
        TestDataFactory.create_product(name='Medio', stock=8, min_quantity=10)
        TestDataFactory.create_product(name='Zerado', stock=0)
        TestDataFactory.create_product(name='Sobra', stock=30, min_quantity=10)

        response = self.client.get('/api/purchase-recommendations/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual([r['productName'] for r in datos], ['Zerado', 'Medio'])
        self.assertEqual(datos[0]['priority'], 'high')
        self.assertEqual(datos[0]['recommendedQuantity'], 10)
        self.assertEqual(datos[1]['priority'], 'medium')
        self.assertEqual(datos[1]['recommendedQuantity'], 2)

    def test_prioridad_compra(self):
        self.assertEqual(prioridad_compra(0, None), 'high')
        self.assertEqual(prioridad_compra(5, 10), 'high')
        self.assertEqual(prioridad_compra(9, 10), 'medium')
        self.assertEqual(prioridad_compra(11, 10), 'low')

    def test_indicadores_solo_admin(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/inventory/kpis/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
