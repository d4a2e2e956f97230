"""
Tests de setores: CRUD y endpoints de detalle
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from apps.sectores.models import Sector
from core.constants import Messages
from core.test_utils import TestDataFactory, AuthenticatedAPIClient


class SectorTests(TestCase):

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.usuario = TestDataFactory.create_user()
        self.sector = TestDataFactory.create_sector('Limpeza')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_listar_como_usuario(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.get('/api/sectors/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['results'][0]['name'], 'Limpeza')

    def test_crear_setor(self):
        response = self.client.post('/api/sectors/', {'name': '  FoodStation  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['name'], 'FoodStation')

    def test_nombre_duplicado(self):
        response = self.client.post('/api/sectors/', {'name': 'limpeza'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.SECTOR_NAME_EXISTS)

    def test_usuario_no_puede_crear(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.post('/api/sectors/', {'name': 'Café'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], Messages.FORBIDDEN)

    def test_actualizar_setor(self):
        response = self.client.put(f'/api/sectors/{self.sector.id}/', {'name': 'Limpeza Geral'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.sector.refresh_from_db()
        self.assertEqual(self.sector.name, 'Limpeza Geral')

    def test_eliminar_setor_con_productos(self):
        TestDataFactory.create_product(sector=self.sector)
        response = self.client.delete(f'/api/sectors/{self.sector.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.SECTOR_HAS_PRODUCTS)
        self.assertTrue(Sector.objects.filter(pk=self.sector.pk).exists())

    def test_eliminar_setor_vacio(self):
        response = self.client.delete(f'/api/sectors/{self.sector.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Sector.objects.filter(pk=self.sector.pk).exists())

    def test_productos_del_setor(self):
        TestDataFactory.create_product(name='Detergente', sector=self.sector)
        TestDataFactory.create_product(name='Sem setor')
        response = self.client.get(f'/api/sectors/{self.sector.id}/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data['data']], ['Detergente'])

    def test_transacciones_solo_admin(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.get(f'/api/sectors/{self.sector.id}/transactions/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_desempeno(self):
        producto = TestDataFactory.create_product(sector=self.sector, stock=5, unit_price=Decimal('4.00'))
        TestDataFactory.create_product(sector=self.sector, stock=0)
        TestDataFactory.create_consumption(self.usuario, producto, qty=3)

        response = self.client.get(f'/api/sectors/{self.sector.id}/performance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['total_products'], 2)
        self.assertEqual(datos['low_stock_count'], 1)
        self.assertEqual(datos['out_of_stock_count'], 1)
        self.assertEqual(datos['total_inventory_value'], Decimal('20.00'))
        self.assertEqual(datos['consumption_last_30_days']['total_qty'], 3)
        self.assertEqual(datos['consumption_last_30_days']['count'], 1)
