"""
Tests de productos: CRUD con foto, stock bajo e importación masiva
"""
import io
import os
import shutil
import tempfile
from decimal import Decimal

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from openpyxl import Workbook
from PIL import Image
from rest_framework import status

from apps.consumos.models import Consumo
from apps.inventario.models import MovimientoStock
from apps.inventario.services.stock_service import registrar_consumo
from apps.productos.models import Producto
from apps.productos.serializers import ProductoEscrituraSerializer
from core.constants import Messages, StockStatus, TransactionType
from core.test_utils import TestDataFactory, AuthenticatedAPIClient

MEDIA_TEMPORAL = tempfile.mkdtemp(prefix='almoxarifado-tests-')


def imagen_png(nombre='foto.png'):
    buffer = io.BytesIO()
    Image.new('RGB', (10, 10), color='red').save(buffer, format='PNG')
    return SimpleUploadedFile(nombre, buffer.getvalue(), content_type='image/png')


def planilla_xlsx(filas, nombre='produtos.xlsx'):
    libro = Workbook()
    hoja = libro.active
    hoja.append(['name', 'sku', 'unit_price', 'stock_quantity', 'sector_name', 'low_stock_threshold'])
    for fila in filas:
        hoja.append(fila)
    buffer = io.BytesIO()
    libro.save(buffer)
    return SimpleUploadedFile(
        nombre,
        buffer.getvalue(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )


@override_settings(MEDIA_ROOT=MEDIA_TEMPORAL)
class ProductoTests(TestCase):

    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(MEDIA_TEMPORAL, ignore_errors=True)

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.usuario = TestDataFactory.create_user()
        self.sector = TestDataFactory.create_sector('FoodStation')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_crear_producto(self):
        response = self.client.post('/api/products/', {
            'name': 'Água Mineral',
            'sector': self.sector.id,
            'unit_price': '1.50',
            'stock_quantity': 40,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        datos = response.data['data']
        self.assertEqual(datos['total_in'], 40)
        self.assertEqual(datos['total_out'], 0)
        self.assertEqual(datos['sector_name'], 'FoodStation')
        self.assertEqual(datos['stock_status'], StockStatus.OK)
        self.assertIsNone(datos['photo_path'])

    def test_precio_negativo(self):
        response = self.client.post('/api/products/', {
            'name': 'Inválido', 'unit_price': '-1', 'stock_quantity': 1
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.PRICE_NEGATIVE)

    def test_stock_negativo(self):
        response = self.client.post('/api/products/', {
            'name': 'Inválido', 'unit_price': '1', 'stock_quantity': -3
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.STOCK_NEGATIVE)

    def test_crear_con_foto(self):
        response = self.client.post('/api/products/', {
            'name': 'Suco',
            'unit_price': '3.00',
            'stock_quantity': 5,
            'photo': imagen_png(),
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['data']['photo_path'].startswith('/uploads/products/'))

    def test_foto_con_extension_no_permitida(self):
        response = self.client.post('/api/products/', {
            'name': 'Suco',
            'unit_price': '3.00',
            'stock_quantity': 5,
            'photo': imagen_png('foto.bmp'),
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.PHOTO_INVALID_TYPE)

    def test_reemplazar_foto_borra_la_anterior(self):
        self.client.post('/api/products/', {
            'name': 'Suco', 'unit_price': '3.00', 'stock_quantity': 5, 'photo': imagen_png(),
        }, format='multipart')
        producto = Producto.objects.get(name='Suco')
        ruta_anterior = producto.photo.path
        self.assertTrue(os.path.exists(ruta_anterior))

        response = self.client.patch(
            f'/api/products/{producto.id}/', {'photo': imagen_png('nova.png')}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(os.path.exists(ruta_anterior))

    def test_editar_no_pisa_consumos_registrados_entre_medio(self):
        producto = TestDataFactory.create_product(name='Chá', stock=10)
        instancia = Producto.objects.get(pk=producto.pk)

        registrar_consumo(self.usuario, producto.id, 3)

        serializer = ProductoEscrituraSerializer(instancia, data={'name': 'Chá Verde'}, partial=True)
        self.assertTrue(serializer.is_valid())
        serializer.save()

        producto.refresh_from_db()
        self.assertEqual(producto.name, 'Chá Verde')
        self.assertEqual(producto.stock_quantity, 7)
        self.assertEqual(producto.total_out, 3)

    def test_editar_stock_registra_ajuste(self):
        producto = TestDataFactory.create_product(stock=20)

        response = self.client.patch(f'/api/products/{producto.id}/', {'stock_quantity': 25}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['stock_quantity'], 25)
        self.assertEqual(response.data['data']['total_in'], 25)

        self.client.patch(f'/api/products/{producto.id}/', {'stock_quantity': 15}, format='json')
        producto.refresh_from_db()
        self.assertEqual(producto.stock_quantity, 15)
        self.assertEqual(producto.total_out, 10)

        cambios = list(
            MovimientoStock.objects.filter(product=producto).order_by('id').values_list('change', 'transaction_type')
        )
        self.assertEqual(cambios, [(5, TransactionType.AJUSTE), (-10, TransactionType.AJUSTE)])

    def test_totales_no_se_editan_por_api(self):
        producto = TestDataFactory.create_product(stock=20)
        response = self.client.patch(
            f'/api/products/{producto.id}/', {'total_in': 999, 'total_out': 999}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        producto.refresh_from_db()
        self.assertEqual(producto.total_in, 20)
        self.assertEqual(producto.total_out, 0)
        self.assertFalse(MovimientoStock.objects.filter(product=producto).exists())

    def test_usuario_no_puede_crear(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.post('/api/products/', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_listar_filtrando_por_setor(self):
        TestDataFactory.create_product(name='Café', sector=self.sector)
        TestDataFactory.create_product(name='Vassoura')
        self.client.authenticate_user(self.usuario)

        response = self.client.get(f'/api/products/?sector={self.sector.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data['results']], ['Café'])

    def test_stock_bajo(self):
        TestDataFactory.create_product(name='Pouco', stock=3)
        TestDataFactory.create_product(name='Zerado', stock=0)
        TestDataFactory.create_product(name='Muito', stock=50)
        response = self.client.get('/api/products/low-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data['data']], ['Zerado', 'Pouco'])

    def test_eliminar_producto_con_consumos(self):
        producto = TestDataFactory.create_product()
        TestDataFactory.create_consumption(self.usuario, producto, qty=1)

        response = self.client.delete(f'/api/products/{producto.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.PRODUCT_HAS_CONSUMPTIONS)
        self.assertTrue(Producto.objects.filter(pk=producto.pk).exists())
        self.assertEqual(Consumo.objects.filter(product=producto).count(), 1)

    def test_eliminar_producto(self):
        producto = TestDataFactory.create_product()
        response = self.client.delete(f'/api/products/{producto.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Producto.objects.filter(pk=producto.pk).exists())


class ImportacionMasivaTests(TestCase):
    """POST /api/products/bulk-import/"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.sector = TestDataFactory.create_sector('Limpeza')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_importar_con_fila_sin_nombre(self):
        archivo = planilla_xlsx([
            ['Sabão', 'SB-1', 4.5, 12, 'limpeza', 5],
            [None, 'SB-2', 2, 3, None, None],
            ['Esponja', None, '1,25', 30, None, None],
        ])
        response = self.client.post('/api/products/bulk-import/', {'file': archivo}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['imported'], 2)
        self.assertEqual(
            response.data['data']['errors'],
            [Messages.IMPORT_ROW_NAME_REQUIRED.format(fila=3)]
        )

        sabao = Producto.objects.get(name='Sabão')
        self.assertEqual(sabao.sector, self.sector)
        self.assertEqual(sabao.unit_price, Decimal('4.50'))
        self.assertEqual(sabao.total_in, 12)
        self.assertEqual(sabao.low_stock_threshold, 5)
        esponja = Producto.objects.get(name='Esponja')
        self.assertEqual(esponja.unit_price, Decimal('1.25'))
        self.assertEqual(esponja.low_stock_threshold, 10)
        self.assertIsNone(esponja.sector)

    def test_setor_desconocido_y_filas_en_blanco(self):
        archivo = planilla_xlsx([
            ['Rodo', None, 10, 2, 'Jardim', None],
            [None, None, None, None, None, None],
            ['Balde', None, 8, 4, None, None],
        ])
        response = self.client.post('/api/products/bulk-import/', {'file': archivo}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['imported'], 1)
        self.assertEqual(
            response.data['data']['errors'],
            [Messages.IMPORT_ROW_SECTOR_NOT_FOUND.format(fila=2, setor='Jardim')]
        )

    def test_importar_csv(self):
        contenido = 'name,sku,unit_price,stock_quantity,sector_name,low_stock_threshold\nPano,P1,2.00,7,Limpeza,\n'
        archivo = SimpleUploadedFile('produtos.csv', contenido.encode('utf-8'), content_type='text/csv')
        response = self.client.post('/api/products/bulk-import/', {'file': archivo}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Producto.objects.get(name='Pano').stock_quantity, 7)

    def test_sin_filas_validas(self):
        archivo = planilla_xlsx([['', None, 'abc', 1, None, None], ['Cloro', None, -2, 1, None, None]])
        response = self.client.post('/api/products/bulk-import/', {'file': archivo}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.IMPORT_NO_VALID_ROWS)
        self.assertEqual(len(response.data['errors']), 2)
        self.assertFalse(Producto.objects.exists())

    def test_fila_con_numero_fuera_de_rango(self):
        archivo = planilla_xlsx([
            ['Papel', None, 2, 5, None, None],
            ['Caixa', None, 2, 10 ** 20, None, None],
        ])
        response = self.client.post('/api/products/bulk-import/', {'file': archivo}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['imported'], 1)
        self.assertEqual(len(response.data['data']['errors']), 1)
        self.assertTrue(response.data['data']['errors'][0].startswith('Linha 3: stock_quantity:'))
        self.assertEqual(list(Producto.objects.values_list('name', flat=True)), ['Papel'])

    def test_xlsx_corrupto(self):
        archivo = SimpleUploadedFile(
            'produtos.xlsx',
            b'isto nao e uma planilha',
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        response = self.client.post('/api/products/bulk-import/', {'file': archivo}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.IMPORT_UNREADABLE)

    def test_tipo_de_archivo_invalido(self):
        archivo = SimpleUploadedFile('produtos.txt', b'name\nX\n', content_type='text/plain')
        response = self.client.post('/api/products/bulk-import/', {'file': archivo}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.IMPORT_INVALID_TYPE)

    def test_sin_archivo(self):
        response = self.client.post('/api/products/bulk-import/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.IMPORT_NO_FILE)
