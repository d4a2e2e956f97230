"""
Tests del módulo de reportes: endpoints, exportaciones y cálculos predictivos
"""
import io
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status

from apps.reportes.services import (
    agregar,
    dias_hasta_quiebre,
    estado_foodstation,
    nivel_alerta,
    nivel_confianza,
    pendiente,
    reposicion_con_seguridad,
    riesgo_quiebre,
    tendencia,
)
from core.constants import Messages, StockStatus
from core.test_utils import TestDataFactory, AuthenticatedAPIClient


class CalculosPredictivosTests(SimpleTestCase):
    """Funciones puras del análisis predictivo"""

    def test_pendiente_y_tendencia(self):
        self.assertEqual(tendencia(pendiente([1, 2, 3, 4])), 'increasing')
        self.assertEqual(tendencia(pendiente([4, 3, 2, 1])), 'decreasing')
        self.assertEqual(tendencia(pendiente([2, 2, 2, 2])), 'stable')
        self.assertEqual(pendiente([5]), 0.0)

    def test_nivel_confianza(self):
        self.assertEqual(nivel_confianza([1, 1]), 'low')
        self.assertEqual(nivel_confianza([5, 5, 5]), 'high')
        self.assertEqual(nivel_confianza([0, 0, 0]), 'low')
        self.assertEqual(nivel_confianza([2, 4, 6]), 'medium')

    def test_riesgo_y_dias_hasta_quiebre(self):
        self.assertEqual(dias_hasta_quiebre(10, 0), 999)
        self.assertEqual(riesgo_quiebre(0, 1), 'high')
        self.assertEqual(riesgo_quiebre(4, 1), 'high')
        self.assertEqual(riesgo_quiebre(9, 1), 'medium')
        self.assertEqual(riesgo_quiebre(10, 0), 'low')

    def test_nivel_alerta(self):
        self.assertEqual(nivel_alerta(None), 'ok')
        self.assertEqual(nivel_alerta(7), 'critical')
        self.assertEqual(nivel_alerta(14), 'warning')
        self.assertEqual(nivel_alerta(15), 'ok')

    def test_estado_foodstation(self):
        self.assertEqual(estado_foodstation(0, 10), StockStatus.ZERADO)
        self.assertEqual(estado_foodstation(5, 10), StockStatus.CRITICO)
        self.assertEqual(estado_foodstation(8, 10), StockStatus.BAIXO)
        self.assertEqual(estado_foodstation(11, 10), StockStatus.OK)

    def test_reposicion_con_seguridad(self):
        self.assertEqual(reposicion_con_seguridad(15, 5), 13)
        self.assertEqual(reposicion_con_seguridad(10, 50), 0)

    def test_agregar(self):
        filas = [('a', 2), ('b', 1), ('a', 3)]
        grupos = agregar(filas, clave=lambda f: f[0], metricas={'total': lambda f: f[1], 'count': None})
        self.assertEqual(grupos, {'a': {'total': 5, 'count': 2}, 'b': {'total': 1, 'count': 1}})
        self.assertEqual(list(grupos), ['a', 'b'])


class ReportesBaseTestCase(TestCase):

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.usuario = TestDataFactory.create_user(matricula='FS001', full_name='Elisa Prado')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)


class DashboardYRankingTests(ReportesBaseTestCase):

    def test_estadisticas_dashboard_para_usuario(self):
        TestDataFactory.create_product(stock=5, unit_price=Decimal('2.00'))
        TestDataFactory.create_product(stock=0)
        producto = TestDataFactory.create_product(stock=20, unit_price=Decimal('1.00'))
        TestDataFactory.create_consumption(self.usuario, producto)

        self.client.authenticate_user(self.usuario)
        response = self.client.get('/api/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['totalProducts'], 3)
        self.assertEqual(datos['lowStockCount'], 1)
        self.assertEqual(datos['monthlyConsumptions'], 1)
        self.assertEqual(datos['totalValue'], Decimal('30.00'))

    def test_top_consumidos(self):
        cafe = TestDataFactory.create_product(name='Café')
        cha = TestDataFactory.create_product(name='Chá')
        TestDataFactory.create_consumption(self.usuario, cha, qty=1)
        TestDataFactory.create_consumption(self.usuario, cafe, qty=4)
        TestDataFactory.create_consumption(self.usuario, cafe, qty=2)

        response = self.client.get('/api/reports/top-consumed/?limit=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['product_name'], 'Café')
        self.assertEqual(response.data['data'][0]['total_qty'], 6)
        self.assertEqual(response.data['data'][0]['consumption_count'], 2)

    def test_top_consumidos_solo_admin(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.get('/api/reports/top-consumed/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_consumo_de_usuario_comun_es_siempre_propio(self):
        producto = TestDataFactory.create_product(unit_price=Decimal('2.00'))
        TestDataFactory.create_consumption(self.usuario, producto, qty=2)
        TestDataFactory.create_consumption(self.admin, producto, qty=1)

        self.client.authenticate_user(self.usuario)
        response = self.client.get(f'/api/reports/user-consumption/?user_id={self.admin.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['user']['id'], self.usuario.id)
        self.assertEqual(len(datos['consumptions']), 1)
        self.assertEqual(datos['monthlyTotal'], Decimal('4.00'))

    def test_rango_de_fechas_invalido(self):
        response = self.client.get('/api/reports/user-consumption/?start_date=2025-03-01&end_date=2025-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.INVALID_DATE_RANGE)


class FoodstationTests(ReportesBaseTestCase):

    def setUp(self):
        super().setUp()
        self.foodstation = TestDataFactory.create_sector('FoodStation')
        self.suco = TestDataFactory.create_product(
            name='Suco', sector=self.foodstation, stock=2, unit_price=Decimal('4.00')
        )
        self.barra = TestDataFactory.create_product(
            name='Barra', sector=self.foodstation, stock=40, unit_price=Decimal('1.00')
        )
        self.desde = (timezone.now() - timedelta(days=5)).date().isoformat()
        ahora = timezone.now()
        for dias in range(3):
            TestDataFactory.create_consumption(
                self.usuario, self.suco, qty=2, consumed_at=ahora - timedelta(days=dias)
            )

    def test_sin_setor_foodstation(self):
        self.foodstation.name = 'Copa'
        self.foodstation.save()
        response = self.client.get('/api/reports/foodstation/restock/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], Messages.REPORT_SECTOR_NOT_FOUND)

    def test_reposicion(self):
        response = self.client.get('/api/reports/foodstation/restock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['products'][0]['productName'], 'Suco')
        self.assertEqual(datos['products'][0]['stockoutRisk'], 'high')
        self.assertGreater(datos['products'][0]['recommendedReorder'], 0)
        self.assertEqual(datos['products'][1]['recommendedReorder'], 0)
        self.assertEqual(datos['highRiskItems'], 1)
        self.assertEqual(len(datos['products'][0]['last15DaysConsumption']), 15)

    def test_exportar_reposicion(self):
        response = self.client.get('/api/reports/foodstation/restock/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        libro = load_workbook(io.BytesIO(response.content))
        self.assertEqual(libro.sheetnames, ['Reposição FoodStation'])

    def test_panorama(self):
        response = self.client.get('/api/reports/foodstation/overview/?days=7')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        por_nombre = {p['product_name']: p for p in datos['products']}
        self.assertEqual(por_nombre['Suco']['total_exits_month'], 6)
        self.assertEqual(por_nombre['Suco']['stock_status'], StockStatus.CRITICO)
        self.assertIsNone(por_nombre['Barra']['days_until_stockout'])
        self.assertEqual(datos['kpis']['unique_products_consumed'], 1)
        self.assertEqual(datos['topConsumed'][0]['product_name'], 'Suco')

    def test_panorama_dias_invalidos(self):
        response = self.client.get('/api/reports/foodstation/overview/?days=10')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_consumo_agrupado_por_usuario(self):
        response = self.client.get(f'/api/reports/foodstation/consumption/?group_by=user&start_date={self.desde}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        resumen = response.data['data']['summary']
        self.assertEqual(len(resumen), 1)
        self.assertEqual(resumen[0]['matricula'], 'FS001')
        self.assertEqual(resumen[0]['total_items'], 6)

    def test_control_de_consumo(self):
        response = self.client.get(f'/api/reports/foodstation/consumption-control/?start_date={self.desde}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['totalItems'], 6)
        self.assertEqual(datos['monthlyTotals'][0]['matricula'], 'FS001')

    def test_exportar_control_consolidado(self):
        response = self.client.get(f'/api/reports/foodstation/consumption-control/export/?format=consolidated&start_date={self.desde}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('foodstation-consumption-control.xlsx', response['Content-Disposition'])

        libro = load_workbook(io.BytesIO(response.content))
        self.assertEqual(libro.sheetnames, ['Consumos Detalhados', 'Totais Mensais'])
        detalle = libro['Consumos Detalhados']
        self.assertEqual(detalle['A1'].fill.fgColor.rgb, 'FF4CAF50')
        self.assertEqual(detalle['A1'].font.color.rgb, 'FFFFFFFF')
        self.assertEqual(detalle['E2'].value, 'R$ 4.00')
        self.assertEqual(libro['Totais Mensais']['A1'].fill.fgColor.rgb, 'FF2196F3')

    def test_exportar_control_detallado(self):
        response = self.client.get(f'/api/reports/foodstation/consumption-control/export/?format=detailed&start_date={self.desde}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        libro = load_workbook(io.BytesIO(response.content))
        self.assertEqual(libro.sheetnames, ['Consumos Detalhados'])

    def test_exportar_control_formato_invalido(self):
        response = self.client.get('/api/reports/foodstation/consumption-control/export/?format=pdf')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ReportesSectorTests(ReportesBaseTestCase):

    def setUp(self):
        super().setUp()
        self.limpeza = TestDataFactory.create_sector('Limpeza')
        self.cafe = TestDataFactory.create_sector('Máquina de Café')
        self.detergente = TestDataFactory.create_product(
            name='Detergente', sector=self.limpeza, stock=20, unit_price=Decimal('3.00')
        )
        self.capsula = TestDataFactory.create_product(
            name='Cápsula', sector=self.cafe, stock=100, unit_price=Decimal('1.50')
        )
        TestDataFactory.create_consumption(self.usuario, self.detergente, qty=10)

    def test_mensual_sector(self):
        response = self.client.get(f'/api/reports/sector/{self.limpeza.id}/monthly/?cadence=weekly')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['openingStock'][0]['quantity'], 30)
        self.assertEqual(datos['closingStock'][0]['quantity'], 20)
        self.assertEqual(datos['totalItemsConsumed'], 10)

    def test_mensual_sector_inexistente(self):
        response = self.client.get('/api/reports/sector/99999/monthly/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_exportar_mensual_sector(self):
        response = self.client.get(f'/api/reports/sector/{self.limpeza.id}/monthly/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        libro = load_workbook(io.BytesIO(response.content))
        self.assertEqual(libro.sheetnames, ['Estoque', 'Compras Recomendadas', 'Frequência'])

    def test_limpieza(self):
        mes = timezone.now().strftime('%Y-%m')
        response = self.client.get(f'/api/reports/sector/cleaning/?month={mes}&compare_previous=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        self.assertEqual(datos['sector']['name'], 'Limpeza')
        self.assertEqual(datos['products'][0]['exits'], 10)
        self.assertEqual(datos['products'][0]['recommended_purchase'], 11)
        self.assertEqual(datos['comparison'][0]['previous_month_consumption'], 0)

    def test_limpieza_mes_invalido(self):
        response = self.client.get('/api/reports/sector/cleaning/?month=2025-13')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.INVALID_MONTH)

    def test_maquina_cafe(self):
        TestDataFactory.create_consumption(self.usuario, self.capsula, qty=48)
        response = self.client.get('/api/reports/sector/coffee/?weeks=4')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        fila = response.data['data']['products'][0]
        self.assertEqual(fila['weekly_avg_consumption'], 12)
        self.assertEqual(fila['consumption_frequency'], 'high')
        self.assertEqual(fila['suggested_reorder_cadence'], 'weekly')

    def test_inventario_general(self):
        TestDataFactory.create_product(name='Esgotado', sector=self.limpeza, stock=0)
        response = self.client.get('/api/reports/inventory/general/?include_out_of_stock=false')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        datos = response.data['data']
        nombres = [p['product_name'] for p in datos['allProducts']]
        self.assertNotIn('Esgotado', nombres)
        self.assertEqual(datos['kpis']['total_sectors'], 2)

    def test_gestion_sector(self):
        response = self.client.get(f'/api/reports/sector-management/?sector_id={self.cafe.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        fila = response.data['data']['products'][0]
        self.assertIsNone(fila['days_until_stockout'])
        self.assertEqual(fila['alert_level'], 'ok')

        response = self.client.get(f'/api/reports/sector-management/?sector_id={self.limpeza.id}&days=10')
        fila = response.data['data']['products'][0]
        self.assertEqual(fila['total_exits'], 10)
        self.assertEqual(fila['days_until_stockout'], 20)
        self.assertEqual(fila['recommended_reorder'], 36)
        self.assertEqual(fila['alert_level'], 'ok')

    def test_gestion_sector_requiere_sector(self):
        response = self.client.get('/api/reports/sector-management/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
