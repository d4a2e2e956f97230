"""
Tests de gestión de usuarios: CRUD administrativo y límite mensual
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from core.constants import Messages, UserRole
from core.test_utils import TestDataFactory, AuthenticatedAPIClient
from apps.usuarios.models import Usuario


class UsuarioTests(TestCase):
    """Endpoints /api/users/"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin(matricula='ADM001')
        self.usuario = TestDataFactory.create_user(matricula='USR001', full_name='Ana Souza')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_listar_usuarios_como_usuario_comun(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        matriculas = [u['matricula'] for u in response.data['results']]
        self.assertIn('USR001', matriculas)
        self.assertNotIn('password', response.data['results'][0])

    def test_listar_sin_autenticacion(self):
        self.client.logout()
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.json()['success'])

    def test_crear_usuario_sin_password(self):
        response = self.client.post('/api/users/', {
            'full_name': 'Bruno Lima',
            'matricula': 'USR002',
            'role': UserRole.USER,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertFalse(response.data['data']['has_password'])
        self.assertFalse(Usuario.objects.get(matricula='USR002').has_usable_password())

    def test_crear_admin_exige_password(self):
        response = self.client.post('/api/users/', {
            'full_name': 'Outro Admin',
            'matricula': 'ADM002',
            'role': UserRole.ADMIN,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.ADMIN_PASSWORD_ON_CREATE)

    def test_crear_password_corta(self):
        response = self.client.post('/api/users/', {
            'full_name': 'Outro Admin',
            'matricula': 'ADM002',
            'role': UserRole.ADMIN,
            'password': '123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.PASSWORD_TOO_SHORT)

    def test_matricula_duplicada_sin_distinguir_mayusculas(self):
        response = self.client.post('/api/users/', {
            'full_name': 'Duplicado',
            'matricula': 'usr001',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.MATRICULA_EXISTS)

    def test_usuario_comun_no_puede_crear(self):
        self.client.authenticate_user(self.usuario)
        response = self.client.post('/api/users/', {
            'full_name': 'X', 'matricula': 'X1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_promover_a_admin_sin_password(self):
        response = self.client.patch(
            f'/api/users/{self.usuario.id}/', {'role': UserRole.ADMIN}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.ADMIN_PASSWORD_ON_PROMOTE)

    def test_promover_a_admin_con_password(self):
        response = self.client.patch(
            f'/api/users/{self.usuario.id}/',
            {'role': UserRole.ADMIN, 'password': 'nova123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.usuario.refresh_from_db()
        self.assertTrue(self.usuario.es_admin)
        self.assertTrue(self.usuario.check_password('nova123'))

    def test_password_en_blanco_no_cambia_hash(self):
        hash_anterior = self.admin.password
        response = self.client.patch(
            f'/api/users/{self.admin.id}/', {'full_name': 'Admin Renomeado', 'password': '  '}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.password, hash_anterior)
        self.assertEqual(self.admin.full_name, 'Admin Renomeado')

    def test_no_puede_eliminarse_a_si_mismo(self):
        response = self.client.delete(f'/api/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.CANNOT_DELETE_SELF)
        self.assertTrue(Usuario.objects.filter(pk=self.admin.pk).exists())

    def test_eliminar_usuario_inexistente(self):
        response = self.client.delete('/api/users/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_eliminar_usuario(self):
        response = self.client.delete(f'/api/users/{self.usuario.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Usuario.objects.filter(pk=self.usuario.pk).exists())

    def test_eliminar_usuario_con_consumos(self):
        producto = TestDataFactory.create_product()
        TestDataFactory.create_consumption(self.usuario, producto, qty=2)

        response = self.client.delete(f'/api/users/{self.usuario.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.USER_HAS_CONSUMPTIONS)
        self.assertTrue(Usuario.objects.filter(pk=self.usuario.pk).exists())


class LimiteMensualTests(TestCase):
    """PATCH /api/users/me/limit/"""

    def setUp(self):
        cache.clear()
        self.usuario = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.usuario)

    def test_configurar_limite(self):
        response = self.client.patch(
            '/api/users/me/limit/', {'monthly_limit': '150.00', 'limit_enabled': True}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.usuario.refresh_from_db()
        self.assertEqual(str(self.usuario.monthly_limit), '150.00')
        self.assertTrue(self.usuario.limit_enabled)

    def test_limite_negativo(self):
        response = self.client.patch(
            '/api/users/me/limit/', {'monthly_limit': '-1', 'limit_enabled': True}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.LIMIT_NEGATIVE)

    def test_quitar_limite(self):
        response = self.client.patch(
            '/api/users/me/limit/', {'monthly_limit': None, 'limit_enabled': False}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.usuario.refresh_from_db()
        self.assertIsNone(self.usuario.monthly_limit)
