"""
Tests de autenticación: login por matrícula, cookies JWT, refresh y logout
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.usuarios.models import Usuario
from core.constants import Messages, UserRole
from core.test_utils import TestDataFactory


class LoginTests(TestCase):
    """POST /api/auth/login/"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.usuario = TestDataFactory.create_user(matricula='USR100', full_name='Carla Dias')
        self.admin = TestDataFactory.create_admin(matricula='ADM100', password='Segura123')

    def test_usuario_comun_entra_solo_con_matricula(self):
        response = self.client.post('/api/auth/login/', {'matricula': 'USR100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], Messages.WELCOME_USER.format(nombre='Carla Dias'))
        self.assertEqual(response.data['data']['user']['matricula'], 'USR100')
        self.assertNotIn('password', response.data['data']['user'])

        self.assertIn('access_token', response.cookies)
        self.assertIn('refresh_token', response.cookies)
        self.assertTrue(response.cookies['access_token']['httponly'])
        self.assertEqual(response.cookies['refresh_token']['path'], '/api/auth/refresh/')

    def test_matricula_sin_distinguir_mayusculas(self):
        response = self.client.post('/api/auth/login/', {'matricula': ' usr100 '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_matricula_obligatoria(self):
        response = self.client.post('/api/auth/login/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], Messages.MATRICULA_REQUIRED)

    def test_matricula_inexistente(self):
        response = self.client.post('/api/auth/login/', {'matricula': 'NAOEXISTE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], Messages.USER_NOT_FOUND_LOGIN)

    def test_admin_sin_password(self):
        response = self.client.post('/api/auth/login/', {'matricula': 'ADM100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], Messages.ADMIN_PASSWORD_REQUIRED)
        self.assertNotIn('access_token', response.cookies)

    def test_admin_password_incorrecta(self):
        response = self.client.post(
            '/api/auth/login/', {'matricula': 'ADM100', 'password': 'errada'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], Messages.INVALID_PASSWORD)

    def test_admin_sin_hash_configurado(self):
        Usuario.objects.create_user(matricula='ADM200', full_name='Sem Senha', role=UserRole.ADMIN)
        response = self.client.post(
            '/api/auth/login/', {'matricula': 'ADM200', 'password': 'qualquer'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], Messages.ADMIN_NOT_CONFIGURED)

    def test_admin_password_correcta(self):
        response = self.client.post(
            '/api/auth/login/', {'matricula': 'ADM100', 'password': 'Segura123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['role'], UserRole.ADMIN)
        self.admin.refresh_from_db()
        self.assertIsNotNone(self.admin.last_login)


class SesionCookieTests(TestCase):
    """Sesión con cookies: /me, refresh y logout"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.usuario = TestDataFactory.create_user(matricula='USR300')
        self.client.post('/api/auth/login/', {'matricula': 'USR300'}, format='json')

    def test_me_con_cookie(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['id'], self.usuario.id)

    def test_ruta_protegida_sin_token(self):
        anonimo = APIClient()
        response = anonimo.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json(), {'success': False, 'message': Messages.UNAUTHORIZED})

    def test_token_invalido_en_cookie(self):
        anonimo = APIClient()
        anonimo.cookies['access_token'] = 'no-es-un-jwt'
        response = anonimo.get('/api/products/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_refresh_rota_tokens(self):
        refresh_anterior = self.client.cookies['refresh_token'].value
        response = self.client.post('/api/auth/refresh/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], Messages.TOKEN_REFRESHED)
        self.assertIn('access_token', response.cookies)
        self.assertNotEqual(response.cookies['refresh_token'].value, refresh_anterior)

        # El refresh rotado queda en blacklist
        response = self.client.post('/api/auth/refresh/', {'refresh': refresh_anterior}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_sin_token(self):
        response = APIClient().post('/api/auth/refresh/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], Messages.INVALID_REFRESH_TOKEN)

    def test_logout_invalida_refresh_y_limpia_cookies(self):
        refresh = self.client.cookies['refresh_token'].value

        response = self.client.post('/api/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies['access_token'].value, '')
        self.assertEqual(response.cookies['refresh_token'].value, '')

        response = APIClient().post('/api/auth/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_sin_sesion(self):
        response = APIClient().post('/api/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], Messages.LOGOUT_SUCCESS)
