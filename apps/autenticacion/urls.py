from django.urls import path
from . import views

urlpatterns = [
    path("login/", views.login_usuario, name="login_usuario"),
    path("logout/", views.logout_usuario, name="logout_usuario"),
    path("refresh/", views.refresh_token, name="refresh_token"),
    path("me/", views.usuario_actual, name="usuario_actual"),
]
