from django.apps import AppConfig


class AutenticacionConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.autenticacion"
    verbose_name = "Autenticação"
