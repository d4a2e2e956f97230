from django.apps import AppConfig


class ConsumosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.consumos'
    verbose_name = 'Consumos'
