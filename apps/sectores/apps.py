from django.apps import AppConfig


class SectoresConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.sectores"
    verbose_name = "Setores"
