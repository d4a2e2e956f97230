from django.contrib import admin
from .models import Usuario


# =====================================================
# ADMIN PARA USUARIO
# =====================================================
@admin.register(Usuario)
class UsuarioAdmin(admin.ModelAdmin):
    list_display = ['id', 'matricula', 'full_name', 'role', 'limit_enabled', 'monthly_limit']
    list_filter = ['role', 'limit_enabled']
    search_fields = ['matricula', 'full_name']
    ordering = ['full_name']
    exclude = ['password', 'groups', 'user_permissions']
