"""
Carga inicial: usuario administrador y setores base.
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.sectores.models import Sector
from apps.usuarios.models import Usuario
from core.constants import UserRole

SECTORES_INICIALES = [
    'FoodStation',
    'Limpeza',
    'Materiais de Escritório',
    'Máquina de Café',
    'Máquinas e Equipamentos',
]


class Command(BaseCommand):
    help = "Crea el administrador y los setores iniciales (idempotente)"

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            default='Admin123',
            help='Contraseña del administrador (solo se usa si no existe)',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        admin = Usuario.objects.filter(matricula__iexact='admin').first()
        if admin:
            self.stdout.write(self.style.WARNING("Administrador 'admin' ya existe, se mantiene."))
        else:
            Usuario.objects.create_user(
                matricula='admin',
                full_name='Administrador',
                password=options['password'],
                role=UserRole.ADMIN,
            )
            self.stdout.write(self.style.SUCCESS("Administrador 'admin' creado."))

        creados = 0
        for nombre in SECTORES_INICIALES:
            if not Sector.objects.filter(name__iexact=nombre).exists():
                Sector.objects.create(name=nombre)
                creados += 1

        self.stdout.write(self.style.SUCCESS(
            f"Setores: {creados} creados, {len(SECTORES_INICIALES) - creados} existentes."
        ))
