from django.db import models
from django.utils import timezone
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager

from core.constants import UserRole


# =====================================================
# MANAGER PERSONALIZADO
# =====================================================
class UsuarioManager(BaseUserManager):
    """Gestor para crear usuarios y superusuarios de forma segura."""

    def get_by_natural_key(self, matricula):
        return self.get(matricula__iexact=matricula)

    def create_user(self, matricula, full_name, password=None, **extra_fields):
        if not matricula:
            raise ValueError("La matrícula es obligatoria.")
        user = self.model(matricula=matricula.strip(), full_name=full_name, **extra_fields)
        if password:
            user.set_password(password)
        else:
            # Usuarios comunes entran solo con matrícula
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, matricula, full_name, password=None, **extra_fields):
        extra_fields.setdefault("role", UserRole.ADMIN)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(matricula, full_name, password, **extra_fields)


# =====================================================
# MODELO USUARIO
# =====================================================
class Usuario(AbstractBaseUser, PermissionsMixin):
    full_name = models.CharField(max_length=150)
    matricula = models.CharField(max_length=50, unique=True)
    role = models.CharField(max_length=10, choices=UserRole.choices(), default=UserRole.USER)
    monthly_limit = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    limit_enabled = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    is_active = models.BooleanField(default=True)

    USERNAME_FIELD = "matricula"
    REQUIRED_FIELDS = ["full_name"]

    objects = UsuarioManager()

    class Meta:
        db_table = "usuario"
        ordering = ["full_name"]
        verbose_name = "Usuário"
        verbose_name_plural = "Usuários"

    def __str__(self):
        return f"{self.matricula} - {self.full_name}"

    @property
    def es_admin(self):
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self):
        # Django admin y IsAdminUser de DRF siguen el rol
        return self.es_admin

    @property
    def tiene_password(self):
        return bool(self.password) and self.has_usable_password()
