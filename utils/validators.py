import os

from rest_framework import serializers

from core.constants import Messages, SecurityConstants


def validate_password_length(password: str) -> str:
    """
    Valida la longitud mínima de la contraseña (6 caracteres).
    """
    if len(password) < 6:
        raise serializers.ValidationError(Messages.PASSWORD_TOO_SHORT)
    return password


def validate_unique_matricula(matricula: str, excluir_id=None) -> str:
    """
    Verifica que la matrícula no exista ya, sin distinguir mayúsculas.
    """
    from apps.usuarios.models import Usuario

    matricula = matricula.strip()
    if not matricula:
        raise serializers.ValidationError(Messages.MATRICULA_REQUIRED)

    queryset = Usuario.objects.filter(matricula__iexact=matricula)
    if excluir_id is not None:
        queryset = queryset.exclude(pk=excluir_id)
    if queryset.exists():
        raise serializers.ValidationError(Messages.MATRICULA_EXISTS)
    return matricula


def extension_archivo(nombre: str) -> str:
    return os.path.splitext(nombre or '')[1].lower().lstrip('.')


def validate_image_upload(archivo):
    """
    Solo imágenes jpeg/jpg/png/gif/webp de hasta 5MB.
    """
    if extension_archivo(archivo.name) not in SecurityConstants.EXTENSIONES_IMAGEN:
        raise serializers.ValidationError(Messages.PHOTO_INVALID_TYPE)
    if archivo.size > SecurityConstants.MAX_TAMANO_IMAGEN:
        raise serializers.ValidationError(Messages.PHOTO_TOO_LARGE)
    return archivo


def validate_import_upload(archivo):
    """
    Planillas de importación: .xlsx o .csv de hasta 10MB.
    """
    if archivo is None:
        raise serializers.ValidationError(Messages.IMPORT_NO_FILE)
    if extension_archivo(archivo.name) not in SecurityConstants.EXTENSIONES_IMPORTACION:
        raise serializers.ValidationError(Messages.IMPORT_INVALID_TYPE)
    if archivo.size > SecurityConstants.MAX_TAMANO_IMPORTACION:
        raise serializers.ValidationError(Messages.IMPORT_TOO_LARGE)
    return archivo
