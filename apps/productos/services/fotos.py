import logging

from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


def eliminar_foto(nombre):
    """
    Borra el archivo de una foto de producto. Un fallo solo se registra.
    """
    if not nombre:
        return
    try:
        default_storage.delete(nombre)
    except OSError as exc:
        logger.warning(f"No se pudo eliminar la foto {nombre}: {exc}")
