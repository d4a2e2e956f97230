from .gestion_usuarios import UsuarioViewSet

__all__ = [
    "UsuarioViewSet",
]
