from .gestion_usuarios import (
    UsuarioSerializer,
    UsuarioCrearSerializer,
    UsuarioActualizarSerializer,
    LimiteMensualSerializer,
)

__all__ = [
    'UsuarioSerializer',
    'UsuarioCrearSerializer',
    'UsuarioActualizarSerializer',
    'LimiteMensualSerializer',
]
