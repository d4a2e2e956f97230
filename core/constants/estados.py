"""
Constantes para roles, estados y tipos de los recursos del sistema.
Centraliza los valores que se guardan en base de datos para evitar typos.
"""


class UserRole:
    """Roles posibles de un usuario en el sistema."""
    ADMIN = 'admin'
    USER = 'user'

    @classmethod
    def choices(cls):
        """Retorna tuplas para usar en choices de Django."""
        return [
            (cls.ADMIN, 'Administrador'),
            (cls.USER, 'Usuário'),
        ]

    @classmethod
    def all(cls):
        return [cls.ADMIN, cls.USER]


class ProductStatus:
    """Estados posibles de un producto."""
    ATIVO = 'Ativo'
    INATIVO = 'Inativo'

    @classmethod
    def choices(cls):
        return [
            (cls.ATIVO, 'Ativo'),
            (cls.INATIVO, 'Inativo'),
        ]


class TransactionType:
    """Tipos de movimiento de stock."""
    ENTRADA = 'entrada'
    SAIDA = 'saida'
    AJUSTE = 'ajuste'
    DEVOLUCAO = 'devolucao'

    @classmethod
    def choices(cls):
        return [
            (cls.ENTRADA, 'Entrada'),
            (cls.SAIDA, 'Saída'),
            (cls.AJUSTE, 'Ajuste'),
            (cls.DEVOLUCAO, 'Devolução'),
        ]

    @classmethod
    def all(cls):
        return [cls.ENTRADA, cls.SAIDA, cls.AJUSTE, cls.DEVOLUCAO]


class StockStatus:
    """Estado de stock calculado en los reportes."""
    OK = 'OK'
    BAIXO = 'Baixo'
    CRITICO = 'Crítico'
    ZERADO = 'Zerado'
