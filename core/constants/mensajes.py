"""
Mensajes centralizados de la aplicación.
Los textos visibles para el usuario están en portugués (pt-BR), idioma de la operación.
"""


class Messages:
    """Mensajes estandarizados del sistema."""

    # =====================================================
    # MENSAJES GENERALES
    # =====================================================
    OPERATION_SUCCESS = 'Operação realizada com sucesso.'
    OPERATION_FAILED = 'Não foi possível concluir a operação.'
    INVALID_DATA = 'Os dados enviados são inválidos.'
    UNAUTHORIZED = 'Não autenticado.'
    FORBIDDEN = 'Acesso restrito a administradores.'
    NOT_FOUND = 'O recurso solicitado não existe.'
    SERVER_ERROR = 'Erro interno do servidor.'

    # =====================================================
    # AUTENTICAÇÃO
    # =====================================================
    MATRICULA_REQUIRED = 'Matrícula é obrigatória.'
    USER_NOT_FOUND_LOGIN = 'Usuário não encontrado.'
    ADMIN_PASSWORD_REQUIRED = 'Senha obrigatória para administradores.'
    ADMIN_NOT_CONFIGURED = 'Conta de administrador não configurada corretamente.'
    INVALID_PASSWORD = 'Senha inválida.'
    WELCOME_USER = 'Bem-vindo(a), {nombre}.'
    LOGOUT_SUCCESS = 'Sessão encerrada com sucesso.'
    TOKEN_REFRESHED = 'Token atualizado com sucesso.'
    INVALID_REFRESH_TOKEN = 'Token de atualização inválido ou expirado.'

    # =====================================================
    # USUÁRIOS
    # =====================================================
    USER_CREATED = 'Usuário criado com sucesso.'
    USER_UPDATED = 'Usuário atualizado com sucesso.'
    USER_DELETED = 'Usuário excluído com sucesso.'
    USER_NOT_FOUND = 'Usuário não encontrado.'
    MATRICULA_EXISTS = 'Matrícula já cadastrada.'
    CANNOT_DELETE_SELF = 'Não é possível excluir sua própria conta.'
    USER_HAS_CONSUMPTIONS = 'Não é possível excluir este usuário porque ele possui consumos registrados.'
    ADMIN_PASSWORD_ON_CREATE = 'Senha é obrigatória para usuários administradores.'
    ADMIN_PASSWORD_ON_PROMOTE = 'Senha é obrigatória ao promover usuário a administrador.'
    PASSWORD_TOO_SHORT = 'A senha deve ter pelo menos 6 caracteres.'
    LIMIT_UPDATED = 'Limite mensal atualizado com sucesso.'
    LIMIT_NEGATIVE = 'Limite deve ser maior ou igual a zero.'

    # =====================================================
    # SETORES
    # =====================================================
    SECTOR_CREATED = 'Setor criado com sucesso.'
    SECTOR_UPDATED = 'Setor atualizado com sucesso.'
    SECTOR_DELETED = 'Setor excluído com sucesso.'
    SECTOR_NAME_EXISTS = 'Já existe um setor com este nome.'
    SECTOR_HAS_PRODUCTS = 'Não é possível excluir este setor porque ele possui produtos vinculados.'

    # =====================================================
    # PRODUTOS
    # =====================================================
    PRODUCT_CREATED = 'Produto criado com sucesso.'
    PRODUCT_UPDATED = 'Produto atualizado com sucesso.'
    PRODUCT_DELETED = 'Produto excluído com sucesso.'
    PRODUCT_NOT_FOUND = 'Produto não encontrado.'
    PRODUCT_HAS_CONSUMPTIONS = (
        'Não é possível excluir este produto porque ele possui consumos registrados. '
        'Você pode excluir os consumos relacionados primeiro ou manter o produto no sistema.'
    )
    PRICE_NEGATIVE = 'O preço não pode ser negativo.'
    STOCK_NEGATIVE = 'O estoque não pode ser negativo.'
    STOCK_MANUAL_ADJUSTMENT = 'Ajuste de estoque na edição do produto'
    PHOTO_INVALID_TYPE = 'Apenas imagens são permitidas (jpeg, jpg, png, gif, webp).'
    PHOTO_TOO_LARGE = 'A imagem não pode ultrapassar 5 MB.'

    # =====================================================
    # IMPORTAÇÃO EM MASSA
    # =====================================================
    IMPORT_NO_FILE = 'Nenhum arquivo enviado.'
    IMPORT_INVALID_TYPE = 'Tipo de arquivo não suportado. Envie um arquivo .xlsx ou .csv.'
    IMPORT_TOO_LARGE = 'O arquivo não pode ultrapassar 10 MB.'
    IMPORT_UNREADABLE = 'Não foi possível ler o arquivo enviado.'
    IMPORT_NO_VALID_ROWS = 'Nenhum produto válido encontrado no arquivo.'
    IMPORT_SUCCESS = '{cantidad} produtos importados com sucesso.'
    IMPORT_ROW_NAME_REQUIRED = 'Linha {fila}: nome do produto é obrigatório'
    IMPORT_ROW_INVALID_NUMBER = 'Linha {fila}: valor numérico inválido em {campo}'
    IMPORT_ROW_NEGATIVE = 'Linha {fila}: {campo} não pode ser negativo'
    IMPORT_ROW_SECTOR_NOT_FOUND = 'Linha {fila}: setor "{setor}" não encontrado'
    IMPORT_ROW_REJECTED = 'Linha {fila}: {campo}: {detalle}'

    # =====================================================
    # ESTOQUE E CONSUMO
    # =====================================================
    TRANSACTION_CREATED = 'Movimentação registrada com sucesso.'
    TRANSACTION_ZERO = 'A alteração de estoque não pode ser zero.'
    INSUFFICIENT_STOCK_TRANSACTION = 'Estoque insuficiente para esta movimentação.'
    INSUFFICIENT_STOCK_CONSUMPTION = 'Estoque insuficiente para este consumo.'
    CONSUMPTION_CREATED = 'Consumo registrado com sucesso.'
    QTY_MIN = 'A quantidade deve ser pelo menos 1.'

    # =====================================================
    # RELATÓRIOS
    # =====================================================
    REPORT_GENERATED = 'Relatório gerado com sucesso.'
    REPORT_NO_DATA = 'Não há dados para o relatório solicitado.'
    REPORT_SECTOR_NOT_FOUND = 'Setor do relatório não encontrado.'
    INVALID_DATE_RANGE = 'A data inicial não pode ser posterior à data final.'
    INVALID_MONTH = 'Mês inválido. Use o formato AAAA-MM.'
