"""
Importación masiva de productos desde planillas (.xlsx o .csv).

Cada fila se valida de forma independiente; los errores se acumulan
como "Linha N: ..." (N es la fila de la planilla, el encabezado es la fila 1)
sin abortar el lote. Las filas válidas se guardan con un único bulk_create.
"""
import csv
import io
import logging
import zipfile
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Tuple

from django.db import transaction
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from apps.sectores.models import Sector
from core.constants import Messages
from core.exceptions import ErrorNegocio
from utils.validators import extension_archivo
from ..models import Producto
from ..serializers import ProductoEscrituraSerializer

logger = logging.getLogger(__name__)

UMBRAL_STOCK_POR_DEFECTO = 10

# Orden de columnas esperado en la planilla
COLUMNAS = ['name', 'sku', 'unit_price', 'stock_quantity', 'sector_name', 'low_stock_threshold']


class ErrorFila(ValueError):
    """Error de validación de una fila de la planilla."""


def leer_filas(archivo) -> List[Tuple]:
    """
    Devuelve las filas de la planilla (incluido el encabezado) como tuplas.
    El archivo se procesa en memoria; nunca se escribe en disco.
    """
    contenido = archivo.read()
    extension = extension_archivo(archivo.name)

    try:
        if extension == 'xlsx':
            libro = load_workbook(filename=io.BytesIO(contenido), read_only=True, data_only=True)
            hoja = libro.worksheets[0]
            filas = [tuple(fila) for fila in hoja.iter_rows(values_only=True)]
            libro.close()
            return filas
        if extension == 'csv':
            texto = contenido.decode('utf-8-sig')
            return [tuple(fila) for fila in csv.reader(io.StringIO(texto))]
    except (UnicodeDecodeError, ValueError, KeyError, OSError,
            zipfile.BadZipFile, InvalidFileException) as exc:
        logger.warning(f"Planilla ilegible ({archivo.name}): {exc}")
        raise ErrorNegocio(Messages.IMPORT_UNREADABLE)

    raise ErrorNegocio(Messages.IMPORT_INVALID_TYPE)


def _texto(valor) -> str:
    if valor is None:
        return ''
    return str(valor).strip()


def _decimal(valor, fila: int, campo: str, defecto: Decimal) -> Decimal:
    if isinstance(valor, (int, float, Decimal)):
        texto = str(valor)
    else:
        texto = _texto(valor).replace(',', '.')
    if texto == '':
        return defecto
    try:
        numero = Decimal(str(texto))
        if not numero.is_finite():
            raise InvalidOperation
        if numero < 0:
            raise ErrorFila(Messages.IMPORT_ROW_NEGATIVE.format(fila=fila, campo=campo))
        return numero.quantize(Decimal('0.01'))
    except InvalidOperation:
        raise ErrorFila(Messages.IMPORT_ROW_INVALID_NUMBER.format(fila=fila, campo=campo))


def _entero(valor, fila: int, campo: str, defecto: int) -> int:
    numero = _decimal(valor, fila, campo, Decimal(defecto))
    if numero != numero.to_integral_value():
        raise ErrorFila(Messages.IMPORT_ROW_INVALID_NUMBER.format(fila=fila, campo=campo))
    return int(numero)


def construir_producto(valores: Iterable, fila: int, sectores: Dict[str, int]) -> Producto:
    """Valida una fila y construye el Producto sin guardarlo."""
    datos = dict(zip(COLUMNAS, list(valores) + [None] * len(COLUMNAS)))

    nombre = _texto(datos['name'])
    if not nombre:
        raise ErrorFila(Messages.IMPORT_ROW_NAME_REQUIRED.format(fila=fila))

    unit_price = _decimal(datos['unit_price'], fila, 'unit_price', Decimal('0'))
    stock = _entero(datos['stock_quantity'], fila, 'stock_quantity', 0)
    umbral = _entero(datos['low_stock_threshold'], fila, 'low_stock_threshold', UMBRAL_STOCK_POR_DEFECTO)

    sector_id: Optional[int] = None
    nombre_sector = _texto(datos['sector_name'])
    if nombre_sector:
        sector_id = sectores.get(nombre_sector.lower())
        if sector_id is None:
            raise ErrorFila(Messages.IMPORT_ROW_SECTOR_NOT_FOUND.format(fila=fila, setor=nombre_sector))

    # Límites de columna y demás reglas del alta normal
    serializer = ProductoEscrituraSerializer(data={
        'name': nombre,
        'sku': _texto(datos['sku']) or None,
        'unit_price': unit_price,
        'stock_quantity': stock,
        'sector': sector_id,
        'low_stock_threshold': umbral,
    })
    if not serializer.is_valid():
        campo, detalles = next(iter(serializer.errors.items()))
        raise ErrorFila(Messages.IMPORT_ROW_REJECTED.format(fila=fila, campo=campo, detalle=detalles[0]))

    return Producto(total_in=stock, total_out=0, **serializer.validated_data)


def importar_productos(archivo) -> Dict:
    """
    Procesa la planilla completa.
    Retorna {'imported': n, 'errors': [...]}; sin filas válidas lanza ErrorNegocio.
    """
    filas = leer_filas(archivo)

    # Mapa nombre->id resuelto antes de recorrer las filas
    sectores = {
        nombre.lower(): pk
        for pk, nombre in Sector.objects.values_list('id', 'name')
    }

    productos: List[Producto] = []
    errores: List[str] = []

    for numero, valores in enumerate(filas[1:], start=2):
        if all(_texto(valor) == '' for valor in valores):
            continue
        try:
            productos.append(construir_producto(valores, numero, sectores))
        except ErrorFila as exc:
            errores.append(str(exc))

    if not productos:
        raise ErrorNegocio(Messages.IMPORT_NO_VALID_ROWS, errors=errores)

    with transaction.atomic():
        Producto.objects.bulk_create(productos)

    logger.info(f"Importación masiva - {len(productos)} productos, {len(errores)} filas con error")
    return {'imported': len(productos), 'errors': errores}
