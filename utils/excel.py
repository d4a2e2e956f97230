"""
Helpers para generar planillas .xlsx con openpyxl y devolverlas como descarga.
"""
from io import BytesIO

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def agregar_hoja(libro, titulo, columnas, filas, color_encabezado=None, fuente_encabezado=None):
    """
    Agrega una hoja con encabezado estilizado.
    `columnas` es una lista de (titulo, ancho); `filas` un iterable de listas de valores.
    """
    hoja = libro.create_sheet(titulo)

    hoja.append([titulo_columna for titulo_columna, _ in columnas])
    for indice, (_, ancho) in enumerate(columnas, start=1):
        hoja.column_dimensions[get_column_letter(indice)].width = ancho

    fuente = fuente_encabezado or Font(bold=True)
    relleno = None
    if color_encabezado:
        relleno = PatternFill(start_color=color_encabezado, end_color=color_encabezado, fill_type="solid")
    for celda in hoja[1]:
        celda.font = fuente
        if relleno:
            celda.fill = relleno

    for fila in filas:
        hoja.append(list(fila))
    return hoja


def nuevo_libro():
    """Libro vacío, sin la hoja por defecto."""
    libro = Workbook()
    libro.remove(libro.active)
    return libro


def respuesta_xlsx(libro, nombre_archivo):
    """Serializa el libro en memoria y arma la respuesta de descarga."""
    buffer = BytesIO()
    libro.save(buffer)
    response = HttpResponse(buffer.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename={nombre_archivo}'
    return response


def formato_moneda(valor):
    return f"R$ {float(valor or 0):.2f}"


def formato_fecha_hora(valor):
    return valor.strftime('%d/%m/%Y %H:%M') if valor else ''
