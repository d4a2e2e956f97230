"""
Planillas .xlsx de los reportes (openpyxl).
"""
from typing import Any, Dict

from openpyxl.styles import Font

from utils.excel import agregar_hoja, formato_fecha_hora, formato_moneda, nuevo_libro

VERDE = "FF4CAF50"
AZUL = "FF2196F3"
GRIS = "FFE0E0E0"
FUENTE_BLANCA = Font(bold=True, color="FFFFFFFF")

COLUMNAS_CONSUMO_DETALLADO = [
    ("Matrícula", 15),
    ("Nome Completo", 30),
    ("Produto", 30),
    ("Quantidade", 12),
    ("Preço Unitário", 18),
    ("Preço Total", 18),
    ("Data e Hora", 22),
]

COLUMNAS_TOTALES_MENSUALES = [
    ("Matrícula", 15),
    ("Nome Completo", 30),
    ("Total Mês", 18),
]


def libro_control_consumo(reporte: Dict[str, Any], formato: str = "consolidated"):
    """
    Hoja "Consumos Detalhados" y, en formato consolidado con datos,
    la hoja "Totais Mensais" por matrícula.
    """
    libro = nuevo_libro()
    filas = [
        [
            r["matricula"],
            r["user_name"],
            r["product_name"],
            r["quantity"],
            formato_moneda(r["unit_price"]),
            formato_moneda(r["total_value"]),
            formato_fecha_hora(r["consumed_at"]),
        ]
        for r in reporte["records"]
    ]
    agregar_hoja(libro, "Consumos Detalhados", COLUMNAS_CONSUMO_DETALLADO, filas,
                 color_encabezado=VERDE, fuente_encabezado=FUENTE_BLANCA)

    if formato == "consolidated" and reporte["monthlyTotals"]:
        totales = [
            [t["matricula"], t["user_name"], formato_moneda(t["monthly_total"])]
            for t in reporte["monthlyTotals"]
        ]
        agregar_hoja(libro, "Totais Mensais", COLUMNAS_TOTALES_MENSUALES, totales,
                     color_encabezado=AZUL, fuente_encabezado=FUENTE_BLANCA)
    return libro


def libro_reposicion(reporte: Dict[str, Any]):
    libro = nuevo_libro()
    columnas = [
        ("Produto", 30),
        ("Estoque Atual", 15),
        ("Média Diária", 14),
        ("Tendência", 14),
        ("Previsão 15 dias", 18),
        ("Reposição Sugerida", 20),
        ("Confiança", 12),
        ("Risco", 10),
    ]
    filas = [
        [
            p["productName"],
            p["currentStock"],
            p["averageDailyConsumption"],
            p["consumptionTrend"],
            p["predicted15DaysConsumption"],
            p["recommendedReorder"],
            p["confidenceLevel"],
            p["stockoutRisk"],
        ]
        for p in reporte["products"]
    ]
    agregar_hoja(libro, "Reposição FoodStation", columnas, filas,
                 color_encabezado=VERDE, fuente_encabezado=FUENTE_BLANCA)
    return libro


def libro_mensual_sector(reporte: Dict[str, Any]):
    libro = nuevo_libro()
    apertura = {s["productId"]: s for s in reporte["openingStock"]}

    agregar_hoja(
        libro,
        "Estoque",
        [("Produto", 30), ("Estoque Inicial", 16), ("Estoque Final", 16), ("Valor Final", 16)],
        [
            [
                s["productName"],
                apertura[s["productId"]]["quantity"],
                s["quantity"],
                formato_moneda(s["value"]),
            ]
            for s in reporte["closingStock"]
        ],
        color_encabezado=GRIS,
    )
    agregar_hoja(
        libro,
        "Compras Recomendadas",
        [("Produto", 30), ("Estoque Atual", 15), ("Quantidade", 12), ("Custo Estimado", 18), ("Prioridade", 12)],
        [
            [
                c["productName"],
                c["currentStock"],
                c["recommendedQuantity"],
                formato_moneda(c["estimatedCost"]),
                c["priority"],
            ]
            for c in reporte["recommendedPurchases"]
        ],
        color_encabezado=GRIS,
    )
    agregar_hoja(
        libro,
        "Frequência",
        [("Produto", 30), ("Frequência de Uso", 18), ("Uso Médio Diário", 18)],
        [
            [f["productName"], f["restockFrequency"], f["averageDailyUsage"]]
            for f in reporte["frequencyAnalysis"]
        ],
        color_encabezado=GRIS,
    )
    return libro
