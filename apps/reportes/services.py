import calendar
import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from django.db.models import Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from apps.consumos.models import Consumo
from apps.inventario.models import MovimientoStock
from apps.productos.models import Producto, clasificar_stock
from apps.sectores.models import Sector
from apps.usuarios.models import Usuario
from core.constants import Messages, StockStatus
from core.exceptions import NoEncontrado

DIAS_PREDICCION = 15
ORDEN_RIESGO = {"high": 0, "medium": 1, "low": 2}


class NoDataForReport(NoEncontrado):
    """Se lanza cuando no existe el objetivo del reporte (setor, usuario...)."""
    default_detail = Messages.REPORT_NO_DATA


# ==========================================================
# AGREGACIÓN GENÉRICA
# ==========================================================


def agregar(
    filas: Iterable[Any],
    clave: Callable[[Any], Any],
    metricas: Dict[str, Optional[Callable[[Any], Any]]],
) -> Dict[Any, Dict[str, Any]]:
    """
    Agrupa `filas` por `clave(fila)` y acumula cada métrica.

    `metricas` mapea nombre -> función que extrae el valor a sumar;
    None cuenta las filas del grupo. Conserva el orden de aparición.
    """
    grupos: Dict[Any, Dict[str, Any]] = {}
    for fila in filas:
        k = clave(fila)
        grupo = grupos.get(k)
        if grupo is None:
            grupo = {nombre: 0 for nombre in metricas}
            grupos[k] = grupo
        for nombre, extractor in metricas.items():
            grupo[nombre] += 1 if extractor is None else extractor(fila)
    return grupos


def sumar(valores: Iterable[Any]) -> Any:
    return sum(valores, Decimal("0"))


# ==========================================================
# ANÁLISIS PREDICTIVO
# ==========================================================


def pendiente(valores: List[float]) -> float:
    """Pendiente por mínimos cuadrados de la serie (x = índice del día)."""
    n = len(valores)
    if n < 2:
        return 0.0
    x_sum = sum(range(n))
    y_sum = sum(valores)
    xy_sum = sum(i * v for i, v in enumerate(valores))
    x2_sum = sum(i * i for i in range(n))
    divisor = n * x2_sum - x_sum * x_sum
    if divisor == 0:
        return 0.0
    return (n * xy_sum - x_sum * y_sum) / divisor


def tendencia(valor_pendiente: float) -> str:
    if valor_pendiente > 0.1:
        return "increasing"
    if valor_pendiente < -0.1:
        return "decreasing"
    return "stable"


def multiplicador_tendencia(valor_tendencia: str) -> float:
    return {"increasing": 1.2, "decreasing": 0.8}.get(valor_tendencia, 1.0)


def nivel_confianza(valores: List[float]) -> str:
    if len(valores) < 3:
        return "low"
    media = sum(valores) / len(valores)
    varianza = sum((v - media) ** 2 for v in valores) / len(valores)
    cv = math.sqrt(varianza) / media if media > 0 else 1
    if cv < 0.3:
        return "high"
    if cv < 0.6:
        return "medium"
    return "low"


def dias_hasta_quiebre(stock: int, consumo_diario: float) -> float:
    """Días de cobertura del stock; 999 cuando no hay consumo."""
    if consumo_diario <= 0:
        return 999
    return stock / consumo_diario


def riesgo_quiebre(stock: int, consumo_diario: float) -> str:
    if stock <= 0:
        return "high"
    dias = dias_hasta_quiebre(stock, consumo_diario)
    if dias < 5:
        return "high"
    if dias < 10:
        return "medium"
    return "low"


def nivel_alerta(dias: Optional[int]) -> str:
    """Sin consumo (dias None) nunca alerta."""
    if dias is None:
        return "ok"
    if dias <= 7:
        return "critical"
    if dias <= 14:
        return "warning"
    return "ok"


def estado_foodstation(stock: int, umbral: Optional[int]) -> str:
    minimo = umbral or 10
    if stock == 0:
        return StockStatus.ZERADO
    if stock <= minimo / 2:
        return StockStatus.CRITICO
    if stock <= minimo:
        return StockStatus.BAIXO
    return StockStatus.OK


def reposicion_con_seguridad(prediccion: int, stock: int) -> int:
    seguridad = math.ceil(prediccion / 5)
    return max(0, prediccion - stock + seguridad)


def consumo_diario_por_producto(productos_ids: List[int], dias: int) -> Dict[int, List[int]]:
    """
    Serie diaria de cantidades consumidas de los últimos `dias` días
    (el último elemento es hoy). Días sin consumo valen 0.
    """
    hoy = timezone.now().date()
    desde = hoy - timedelta(days=dias - 1)
    filas = (
        Consumo.objects.filter(product_id__in=productos_ids, consumed_at__date__gte=desde)
        .annotate(dia=TruncDate("consumed_at"))
        .values("product_id", "dia")
        .annotate(qty=Sum("qty"))
    )
    series = {pk: [0] * dias for pk in productos_ids}
    for fila in filas:
        indice = (fila["dia"] - desde).days
        if 0 <= indice < dias:
            series[fila["product_id"]][indice] += fila["qty"]
    return series


def analisis_predictivo(producto: Producto, serie: List[int]) -> Dict[str, Any]:
    """Predicción de consumo a 15 días y cantidad sugerida de reposición."""
    promedio = sum(serie) / DIAS_PREDICCION
    valor_tendencia = tendencia(pendiente(serie))
    prediccion = math.ceil(sum(serie) * multiplicador_tendencia(valor_tendencia))
    reposicion = reposicion_con_seguridad(prediccion, producto.stock_quantity)

    return {
        "productId": producto.id,
        "productName": producto.name,
        "currentStock": producto.stock_quantity,
        "minQuantity": producto.min_quantity,
        "maxQuantity": producto.max_quantity,
        "last15DaysConsumption": serie,
        "averageDailyConsumption": round(promedio, 4),
        "consumptionTrend": valor_tendencia,
        "predicted15DaysConsumption": prediccion,
        "recommendedReorder": reposicion,
        "confidenceLevel": nivel_confianza(serie),
        "stockoutRisk": riesgo_quiebre(producto.stock_quantity, prediccion / DIAS_PREDICCION),
        "photoPath": producto.photo_path,
    }


# ==========================================================
# HELPERS DE PERÍODO Y BÚSQUEDA
# ==========================================================


def rango_mes_actual() -> Dict[str, date]:
    hoy = timezone.now().date()
    ultimo = calendar.monthrange(hoy.year, hoy.month)[1]
    return {"start": hoy.replace(day=1), "end": hoy.replace(day=ultimo)}


def obtener_sector(sector_id: int) -> Sector:
    try:
        return Sector.objects.get(pk=sector_id)
    except Sector.DoesNotExist:
        raise NoDataForReport(Messages.REPORT_SECTOR_NOT_FOUND)


def buscar_sector(*fragmentos: str) -> Sector:
    """Primer setor cuyo nombre contiene alguno de los fragmentos (sin distinguir mayúsculas)."""
    for sector in Sector.objects.order_by("id"):
        nombre = sector.name.lower()
        if any(fragmento in nombre for fragmento in fragmentos):
            return sector
    raise NoDataForReport(Messages.REPORT_SECTOR_NOT_FOUND)


def sector_foodstation() -> Sector:
    return buscar_sector("foodstation")


def datos_sector(sector: Sector) -> Dict[str, Any]:
    return {"id": sector.id, "name": sector.name}


def registro_consumo(consumo: Consumo) -> Dict[str, Any]:
    return {
        "consumption_id": consumo.id,
        "matricula": consumo.user.matricula,
        "user_name": consumo.user.full_name,
        "product_name": consumo.product.name,
        "quantity": consumo.qty,
        "unit_price": consumo.unit_price,
        "total_value": consumo.total_price,
        "consumed_at": consumo.consumed_at,
        "photo_path": consumo.product.photo_path,
    }


def consumos_en_rango(inicio: Optional[date], fin: Optional[date]):
    queryset = Consumo.objects.select_related("user", "product", "product__sector")
    if inicio:
        queryset = queryset.filter(consumed_at__date__gte=inicio)
    if fin:
        queryset = queryset.filter(consumed_at__date__lte=fin)
    return queryset.order_by("-consumed_at", "-id")


def entradas_por_producto(productos_ids: List[int], desde: datetime, hasta: datetime) -> Dict[int, Dict[str, int]]:
    """Entradas (cambios positivos) y salidas manuales (negativos) por producto."""
    movimientos = MovimientoStock.objects.filter(
        product_id__in=productos_ids, created_at__gte=desde, created_at__lte=hasta
    ).values("product_id", "change")
    return agregar(
        movimientos,
        clave=lambda m: m["product_id"],
        metricas={
            "entries": lambda m: max(m["change"], 0),
            "manual_exits": lambda m: abs(min(m["change"], 0)),
        },
    )


def salidas_por_producto(productos_ids: List[int], desde: datetime, hasta: datetime) -> Dict[int, Dict[str, Any]]:
    consumos = Consumo.objects.filter(
        product_id__in=productos_ids, consumed_at__gte=desde, consumed_at__lte=hasta
    ).values("product_id", "qty", "total_price")
    return agregar(
        consumos,
        clave=lambda c: c["product_id"],
        metricas={"qty": lambda c: c["qty"], "value": lambda c: c["total_price"], "count": None},
    )


# ==========================================================
# SERVICIO DE REPORTES
# ==========================================================


class ReportesService:
    """Servicio centralizado para generación de reportes."""

    @staticmethod
    def estadisticas_dashboard() -> Dict[str, Any]:
        productos = list(Producto.objects.all())
        inicio_mes = timezone.now().date().replace(day=1)
        return {
            "totalProducts": len(productos),
            "lowStockCount": sum(1 for p in productos if 0 < p.stock_quantity < 10),
            "monthlyConsumptions": Consumo.objects.filter(consumed_at__date__gte=inicio_mes).count(),
            "totalValue": sumar(p.inventory_value for p in productos),
        }

    @staticmethod
    def mas_consumidos(limite: int = 10) -> List[Dict[str, Any]]:
        consumos = Consumo.objects.select_related("product", "product__sector")
        grupos = agregar(
            consumos,
            clave=lambda c: c.product,
            metricas={
                "total_qty": lambda c: c.qty,
                "total_value": lambda c: c.total_price,
                "consumption_count": None,
            },
        )
        ranking = [
            {
                "product_id": producto.id,
                "product_name": producto.name,
                "sector_name": producto.sector.name if producto.sector else None,
                "photo_path": producto.photo_path,
                **metricas,
            }
            for producto, metricas in grupos.items()
        ]
        ranking.sort(key=lambda r: r["total_qty"], reverse=True)
        return ranking[:limite]

    @staticmethod
    def consumo_usuario(usuario_id: int, inicio: Optional[date] = None, fin: Optional[date] = None) -> Dict[str, Any]:
        try:
            usuario = Usuario.objects.get(pk=usuario_id)
        except Usuario.DoesNotExist:
            raise NoDataForReport(Messages.USER_NOT_FOUND)

        periodo = rango_mes_actual()
        inicio = inicio or periodo["start"]
        fin = fin or periodo["end"]

        consumos = list(consumos_en_rango(inicio, fin).filter(user=usuario))
        diarios = agregar(
            consumos,
            clave=lambda c: c.consumed_at.date(),
            metricas={"total": lambda c: c.total_price, "items": lambda c: c.qty},
        )

        return {
            "user": {
                "id": usuario.id,
                "full_name": usuario.full_name,
                "matricula": usuario.matricula,
                "monthly_limit": usuario.monthly_limit,
                "limit_enabled": usuario.limit_enabled,
            },
            "consumptions": [registro_consumo(c) for c in consumos],
            "dailyTotals": [
                {"date": dia, **valores} for dia, valores in sorted(diarios.items())
            ],
            "monthlyTotal": sumar(c.total_price for c in consumos),
            "period": {"start": inicio, "end": fin},
        }

    # ------------------------------------------------------
    # FoodStation
    # ------------------------------------------------------

    @staticmethod
    def reposicion_foodstation() -> Dict[str, Any]:
        sector = sector_foodstation()
        productos = list(Producto.objects.filter(sector=sector))
        series = consumo_diario_por_producto([p.id for p in productos], DIAS_PREDICCION)

        analisis = [analisis_predictivo(p, series[p.id]) for p in productos]
        analisis.sort(key=lambda a: (ORDEN_RIESGO[a["stockoutRisk"]], -a["recommendedReorder"]))

        ahora = timezone.now()
        return {
            "sector": datos_sector(sector),
            "products": analisis,
            "generatedAt": ahora,
            "periodAnalyzed": {"start": ahora - timedelta(days=DIAS_PREDICCION), "end": ahora},
            "periodProjected": {"start": ahora, "end": ahora + timedelta(days=DIAS_PREDICCION)},
            "totalRecommendedItems": sum(1 for a in analisis if a["recommendedReorder"] > 0),
            "highRiskItems": sum(1 for a in analisis if a["stockoutRisk"] == "high"),
        }

    @staticmethod
    def consumo_foodstation(filtros: Dict[str, Any]) -> Dict[str, Any]:
        sector = sector_foodstation()
        periodo = rango_mes_actual()
        inicio = filtros.get("start_date") or periodo["start"]
        fin = filtros.get("end_date") or periodo["end"]

        consumos = consumos_en_rango(inicio, fin).filter(product__sector=sector)
        if filtros.get("user_id"):
            consumos = consumos.filter(user_id=filtros["user_id"])

        registros = []
        for consumo in consumos:
            registro = registro_consumo(consumo)
            registro["sector_name"] = sector.name
            registros.append(registro)

        resumen = None
        if filtros.get("group_by") == "user":
            grupos = agregar(
                registros,
                clave=lambda r: (r["matricula"], r["user_name"]),
                metricas={
                    "total_consumed_value": lambda r: r["total_value"],
                    "total_items": lambda r: r["quantity"],
                    "consumption_count": None,
                },
            )
            resumen = [
                {"matricula": matricula, "user_name": nombre, **valores}
                for (matricula, nombre), valores in grupos.items()
            ]

        return {
            "records": registros,
            "summary": resumen,
            "period": {"start": inicio, "end": fin},
            "generatedAt": timezone.now(),
        }

    @staticmethod
    def panorama_foodstation(dias: int = 30) -> Dict[str, Any]:
        sector = sector_foodstation()
        ahora = timezone.now()
        desde = ahora - timedelta(days=dias)

        productos = list(Producto.objects.filter(sector=sector))
        ids = [p.id for p in productos]
        series = consumo_diario_por_producto(ids, DIAS_PREDICCION)
        salidas = salidas_por_producto(ids, desde, ahora)

        panorama = []
        for producto in productos:
            serie = series[producto.id]
            promedio = sum(serie) / DIAS_PREDICCION
            prediccion = sum(serie)
            salidas_mes = salidas.get(producto.id, {}).get("qty", 0)
            dias_cobertura = dias_hasta_quiebre(producto.stock_quantity, promedio)

            panorama.append({
                "product_id": producto.id,
                "product_name": producto.name,
                "category": producto.category,
                "current_stock": producto.stock_quantity,
                "min_stock": producto.low_stock_threshold,
                "unit_price": producto.unit_price,
                "total_exits_month": salidas_mes,
                "total_value_exits_month": producto.unit_price * salidas_mes,
                "avg_daily_consumption_15d": round(promedio, 4),
                "predicted_consumption_15d": prediccion,
                "recommended_reorder": reposicion_con_seguridad(prediccion, producto.stock_quantity),
                "stock_status": estado_foodstation(producto.stock_quantity, producto.low_stock_threshold),
                "stockout_risk": riesgo_quiebre(producto.stock_quantity, promedio),
                "days_until_stockout": math.floor(dias_cobertura) if promedio > 0 else None,
                "photo_path": producto.photo_path,
            })

        kpis = {
            "total_exits_month": sum(p["total_exits_month"] for p in panorama),
            "total_value_month": sumar(p["total_value_exits_month"] for p in panorama),
            "unique_products_consumed": sum(1 for p in panorama if p["total_exits_month"] > 0),
            "total_restock_value": sumar(p["recommended_reorder"] * p["unit_price"] for p in panorama),
            "high_risk_items": sum(1 for p in panorama if p["stockout_risk"] == "high"),
        }

        consumidos = sorted(
            (p for p in panorama if p["total_exits_month"] > 0),
            key=lambda p: p["total_exits_month"],
            reverse=True,
        )[:5]

        return {
            "kpis": kpis,
            "products": panorama,
            "topConsumed": [
                {
                    "product_id": p["product_id"],
                    "product_name": p["product_name"],
                    "total_qty": p["total_exits_month"],
                    "total_value": p["total_value_exits_month"],
                    "photo_path": p["photo_path"],
                }
                for p in consumidos
            ],
            "period": {"start": desde, "end": ahora, "days": dias},
            "generatedAt": ahora,
        }

    @staticmethod
    def control_consumo_foodstation(filtros: Dict[str, Any]) -> Dict[str, Any]:
        periodo = rango_mes_actual()
        inicio = filtros.get("start_date") or periodo["start"]
        fin = filtros.get("end_date") or periodo["end"]

        consumos = consumos_en_rango(inicio, fin)
        nombre_usuario = None
        usuario_id = filtros.get("user_id")
        if usuario_id:
            try:
                nombre_usuario = Usuario.objects.get(pk=usuario_id).full_name
            except Usuario.DoesNotExist:
                raise NoDataForReport(Messages.USER_NOT_FOUND)
            consumos = consumos.filter(user_id=usuario_id)

        registros = [registro_consumo(c) for c in consumos]
        totales = agregar(
            registros,
            clave=lambda r: r["matricula"],
            metricas={"monthly_total": lambda r: r["total_value"]},
        )
        nombres = {r["matricula"]: r["user_name"] for r in registros}
        totales_mensuales = sorted(
            (
                {"matricula": matricula, "user_name": nombres[matricula], **valores}
                for matricula, valores in totales.items()
            ),
            key=lambda t: t["monthly_total"],
            reverse=True,
        )

        return {
            "userId": usuario_id,
            "userName": nombre_usuario,
            "records": registros,
            "monthlyTotals": totales_mensuales,
            "monthlyTotal": sumar(r["total_value"] for r in registros),
            "totalItems": sum(r["quantity"] for r in registros),
            "period": {"start": inicio, "end": fin},
            "generatedAt": timezone.now(),
        }

    # ------------------------------------------------------
    # Setores
    # ------------------------------------------------------

    @staticmethod
    def mensual_sector(sector_id: int, cadencia: str = "monthly") -> Dict[str, Any]:
        sector = obtener_sector(sector_id)
        ahora = timezone.now()
        if cadencia == "weekly":
            dias, inicio = 7, ahora - timedelta(days=7)
        elif cadencia == "biweekly":
            dias, inicio = 14, ahora - timedelta(days=14)
        else:
            dias = 30
            inicio = ahora.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        productos = list(Producto.objects.filter(sector=sector))
        ids = [p.id for p in productos]
        consumido = salidas_por_producto(ids, inicio, ahora)
        series_prediccion = consumo_diario_por_producto(ids, DIAS_PREDICCION)
        series_frecuencia = consumo_diario_por_producto(ids, dias)

        apertura, cierre, compras, frecuencia = [], [], [], []
        for producto in productos:
            cantidad = consumido.get(producto.id, {}).get("qty", 0)
            apertura.append({
                "productId": producto.id,
                "productName": producto.name,
                "quantity": producto.stock_quantity + cantidad,
                "value": producto.unit_price * (producto.stock_quantity + cantidad),
                "photoPath": producto.photo_path,
            })
            cierre.append({
                "productId": producto.id,
                "productName": producto.name,
                "quantity": producto.stock_quantity,
                "value": producto.inventory_value,
                "photoPath": producto.photo_path,
            })

            analisis = analisis_predictivo(producto, series_prediccion[producto.id])
            if analisis["recommendedReorder"] > 0:
                compras.append({
                    "productId": producto.id,
                    "productName": producto.name,
                    "currentStock": producto.stock_quantity,
                    "recommendedQuantity": analisis["recommendedReorder"],
                    "estimatedCost": producto.unit_price * analisis["recommendedReorder"],
                    "priority": analisis["stockoutRisk"],
                    "photoPath": producto.photo_path,
                })

            serie = series_frecuencia[producto.id]
            frecuencia.append({
                "productId": producto.id,
                "productName": producto.name,
                "restockFrequency": round(sum(1 for q in serie if q > 0) / dias, 4),
                "averageDailyUsage": round(sum(serie) / dias, 4),
            })

        compras.sort(key=lambda c: ORDEN_RIESGO[c["priority"]])
        frecuencia.sort(key=lambda f: f["restockFrequency"], reverse=True)

        return {
            "sector": datos_sector(sector),
            "period": {"start": inicio, "end": ahora, "cadence": cadencia},
            "openingStock": apertura,
            "closingStock": cierre,
            "totalConsumption": sumar(v["value"] for v in consumido.values()),
            "totalItemsConsumed": sum(v["qty"] for v in consumido.values()),
            "recommendedPurchases": compras,
            "frequencyAnalysis": frecuencia,
        }

    @staticmethod
    def limpieza_sector(mes: str, cadencia: str = "full_month", sector_id: Optional[int] = None,
                        comparar_anterior: bool = False) -> Dict[str, Any]:
        sector = obtener_sector(sector_id) if sector_id else buscar_sector("limpeza", "cleaning")
        anio, numero_mes = (int(parte) for parte in mes.split("-"))
        ultimo = calendar.monthrange(anio, numero_mes)[1]

        if cadencia == "first_half":
            dia_inicio, dia_fin = 1, 15
        elif cadencia == "second_half":
            dia_inicio, dia_fin = 16, ultimo
        else:
            dia_inicio, dia_fin = 1, ultimo
        inicio = datetime(anio, numero_mes, dia_inicio)
        fin = datetime(anio, numero_mes, dia_fin, 23, 59, 59)

        productos = list(Producto.objects.filter(sector=sector))
        ids = [p.id for p in productos]
        entradas = entradas_por_producto(ids, inicio, fin)
        salidas = salidas_por_producto(ids, inicio, fin)

        filas = []
        for producto in productos:
            entradas_producto = entradas.get(producto.id, {}).get("entries", 0)
            salidas_producto = salidas.get(producto.id, {}).get("qty", 0)
            compra = math.ceil(salidas_producto * 11 / 10)
            filas.append({
                "product_id": producto.id,
                "product_name": producto.name,
                "category": producto.category,
                "opening_stock": producto.stock_quantity - entradas_producto + salidas_producto,
                "entries": entradas_producto,
                "exits": salidas_producto,
                "closing_stock": producto.stock_quantity,
                "consumption_total": salidas_producto,
                "unit_price": producto.unit_price,
                "consumption_value": producto.unit_price * salidas_producto,
                "recommended_purchase": compra,
                "estimated_cost": producto.unit_price * compra,
                "photo_path": producto.photo_path,
            })

        comparacion = None
        if comparar_anterior:
            anio_previo, mes_previo = (anio - 1, 12) if numero_mes == 1 else (anio, numero_mes - 1)
            previo = ReportesService.limpieza_sector(
                f"{anio_previo}-{mes_previo:02d}", cadencia, sector.id, False
            )
            consumo_previo = {p["product_id"]: p["consumption_total"] for p in previo["products"]}
            comparacion = []
            for fila in filas:
                anterior = consumo_previo.get(fila["product_id"], 0)
                variacion = fila["consumption_total"] - anterior
                comparacion.append({
                    "product_id": fila["product_id"],
                    "product_name": fila["product_name"],
                    "current_month_consumption": fila["consumption_total"],
                    "previous_month_consumption": anterior,
                    "variance": variacion,
                    "variance_percent": round(variacion / anterior * 100, 2) if anterior > 0 else 0,
                })

        return {
            "sector": datos_sector(sector),
            "period": {"start": inicio, "end": fin, "cadence": cadencia},
            "products": filas,
            "comparison": comparacion,
            "summary": {
                "total_products": len(filas),
                "total_consumption_value": sumar(f["consumption_value"] for f in filas),
                "total_items_consumed": sum(f["consumption_total"] for f in filas),
                "total_purchase_value": sumar(f["estimated_cost"] for f in filas),
                "total_entries": sum(f["entries"] for f in filas),
                "total_exits": sum(f["exits"] for f in filas),
            },
            "generatedAt": timezone.now(),
        }

    @staticmethod
    def maquina_cafe(sector_id: Optional[int] = None, cadencia: str = "weekly", semanas: int = 4) -> Dict[str, Any]:
        sector = obtener_sector(sector_id) if sector_id else buscar_sector("café", "cafe", "coffee")
        fin = timezone.now()
        inicio = fin - timedelta(days=semanas * 7)

        productos = list(Producto.objects.filter(sector=sector))
        ids = [p.id for p in productos]
        entradas = entradas_por_producto(ids, inicio, fin)
        salidas = salidas_por_producto(ids, inicio, fin)

        filas = []
        for producto in productos:
            entradas_producto = entradas.get(producto.id, {}).get("entries", 0)
            salidas_producto = salidas.get(producto.id, {}).get("qty", 0)
            promedio_semanal = salidas_producto / semanas

            if promedio_semanal >= 10:
                frecuencia, cadencia_sugerida = "high", "weekly"
            elif promedio_semanal >= 5:
                frecuencia, cadencia_sugerida = "medium", "biweekly"
            else:
                frecuencia, cadencia_sugerida = "low", "monthly"

            filas.append({
                "product_id": producto.id,
                "product_name": producto.name,
                "category": producto.category,
                "opening_stock": producto.stock_quantity - entradas_producto + salidas_producto,
                "entries": entradas_producto,
                "exits": salidas_producto,
                "current_stock": producto.stock_quantity,
                "weekly_avg_consumption": round(promedio_semanal, 4),
                "biweekly_avg_consumption": round(salidas_producto / (semanas / 2), 4),
                "consumption_frequency": frecuencia,
                "suggested_reorder_cadence": cadencia_sugerida,
                "unit_price": producto.unit_price,
                "photo_path": producto.photo_path,
            })

        total_salidas = sum(f["exits"] for f in filas)
        mas_consumidos = sorted(filas, key=lambda f: f["exits"], reverse=True)[:5]

        return {
            "sector": datos_sector(sector),
            "period": {"start": inicio, "end": fin, "cadence": cadencia, "weeks": semanas},
            "kpis": {
                "total_products": len(filas),
                "total_exits": total_salidas,
                "total_value_exits": sumar(f["unit_price"] * f["exits"] for f in filas),
                "high_frequency_items": sum(1 for f in filas if f["consumption_frequency"] == "high"),
                "avg_weekly_consumption": round(total_salidas / semanas, 4),
            },
            "products": filas,
            "topConsumed": [
                {
                    "product_id": f["product_id"],
                    "product_name": f["product_name"],
                    "total_qty": f["exits"],
                    "frequency": f["consumption_frequency"],
                    "photo_path": f["photo_path"],
                }
                for f in mas_consumidos
            ],
            "generatedAt": timezone.now(),
        }

    @staticmethod
    def inventario_general(filtros: Dict[str, Any]) -> Dict[str, Any]:
        productos = Producto.objects.select_related("sector").filter(sector__isnull=False)
        if filtros.get("sector_id"):
            productos = productos.filter(sector_id=filtros["sector_id"])
        palabra = (filtros.get("keyword") or "").strip().lower()
        if not filtros.get("include_out_of_stock", True):
            productos = productos.filter(stock_quantity__gt=0)

        todos = []
        for producto in productos.order_by("sector__name", "name"):
            if palabra and palabra not in producto.name.lower() \
                    and palabra not in (producto.category or "").lower():
                continue
            todos.append({
                "product_id": producto.id,
                "product_name": producto.name,
                "sector_id": producto.sector_id,
                "sector_name": producto.sector.name,
                "category": producto.category,
                "current_stock": producto.stock_quantity,
                "unit_price": producto.unit_price,
                "total_value": producto.inventory_value,
                "stock_status": clasificar_stock(
                    producto.stock_quantity, producto.low_stock_threshold, producto.max_quantity
                ),
                "photo_path": producto.photo_path,
            })

        grupos = agregar(
            todos,
            clave=lambda p: (p["sector_id"], p["sector_name"]),
            metricas={"total_products": None, "total_value": lambda p: p["total_value"]},
        )
        por_sector = [
            {
                "sector_id": sector_id,
                "sector_name": nombre,
                **valores,
                "products": [p for p in todos if p["sector_id"] == sector_id],
            }
            for (sector_id, nombre), valores in grupos.items()
        ]

        return {
            "kpis": {
                "total_products": len(todos),
                "total_sectors": len(por_sector),
                "total_inventory_value": sumar(p["total_value"] for p in todos),
                "low_stock_items": sum(1 for p in todos if p["stock_status"] == StockStatus.BAIXO),
                "out_of_stock_items": sum(1 for p in todos if p["stock_status"] == StockStatus.ZERADO),
            },
            "bySector": por_sector,
            "allProducts": todos,
            "generatedAt": timezone.now(),
        }

    @staticmethod
    def gestion_sector(sector_id: int, dias: int = 30) -> Dict[str, Any]:
        sector = obtener_sector(sector_id)
        fin = timezone.now()
        inicio = fin - timedelta(days=dias)

        productos = list(Producto.objects.filter(sector=sector))
        ids = [p.id for p in productos]
        movimientos = entradas_por_producto(ids, inicio, fin)
        consumos = salidas_por_producto(ids, inicio, fin)

        filas = []
        for producto in productos:
            entradas = movimientos.get(producto.id, {}).get("entries", 0)
            salidas = movimientos.get(producto.id, {}).get("manual_exits", 0) \
                + consumos.get(producto.id, {}).get("qty", 0)
            promedio = salidas / dias
            prediccion = promedio * 30
            dias_cobertura = math.floor(producto.stock_quantity / promedio) if promedio > 0 else None

            proximo_pedido = None
            if dias_cobertura is not None and dias_cobertura < 60:
                proximo_pedido = fin + timedelta(days=dias_cobertura - 7)

            reposicion = math.ceil(prediccion * 6 / 5)
            filas.append({
                "product_id": producto.id,
                "product_name": producto.name,
                "category": producto.category,
                "current_stock": producto.stock_quantity,
                "total_entries": entradas,
                "total_exits": salidas,
                "unit_price": producto.unit_price,
                "total_value": producto.inventory_value,
                "avg_daily_consumption_30d": round(promedio, 4),
                "predicted_consumption_30d": round(prediccion, 2),
                "recommended_reorder": reposicion,
                "reorder_value": producto.unit_price * reposicion,
                "days_until_stockout": dias_cobertura,
                "next_order_date": proximo_pedido,
                "alert_level": nivel_alerta(dias_cobertura),
                "stock_status": producto.stock_status,
                "photo_path": producto.photo_path,
            })

        mayores_salidas = sorted(filas, key=lambda f: f["total_exits"], reverse=True)[:5]

        return {
            "sector": datos_sector(sector),
            "kpis": {
                "total_products": len(filas),
                "total_entries": sum(f["total_entries"] for f in filas),
                "total_exits": sum(f["total_exits"] for f in filas),
                "total_inventory_value": sumar(f["total_value"] for f in filas),
                "total_reorder_value": sumar(f["reorder_value"] for f in filas),
                "critical_items": sum(1 for f in filas if f["alert_level"] == "critical"),
            },
            "products": filas,
            "topExits": [
                {
                    "product_id": f["product_id"],
                    "product_name": f["product_name"],
                    "total_qty": f["total_exits"],
                    "total_value": f["unit_price"] * f["total_exits"],
                    "photo_path": f["photo_path"],
                }
                for f in mayores_salidas
            ],
            "period": {"start": inicio, "end": fin, "days": dias},
            "generatedAt": timezone.now(),
        }
