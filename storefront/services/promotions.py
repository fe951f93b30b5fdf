# ==============================================================================
# VIGENCIA DE PROMOCIONES
# ==============================================================================
# Decide si el precio promocional de un producto aplica hoy.
#
# REGLAS:
#   - Sin promoPrice (o <= 0) o sin promoEndDate → inactiva
#   - Con promoStartDate → hoy debe ser >= inicio
#   - Vigente durante TODO el día de promoEndDate (inclusive)
#
# Las fechas se comparan como fechas de calendario (año-mes-día), nunca
# como instantes: "hoy" es la fecha local de la tienda (STORE_TIMEZONE).
# Así no hay desfases de un día por UTC vs. hora local.
# ==============================================================================

import logging
from datetime import date, datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from storefront.models import Product

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = 'America/Sao_Paulo'


def store_today(tz_name: str = DEFAULT_TIMEZONE, now: Optional[datetime] = None) -> date:
    """
    Fecha de hoy en la zona horaria de la tienda.

    Args:
        tz_name: Nombre IANA (ej: 'America/Sao_Paulo')
        now: Instante de referencia con zona (por defecto, ahora)

    Returns:
        Fecha de calendario local
    """
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Zona horaria desconocida %r, usando %s", tz_name, DEFAULT_TIMEZONE)
        tz = ZoneInfo(DEFAULT_TIMEZONE)
    if now is None:
        return datetime.now(tz).date()
    return now.astimezone(tz).date()


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Interpreta un valor como fecha de calendario.

    Acepta 'YYYY-MM-DD', un timestamp ISO (se toma solo la parte de fecha),
    o un date/datetime. Retorna None si está vacío o no se puede leer.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug("Fecha de promoción inválida: %r", value)
        return None


def is_promotion_active(product: Product, today: Optional[date] = None) -> bool:
    """
    Indica si la promoción del producto está vigente.

    Args:
        product: Producto con promo_price / promo_start_date / promo_end_date
        today: Fecha de referencia (por defecto, hoy en la zona por defecto)

    Returns:
        True si debe usarse promo_price
    """
    if product.promo_price is None or product.promo_price <= 0:
        return False

    end = parse_calendar_date(product.promo_end_date)
    if end is None:
        return False

    today = today or store_today()

    if product.promo_start_date:
        start = parse_calendar_date(product.promo_start_date)
        # Un inicio ilegible no se interpreta como "sin inicio"
        if start is None or today < start:
            return False

    return today <= end


def effective_price(product: Product, today: Optional[date] = None) -> float:
    """Precio unitario a mostrar/cobrar hoy."""
    if is_promotion_active(product, today):
        return float(product.promo_price)
    return float(product.price)


def bulk_promo_price(price: float, discount_percent: float) -> float:
    """
    Precio promocional para un descuento porcentual.

    Args:
        price: Precio base
        discount_percent: Descuento, 0 < p < 100

    Returns:
        Precio con descuento redondeado a centavos
    """
    return round(price * (1 - discount_percent / 100.0), 2)
