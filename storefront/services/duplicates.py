# ==============================================================================
# DETECCIÓN DE PEDIDOS DUPLICADOS
# ==============================================================================
# Marca pedidos que parecen reenvíos accidentales de la misma compra.
#
# CLAVE COMPUESTA:
#   cpf | total | "id:cantidad" ordenados y unidos por coma
#
#   Ej: "111.111.111-11|150.00|1:2"
#
# Se recorren los pedidos del más antiguo al más reciente: el primero de
# cada clave es el original, todos los siguientes son duplicados.
#
# NOTA: La clave no incluye la fecha. Dos compras reales iguales del mismo
# cliente también quedan marcadas (posible falso positivo).
# ==============================================================================

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Set

from storefront.models import Order
from storefront.performance_logger import profile_function
from storefront.repositories.errors import BackendError
from storefront.repositories.interfaces import IOrderRepository

logger = logging.getLogger(__name__)

DUPLICATE_MARKER = '[POSSÍVEL DUPLICIDADE] '

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _order_timestamp(order: Order) -> datetime:
    """Fecha del pedido como datetime con zona; ilegible → lo más antiguo."""
    try:
        dt = datetime.fromisoformat(order.date.replace('Z', '+00:00'))
    except (AttributeError, ValueError):
        return _EPOCH
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def item_signature(order: Order) -> str:
    """'id:cantidad' de cada ítem, ordenados y unidos por coma ('' si no hay)."""
    return ','.join(sorted(f"{item.id}:{item.quantity}" for item in order.items))


def composite_key(order: Order) -> str:
    """Clave cliente | total | ítems."""
    return f"{order.customer.cpf}|{order.total_price:.2f}|{item_signature(order)}"


def sort_chronologically(orders: Iterable[Order]) -> List[Order]:
    """Orden ascendente por fecha; los empates conservan el orden original."""
    return sorted(orders, key=_order_timestamp)


@profile_function(name="Detectar pedidos duplicados")
def find_duplicate_order_ids(orders: Iterable[Order]) -> Set[str]:
    """
    Identifica los pedidos duplicados.

    Args:
        orders: Todos los pedidos (cualquier orden)

    Returns:
        IDs de los pedidos marcados como duplicados
    """
    seen = set()
    duplicates = set()
    for order in sort_chronologically(orders):
        key = composite_key(order)
        if key in seen:
            duplicates.add(order.id)
        else:
            seen.add(key)
    return duplicates


def annotate_duplicates(orders: List[Order], order_repo: IOrderRepository) -> Set[str]:
    """
    Detecta duplicados y antepone DUPLICATE_MARKER a su observación.

    Solo se escribe en el backend si la observación todavía no tiene la
    marca, así que volver a ejecutarlo no cambia nada. Una falla al guardar
    se registra en el log y no interrumpe el resto.

    Args:
        orders: Pedidos cargados (se actualizan en memoria)
        order_repo: Repositorio donde persistir la marca

    Returns:
        IDs de los pedidos duplicados
    """
    duplicate_ids = find_duplicate_order_ids(orders)

    for order in orders:
        if order.id not in duplicate_ids:
            continue
        if order.observation.startswith(DUPLICATE_MARKER):
            continue
        new_observation = DUPLICATE_MARKER + order.observation
        try:
            order_repo.update_order(order.id, {'observation': new_observation})
        except BackendError as e:
            logger.error("No se pudo marcar el pedido %s como duplicado: %s", order.id, e)
            continue
        order.observation = new_observation
        logger.info("Pedido %s marcado como posible duplicado", order.id)

    return duplicate_ids
