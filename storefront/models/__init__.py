# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses, independientes del backend
# (archivos JSON en desarrollo, base alojada en producción).
# ==============================================================================

from .entities import (
    # Productos
    Product,
    ProductVisibility,
    VALID_VISIBILITIES,
    DEFAULT_CATEGORY,

    # Pedidos
    Order,
    OrderStatus,
    CustomerStatus,
    Customer,
    VALID_ORDER_STATUSES,
    VALID_CUSTOMER_STATUSES,

    # Carrito
    CartItem,

    # Aviso
    PopupConfig,

    utc_now_iso,
)

__all__ = [
    # Productos
    'Product',
    'ProductVisibility',
    'VALID_VISIBILITIES',
    'DEFAULT_CATEGORY',

    # Pedidos
    'Order',
    'OrderStatus',
    'CustomerStatus',
    'Customer',
    'VALID_ORDER_STATUSES',
    'VALID_CUSTOMER_STATUSES',

    # Carrito
    'CartItem',

    # Aviso
    'PopupConfig',

    'utc_now_iso',
]
