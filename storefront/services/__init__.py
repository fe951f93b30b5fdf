# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# ESTRUCTURA:
# ├── promotions.py       → vigencia de promociones y precio efectivo
# ├── duplicates.py       → detección de pedidos duplicados
# ├── product_service.py  → catálogo y CRUD de productos
# ├── cart_service.py     → carrito en sesión
# ├── checkout_service.py → pedido + enlace de WhatsApp
# ├── order_service.py    → pedidos del panel
# ├── report_service.py   → exportación CSV / TXT
# ├── popup_service.py    → aviso de inicio
# └── auth_service.py     → contraseña del administrador
# ==============================================================================

from .promotions import (
    bulk_promo_price,
    effective_price,
    is_promotion_active,
    parse_calendar_date,
    store_today,
)
from .duplicates import (
    DUPLICATE_MARKER,
    annotate_duplicates,
    composite_key,
    find_duplicate_order_ids,
)
from .auth_service import AdminAuthService
from .product_service import ProductService
from .cart_service import CartService
from .checkout_service import CheckoutService
from .order_service import OrderService
from .report_service import ReportService
from .popup_service import PopupService

__all__ = [
    # Reglas
    'bulk_promo_price',
    'effective_price',
    'is_promotion_active',
    'parse_calendar_date',
    'store_today',
    'DUPLICATE_MARKER',
    'annotate_duplicates',
    'composite_key',
    'find_duplicate_order_ids',

    # Servicios
    'AdminAuthService',
    'ProductService',
    'CartService',
    'CheckoutService',
    'OrderService',
    'ReportService',
    'PopupService',
]
