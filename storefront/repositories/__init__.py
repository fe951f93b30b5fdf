# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos (ITable + repositorios por dominio)
# ├── errors.py              → BackendError
# ├── base.py                → JsonTable (archivos locales)
# ├── supabase.py            → SupabaseTable (API REST alojada)
# ├── product_repository.py  → tabla products
# ├── order_repository.py    → tabla orders
# └── settings_repository.py → tabla settings
#
# Cambiar de backend: ver app_container.py (los services no cambian).
# ==============================================================================

from .interfaces import (
    ITable,
    IProductRepository,
    IOrderRepository,
    ISettingsRepository,
)
from .errors import BackendError

from .base import BaseRepository, JsonTable, ID_INTEGER, ID_UUID
from .supabase import SupabaseClient, SupabaseTable
from .product_repository import ProductRepository
from .order_repository import OrderRepository
from .settings_repository import SettingsRepository, POPUP_KEY

__all__ = [
    # Interfaces
    'ITable',
    'IProductRepository',
    'IOrderRepository',
    'ISettingsRepository',

    'BackendError',

    # Backends
    'BaseRepository',
    'JsonTable',
    'ID_INTEGER',
    'ID_UUID',
    'SupabaseClient',
    'SupabaseTable',

    # Repositorios
    'ProductRepository',
    'OrderRepository',
    'SettingsRepository',
    'POPUP_KEY',
]
