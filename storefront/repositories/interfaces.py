# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Dos niveles:
#
# 1. ITable: el backend visto como un almacén CRUD genérico. Lo implementan
#    JsonTable (archivos locales) y SupabaseTable (API REST alojada).
#
# 2. Repositorios por dominio (productos, pedidos, settings): trabajan con
#    entidades y delegan en una ITable. Los servicios dependen de estas
#    interfaces, no de la implementación concreta.
#
# Cambiar de backend solo toca app_container.py.
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from storefront.models import Order, Product


# ==============================================================================
# INTERFAZ BASE - Almacén de registros
# ==============================================================================

@runtime_checkable
class ITable(Protocol):
    """
    Operaciones mínimas que se consumen del backend.
    Todas pueden lanzar BackendError.
    """

    def fetch_all(
        self,
        order_by: Optional[str] = None,
        ascending: bool = True
    ) -> List[Dict[str, Any]]:
        """Obtiene todos los registros, opcionalmente ordenados."""
        ...

    def find_by(
        self,
        field: str,
        value: Any,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Busca por igualdad. 'customer.cpf' consulta dentro del JSON."""
        ...

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Inserta un registro y retorna la fila creada (con id)."""
        ...

    def update(self, record_id: Any, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Actualiza parcialmente; retorna la fila o None si no existe."""
        ...

    def delete(self, record_id: Any) -> bool:
        """Elimina por id; True si existía."""
        ...

    def upsert(self, record: Dict[str, Any], on_conflict: str) -> Dict[str, Any]:
        """Inserta o reemplaza según la columna `on_conflict`."""
        ...


# ==============================================================================
# INTERFACES ESPECÍFICAS POR DOMINIO
# ==============================================================================

@runtime_checkable
class IProductRepository(Protocol):
    """Interfaz para el repositorio de productos."""

    def list_products(self) -> List[Product]:
        ...

    def get_product(self, product_id: int) -> Optional[Product]:
        ...

    def create_product(self, product: Product) -> Product:
        ...

    def update_product(self, product_id: int, fields: Dict[str, Any]) -> Optional[Product]:
        ...

    def delete_product(self, product_id: int) -> bool:
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """Interfaz para el repositorio de pedidos."""

    def list_orders(self, newest_first: bool = True) -> List[Order]:
        ...

    def get_order(self, order_id: str) -> Optional[Order]:
        ...

    def create_order(self, order: Order) -> Order:
        ...

    def update_order(self, order_id: str, fields: Dict[str, Any]) -> bool:
        ...

    def delete_order(self, order_id: str) -> bool:
        ...

    def customer_has_orders(self, cpf: str) -> bool:
        ...


@runtime_checkable
class ISettingsRepository(Protocol):
    """Interfaz para la tabla clave/valor de configuraciones."""

    def get_setting(self, key: str, default: Any = None) -> Any:
        ...

    def set_setting(self, key: str, value: Any) -> None:
        ...
