# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula el acceso a la tabla 'products'.
# ==============================================================================

from typing import Any, Dict, List, Optional

from storefront.models import Product
from storefront.repositories.interfaces import ITable

TABLE_NAME = 'products'


class ProductRepository:
    """
    Repositorio del catálogo.

    Formato de cada fila:
    {
        "id": 1,
        "name": "LIU WEI DI HUANG WAN",
        "price": 89.9,
        "promoPrice": 79.9,
        "promoStartDate": "2026-01-01",
        "promoEndDate": "2026-01-31",
        "visibility": "in_stock",
        ...
    }
    """

    def __init__(self, table: ITable):
        """
        Args:
            table: Tabla del backend (JsonTable o SupabaseTable)
        """
        self.table = table

    def list_products(self) -> List[Product]:
        """Todos los productos, ordenados por id."""
        return [Product.from_dict(row) for row in self.table.fetch_all(order_by='id')]

    def get_product(self, product_id: int) -> Optional[Product]:
        """
        Args:
            product_id: ID del producto

        Returns:
            Producto o None si no existe
        """
        rows = self.table.find_by('id', product_id, limit=1)
        return Product.from_dict(rows[0]) if rows else None

    def create_product(self, product: Product) -> Product:
        """Inserta el producto; el backend asigna el id."""
        row = self.table.insert(product.to_dict(include_id=False))
        return Product.from_dict(row)

    def update_product(self, product_id: int, fields: Dict[str, Any]) -> Optional[Product]:
        """
        Actualización parcial (columnas del backend).

        Returns:
            Producto actualizado o None si no existía
        """
        row = self.table.update(product_id, fields)
        return Product.from_dict(row) if row else None

    def delete_product(self, product_id: int) -> bool:
        return self.table.delete(product_id)
