# ==============================================================================
# REPOSITORIO DE PEDIDOS
# ==============================================================================
# Encapsula el acceso a la tabla 'orders'.
# El cliente y los ítems van embebidos (columnas JSON).
# ==============================================================================

from typing import Any, Dict, List, Optional

from storefront.models import Order, utc_now_iso
from storefront.repositories.interfaces import ITable

TABLE_NAME = 'orders'


class OrderRepository:
    """
    Repositorio de pedidos.

    Formato de cada fila:
    {
        "id": "5f0c...",
        "date": "2026-10-19T14:03:00+00:00",
        "customer": {"name": "...", "email": "...", "cpf": "111.111.111-11"},
        "items": [{"id": 1, "name": "...", "price": 75.0, "quantity": 2}],
        "totalPrice": 150.0,
        "status": "open",
        "observation": "",
        "customerStatus": "pending"
    }
    """

    def __init__(self, table: ITable):
        self.table = table

    def list_orders(self, newest_first: bool = True) -> List[Order]:
        """
        Carga todos los pedidos.

        Args:
            newest_first: True = más recientes primero (vista del panel)

        Returns:
            Lista de pedidos
        """
        rows = self.table.fetch_all(order_by='date', ascending=not newest_first)
        return [Order.from_dict(row) for row in rows]

    def get_order(self, order_id: str) -> Optional[Order]:
        rows = self.table.find_by('id', order_id, limit=1)
        return Order.from_dict(rows[0]) if rows else None

    def create_order(self, order: Order) -> Order:
        """
        Inserta el pedido; el backend asigna el UUID.
        Sin fecha, se usa el momento de la inserción (UTC).
        """
        if not order.date:
            order.date = utc_now_iso()
        row = self.table.insert(order.to_dict(include_id=False))
        return Order.from_dict(row)

    def update_order(self, order_id: str, fields: Dict[str, Any]) -> bool:
        """
        Actualización parcial (status, observation, customerStatus).

        Returns:
            True si el pedido existía
        """
        return self.table.update(order_id, fields) is not None

    def delete_order(self, order_id: str) -> bool:
        return self.table.delete(order_id)

    def customer_has_orders(self, cpf: str) -> bool:
        """
        Verifica si ya existe algún pedido con ese CPF.

        Args:
            cpf: CPF formateado

        Returns:
            True si el cliente ya compró antes
        """
        return bool(self.table.find_by('customer.cpf', cpf, limit=1))
