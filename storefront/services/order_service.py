# ==============================================================================
# SERVICIO DE PEDIDOS (panel)
# ==============================================================================
# Listado con detección de duplicados, actualización parcial y eliminación
# protegida por contraseña.
#
# Los duplicados se recalculan en CADA carga del listado; no hay caché.
# ==============================================================================

import logging
from typing import Any, Dict, List

from storefront.models import Order, VALID_CUSTOMER_STATUSES, VALID_ORDER_STATUSES
from storefront.repositories.errors import BackendError
from storefront.repositories.interfaces import IOrderRepository
from storefront.services.auth_service import AdminAuthService
from storefront.services.duplicates import annotate_duplicates

logger = logging.getLogger(__name__)

# Campos que el panel puede modificar
EDITABLE_FIELDS = ('status', 'observation', 'customerStatus')


class OrderService:
    """
    Servicio de pedidos del panel.

    Responsabilidades:
    - Listar pedidos (más recientes primero) marcando posibles duplicados
    - Cambiar estado de venta, estado de registro y observación
    - Eliminar pedidos previa confirmación de la contraseña
    """

    def __init__(self, order_repo: IOrderRepository, auth_service: AdminAuthService):
        self.order_repo = order_repo
        self.auth_service = auth_service

    def list_orders(self) -> List[Order]:
        """
        Pedidos más recientes primero, con las marcas de duplicado ya
        persistidas en la observación.

        Raises:
            BackendError: si no se pueden leer los pedidos
        """
        orders = self.order_repo.list_orders(newest_first=True)
        annotate_duplicates(orders, self.order_repo)
        return orders

    def list_orders_view(self) -> List[Dict[str, Any]]:
        """Listado serializado con el flag isDuplicate por pedido."""
        orders = self.order_repo.list_orders(newest_first=True)
        duplicate_ids = annotate_duplicates(orders, self.order_repo)
        return [
            dict(order.to_dict(), isDuplicate=order.id in duplicate_ids)
            for order in orders
        ]

    def validate_update(self, fields: Dict[str, Any]) -> Dict[str, str]:
        errors = {}
        if 'status' in fields and fields['status'] not in VALID_ORDER_STATUSES:
            errors['status'] = 'Status de venda inválido.'
        if 'customerStatus' in fields and fields['customerStatus'] not in VALID_CUSTOMER_STATUSES:
            errors['customerStatus'] = 'Status de cadastro inválido.'
        if 'observation' in fields and not isinstance(fields['observation'], str):
            errors['observation'] = 'Observação inválida.'
        return errors

    def update_order(self, order_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Actualización parcial de un pedido.

        Args:
            order_id: UUID del pedido
            data: Cualquier subconjunto de status / observation / customerStatus

        Returns:
            Dict con ok / errors / error
        """
        fields = {k: v for k, v in (data or {}).items() if k in EDITABLE_FIELDS}
        if not fields:
            return {'ok': False, 'error': 'Nenhum campo para atualizar.'}

        errors = self.validate_update(fields)
        if errors:
            return {'ok': False, 'errors': errors}

        try:
            found = self.order_repo.update_order(order_id, fields)
        except BackendError as e:
            logger.error("Error al actualizar pedido %s: %s", order_id, e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao atualizar o pedido.'}

        if not found:
            return {'ok': False, 'error': 'Pedido não encontrado.', 'not_found': True}

        logger.info("Pedido %s actualizado: %s", order_id, sorted(fields))
        return {'ok': True}

    def delete_order(self, order_id: str, password: str) -> Dict[str, Any]:
        """
        Elimina un pedido si la contraseña del administrador es correcta.

        Returns:
            Dict con ok / error
        """
        if not self.auth_service.verify(password):
            logger.warning("Eliminación del pedido %s rechazada: contraseña incorrecta", order_id)
            return {'ok': False, 'error': 'Senha incorreta.', 'forbidden': True}

        try:
            deleted = self.order_repo.delete_order(order_id)
        except BackendError as e:
            logger.error("Error al eliminar pedido %s: %s", order_id, e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao excluir o pedido.'}

        if not deleted:
            return {'ok': False, 'error': 'Pedido não encontrado.', 'not_found': True}

        logger.info("Pedido %s eliminado", order_id)
        return {'ok': True}
