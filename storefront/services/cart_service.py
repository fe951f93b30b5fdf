# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# El carrito vive en la sesión de Flask (session['cart']), una lista de
# CartItem serializados.
#
# El precio de cada línea es el precio efectivo al momento de agregar
# (promocional si la promoción está vigente) y no se recalcula después,
# aunque la promoción termine mientras el carrito sigue abierto.
# ==============================================================================

from datetime import date
from typing import Any, Dict, List, Optional

from flask import session

from storefront.models import CartItem
from storefront.services.product_service import ProductService
from storefront.services.promotions import effective_price

SESSION_KEY = 'cart'


class CartService:
    """
    Servicio para gestión del carrito de compras.

    Responsabilidades:
    - Agregar/eliminar líneas
    - Fijar el precio efectivo al agregar
    - Calcular totales
    - Limpiar carrito
    """

    def __init__(self, product_service: ProductService):
        """
        Args:
            product_service: Servicio de productos (lectura y "hoy" de la tienda)
        """
        self.product_service = product_service

    def _get_cart(self) -> List[CartItem]:
        return [CartItem.from_dict(row) for row in session.get(SESSION_KEY, [])]

    def _save_cart(self, cart: List[CartItem]) -> None:
        session[SESSION_KEY] = [item.to_dict() for item in cart]
        session.modified = True

    def get_items(self) -> List[CartItem]:
        """Líneas actuales del carrito."""
        return self._get_cart()

    def get_cart(self) -> Dict[str, Any]:
        """
        Obtiene el carrito con totales calculados.

        Returns:
            Dict con items, totalItems, totalPrice
        """
        return self._summary(self._get_cart())

    def _summary(self, cart: List[CartItem]) -> Dict[str, Any]:
        return {
            'items': [dict(item.to_dict(), subtotal=item.subtotal) for item in cart],
            'totalItems': sum(item.quantity for item in cart),
            'totalPrice': round(sum(item.price * item.quantity for item in cart), 2),
        }

    def add_item(self, product_id: int, quantity: int = 1, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Agrega un producto al carrito.

        Si el producto ya está en el carrito solo se suma la cantidad; la
        línea conserva el precio con que se agregó la primera vez.

        Args:
            product_id: ID del producto
            quantity: Cantidad a agregar
            today: Fecha de referencia para la promoción

        Returns:
            Dict con resultado (ok, error, cart)
        """
        if product_id is None:
            return {'ok': False, 'error': 'ID de produto inválido.'}

        if quantity is None or quantity <= 0:
            return {'ok': False, 'error': 'A quantidade deve ser maior que zero.'}

        product = self.product_service.get_product(product_id)
        if product is None or product.is_hidden:
            return {'ok': False, 'error': 'Produto não encontrado.', 'not_found': True}

        if product.is_out_of_stock:
            return {'ok': False, 'error': 'Produto esgotado.'}

        cart = self._get_cart()
        existing = next((item for item in cart if item.id == product.id), None)

        if existing:
            existing.quantity += quantity
        else:
            today = today or self.product_service.today()
            cart.append(CartItem(
                id=product.id,
                name=product.name,
                price=effective_price(product, today),
                quantity=quantity,
                base_price=product.price,
                image_url=product.image_url,
                category=product.category,
                quantity_info=product.quantity_info,
            ))

        self._save_cart(cart)
        return {'ok': True, 'cart': self._summary(cart)}

    def remove_item(self, product_id: int) -> Dict[str, Any]:
        """Elimina la línea del producto (si no está, no hace nada)."""
        cart = [item for item in self._get_cart() if item.id != product_id]
        self._save_cart(cart)
        return {'ok': True, 'cart': self._summary(cart)}

    def update_quantity(self, product_id: int, quantity: int) -> Dict[str, Any]:
        """
        Reemplaza la cantidad de una línea.

        Args:
            product_id: ID del producto
            quantity: Nueva cantidad; <= 0 elimina la línea

        Returns:
            Dict con resultado
        """
        if quantity is None or quantity <= 0:
            return self.remove_item(product_id)

        cart = self._get_cart()
        for item in cart:
            if item.id == product_id:
                item.quantity = quantity
                break
        else:
            return {'ok': False, 'error': 'Produto não está no carrinho.', 'not_found': True}

        self._save_cart(cart)
        return {'ok': True, 'cart': self._summary(cart)}

    def clear(self) -> None:
        session.pop(SESSION_KEY, None)
        session.modified = True
