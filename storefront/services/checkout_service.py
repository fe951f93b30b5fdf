# ==============================================================================
# SERVICIO DE CHECKOUT
# ==============================================================================
# Cierra la compra:
#   1. Valida los datos del cliente
#   2. Determina si el CPF ya está registrado (tiene pedidos anteriores)
#   3. Guarda el pedido con el snapshot del carrito
#   4. Arma el mensaje y el enlace de WhatsApp
#   5. "Envía" el correo de confirmación (se registra en el log)
#   6. Vacía el carrito
#
# Si el backend falla al guardar, el cliente igual recibe el enlace de
# WhatsApp (el pedido llega al vendedor por ese canal).
# ==============================================================================

import logging
import re
from typing import Any, Dict, List
from urllib.parse import quote

from storefront.formatting import cpf_digits, format_cpf, format_currency
from storefront.models import Customer, CustomerStatus, Order, OrderStatus, CartItem
from storefront.repositories.errors import BackendError
from storefront.repositories.interfaces import IOrderRepository
from storefront.services.cart_service import CartService

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')

WHATSAPP_URL = 'https://wa.me/{number}?text={text}'

CLOSING_NEW_CUSTOMER = (
    'Aguardo as instruções para cadastramento*, pagamento e entrega.\n'
    '*venda mediante aprovação de cadastro'
)
CLOSING_REGISTERED = 'Cadastro válido, Aguardo as instruções para pagamento e entrega.'


def validate_customer(data: Dict[str, Any]) -> Dict[str, str]:
    """
    Valida el formulario del cliente.

    Returns:
        Dict {campo: mensaje}; vacío si es válido
    """
    name = str(data.get('name') or '').strip()
    email = str(data.get('email') or '').strip()
    cpf = str(data.get('cpf') or '').strip()

    if not name or not email or not cpf:
        return {'form': 'Por favor, preencha todos os campos.'}
    if not EMAIL_PATTERN.search(email):
        return {'email': 'Por favor, insira um e-mail válido.'}
    if len(cpf_digits(cpf)) != 11:
        return {'cpf': 'O CPF deve conter 11 dígitos.'}
    return {}


def items_text(items: List[CartItem]) -> str:
    """Una línea por ítem: '  - NOMBRE (2x) - R$ 150,00'."""
    return '\n'.join(
        f"  - {item.name} ({item.quantity}x) - {format_currency(item.price * item.quantity)}"
        for item in items
    )


def build_whatsapp_message(customer: Customer, items: List[CartItem], total: float, registered: bool) -> str:
    closing = CLOSING_REGISTERED if registered else CLOSING_NEW_CUSTOMER
    return (
        f"Olá! Meu nome é {customer.name} (CPF: {customer.cpf}) e gostaria de fazer o seguinte pedido:"
        f"\n\n{items_text(items)}\n\n*Total: {format_currency(total)}*\n\n{closing}"
    )


def build_whatsapp_url(number: str, message: str) -> str:
    """Enlace wa.me con el mensaje ya escapado para URL."""
    return WHATSAPP_URL.format(number=number, text=quote(message, safe="!*'()"))


class CheckoutService:
    """
    Servicio de cierre de compra por WhatsApp.
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        cart_service: CartService,
        whatsapp_number: str,
        store_name: str = 'Taimin',
        copy_email: str = ''
    ):
        """
        Args:
            order_repo: Repositorio de pedidos
            cart_service: Carrito de la sesión actual
            whatsapp_number: Número que recibe los pedidos (solo dígitos)
            store_name: Nombre usado en el correo
            copy_email: Dirección que recibe copia del correo
        """
        self.order_repo = order_repo
        self.cart_service = cart_service
        self.whatsapp_number = whatsapp_number
        self.store_name = store_name
        self.copy_email = copy_email

    def customer_status_for(self, cpf: str) -> str:
        """
        'registered' si el CPF ya tiene pedidos, si no 'pending'.
        Un error del backend se registra y se asume 'pending'.
        """
        try:
            if self.order_repo.customer_has_orders(cpf):
                return CustomerStatus.REGISTERED.value
        except BackendError as e:
            logger.error("Error al verificar cliente existente %s: %s", cpf, e)
        return CustomerStatus.PENDING.value

    def build_confirmation_email(self, customer: Customer, items: List[CartItem], total: float) -> Dict[str, str]:
        body = (
            f"Olá, {customer.name}.\n\n"
            "Confirmamos o recebimento do seu pedido. Ele está em processo de análise "
            "e em breve nossa equipe entrará em contato com mais detalhes.\n\n"
            f"**Resumo do Pedido:**\n{items_text(items)}\n\n"
            f"**Total:** {format_currency(total)}\n\n"
            "Para um atendimento mais rápido ou para tirar dúvidas, você pode nos contatar "
            f"diretamente pelo WhatsApp: {self.whatsapp_number}.\n\n"
            "Agradecemos a sua preferência.\n\n"
            f"Atenciosamente,\nEquipe {self.store_name}"
        )
        return {
            'to': customer.email,
            'cc': self.copy_email,
            'subject': f"[Pedido {self.store_name}] - não responda",
            'body': body,
        }

    def _send_confirmation_email(self, email: Dict[str, str]) -> None:
        # No hay servidor de correo: el envío queda registrado en el log
        logger.info(
            "Correo de confirmación (simulado) para=%s copia=%s asunto=%s\n%s",
            email['to'], email['cc'], email['subject'], email['body']
        )

    def checkout(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Finaliza la compra con el carrito de la sesión.

        Args:
            data: Formulario {name, email, cpf}

        Returns:
            Dict con ok, whatsappUrl, message, customerStatus, order
            (order es None si no se pudo guardar)
        """
        items = self.cart_service.get_items()
        if not items:
            return {'ok': False, 'error': 'O carrinho está vazio.'}

        errors = validate_customer(data)
        if errors:
            return {'ok': False, 'errors': errors}

        customer = Customer(
            name=str(data['name']).strip(),
            email=str(data['email']).strip(),
            cpf=format_cpf(data['cpf']),
        )
        total = round(sum(item.price * item.quantity for item in items), 2)

        customer_status = self.customer_status_for(customer.cpf)
        order = Order(
            customer=customer,
            items=items,
            total_price=total,
            status=OrderStatus.OPEN.value,
            observation='',
            customer_status=customer_status,
        )

        saved = None
        try:
            saved = self.order_repo.create_order(order)
            logger.info(
                "Pedido %s creado: cpf=%s total=%.2f estado_cliente=%s",
                saved.id, customer.cpf, total, customer_status
            )
        except BackendError as e:
            logger.error("Error al guardar pedido de %s: %s", customer.cpf, e)
            customer_status = CustomerStatus.PENDING.value

        registered = customer_status == CustomerStatus.REGISTERED.value
        message = build_whatsapp_message(customer, items, total, registered)

        self._send_confirmation_email(self.build_confirmation_email(customer, items, total))
        self.cart_service.clear()

        return {
            'ok': True,
            'whatsappUrl': build_whatsapp_url(self.whatsapp_number, message),
            'message': message,
            'customerStatus': customer_status,
            'order': saved.to_dict() if saved else None,
        }
