# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Los nombres de atributos son snake_case; to_dict()/from_dict() usan los
# nombres de columna del backend (camelCase), que son los que ya existen
# en las tablas alojadas.
# ==============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class ProductVisibility(str, Enum):
    """Visibilidad de un producto en el catálogo público."""
    IN_STOCK = "in_stock"          # Visible y se puede comprar
    OUT_OF_STOCK = "out_of_stock"  # Visible como ESGOTADO
    HIDDEN = "hidden"              # Solo visible en el panel


class OrderStatus(str, Enum):
    """Estado de la venta."""
    OPEN = "open"
    COMPLETED = "completed"


class CustomerStatus(str, Enum):
    """Estado de registro del cliente (por CPF)."""
    PENDING = "pending"        # Primer pedido con este CPF
    REGISTERED = "registered"  # Ya tenía pedidos anteriores


VALID_VISIBILITIES = frozenset(v.value for v in ProductVisibility)
VALID_ORDER_STATUSES = frozenset(s.value for s in OrderStatus)
VALID_CUSTOMER_STATUSES = frozenset(s.value for s in CustomerStatus)

DEFAULT_CATEGORY = 'Fórmulas Magistrais Chinesas'


def _to_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Convierte a float tolerando None, '' y strings numéricos."""
    if value is None or value == '':
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def utc_now_iso() -> str:
    """Timestamp actual en UTC, formato ISO-8601."""
    return datetime.now(timezone.utc).isoformat()


# ==============================================================================
# PRODUCTOS
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador (lo asigna el backend)
        name: Nombre (se guarda en mayúsculas)
        price: Precio base
        image_url: URL absoluta de la imagen
        category: Categoría para el filtro del catálogo
        action: Texto "Ação" de la ficha
        indication: Texto "Indicação" de la ficha
        quantity_info: Presentación (ej: "60 cápsulas")
        visibility: in_stock / out_of_stock / hidden
        promo_price: Precio promocional (opcional)
        promo_start_date: Inicio de la promoción, YYYY-MM-DD (opcional)
        promo_end_date: Fin de la promoción, YYYY-MM-DD (opcional)
    """
    id: Optional[int]
    name: str
    price: float
    image_url: str = ''
    category: str = DEFAULT_CATEGORY
    action: str = ''
    indication: str = ''
    quantity_info: str = ''
    visibility: str = ProductVisibility.IN_STOCK.value
    promo_price: Optional[float] = None
    promo_start_date: Optional[str] = None
    promo_end_date: Optional[str] = None

    @property
    def is_hidden(self) -> bool:
        return self.visibility == ProductVisibility.HIDDEN.value

    @property
    def is_out_of_stock(self) -> bool:
        return self.visibility == ProductVisibility.OUT_OF_STOCK.value

    def to_dict(self, include_id: bool = True) -> Dict[str, Any]:
        """Convierte a diccionario con las columnas del backend."""
        d = {
            'name': self.name,
            'price': self.price,
            'imageUrl': self.image_url,
            'category': self.category,
            'action': self.action,
            'indication': self.indication,
            'quantityInfo': self.quantity_info,
            'visibility': self.visibility,
            'promoPrice': self.promo_price,
            'promoStartDate': self.promo_start_date,
            'promoEndDate': self.promo_end_date,
        }
        if include_id and self.id is not None:
            d['id'] = self.id
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde una fila del backend."""
        raw_id = data.get('id')
        return cls(
            id=_to_int(raw_id) if raw_id is not None else None,
            name=data.get('name') or '',
            price=_to_float(data.get('price')),
            image_url=data.get('imageUrl') or '',
            category=data.get('category') or DEFAULT_CATEGORY,
            action=data.get('action') or '',
            indication=data.get('indication') or '',
            quantity_info=data.get('quantityInfo') or '',
            visibility=data.get('visibility') or ProductVisibility.IN_STOCK.value,
            promo_price=_to_float(data.get('promoPrice'), None),
            promo_start_date=data.get('promoStartDate') or None,
            promo_end_date=data.get('promoEndDate') or None,
        )


# ==============================================================================
# CLIENTE (embebido en el pedido)
# ==============================================================================

@dataclass
class Customer:
    """
    Datos del cliente que hace el pedido.

    Attributes:
        name: Nombre completo
        email: Correo de contacto
        cpf: CPF formateado (###.###.###-##), clave de registro
    """
    name: str = ''
    email: str = ''
    cpf: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'email': self.email, 'cpf': self.cpf}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Customer':
        data = data or {}
        return cls(
            name=data.get('name') or '',
            email=data.get('email') or '',
            cpf=data.get('cpf') or '',
        )


# ==============================================================================
# CARRITO / ÍTEMS DEL PEDIDO
# ==============================================================================

@dataclass
class CartItem:
    """
    Línea del carrito. También es el snapshot guardado en el pedido.

    El precio es el precio efectivo en el momento de agregar al carrito
    (promocional o base) y no se recalcula después.

    Attributes:
        id: ID del producto
        name: Nombre del producto
        price: Precio unitario fijado al agregar
        quantity: Cantidad
        base_price: Precio base del producto al agregar
        image_url: Imagen del producto
        category: Categoría
        quantity_info: Presentación
    """
    id: int
    name: str
    price: float
    quantity: int
    base_price: Optional[float] = None
    image_url: str = ''
    category: str = ''
    quantity_info: str = ''

    @property
    def subtotal(self) -> float:
        return round(self.price * self.quantity, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'quantity': self.quantity,
            'basePrice': self.base_price,
            'imageUrl': self.image_url,
            'category': self.category,
            'quantityInfo': self.quantity_info,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartItem':
        return cls(
            id=_to_int(data.get('id')),
            name=data.get('name') or '',
            price=_to_float(data.get('price')),
            quantity=_to_int(data.get('quantity')),
            base_price=_to_float(data.get('basePrice'), None),
            image_url=data.get('imageUrl') or '',
            category=data.get('category') or '',
            quantity_info=data.get('quantityInfo') or '',
        )


# ==============================================================================
# PEDIDOS
# ==============================================================================

@dataclass
class Order:
    """
    Pedido creado en el checkout.

    Attributes:
        id: Identificador (UUID, lo asigna el backend)
        date: Timestamp de creación (ISO-8601)
        customer: Cliente embebido
        items: Snapshot de las líneas del carrito
        total_price: Total calculado en el checkout
        status: open / completed
        observation: Texto libre del administrador
        customer_status: pending / registered
    """
    id: Optional[str] = None
    date: str = ''
    customer: Customer = field(default_factory=Customer)
    items: List[CartItem] = field(default_factory=list)
    total_price: float = 0.0
    status: str = OrderStatus.OPEN.value
    observation: str = ''
    customer_status: str = CustomerStatus.PENDING.value

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED.value

    @property
    def is_registered(self) -> bool:
        return self.customer_status == CustomerStatus.REGISTERED.value

    def to_dict(self, include_id: bool = True) -> Dict[str, Any]:
        """Convierte a diccionario con las columnas de la tabla 'orders'."""
        d = {
            'date': self.date,
            'customer': self.customer.to_dict(),
            'items': [item.to_dict() for item in self.items],
            'totalPrice': self.total_price,
            'status': self.status,
            'observation': self.observation,
            'customerStatus': self.customer_status,
        }
        if include_id and self.id is not None:
            d['id'] = self.id
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        """
        Crea instancia desde una fila del backend.
        Filas antiguas pueden venir sin items o sin customer.
        """
        raw_id = data.get('id')
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            date=data.get('date') or '',
            customer=Customer.from_dict(data.get('customer')),
            items=[CartItem.from_dict(i) for i in (data.get('items') or [])],
            total_price=_to_float(data.get('totalPrice')),
            status=data.get('status') or OrderStatus.OPEN.value,
            observation=data.get('observation') or '',
            customer_status=data.get('customerStatus') or CustomerStatus.PENDING.value,
        )


# ==============================================================================
# AVISO DE INICIO (popup)
# ==============================================================================

@dataclass
class PopupConfig:
    """
    Aviso que se muestra al abrir la tienda.

    Attributes:
        text: Texto del aviso
        expires_at: Fecha/hora ISO a partir de la cual deja de mostrarse
        active: Interruptor manual
    """
    text: str = ''
    expires_at: Optional[str] = None
    active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'text': self.text,
            'expiresAt': self.expires_at,
            'active': self.active,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PopupConfig':
        data = data or {}
        return cls(
            text=data.get('text') or '',
            expires_at=data.get('expiresAt') or None,
            active=bool(data.get('active', False)),
        )
