# ==============================================================================
# SERVICIO DE PRODUCTOS
# ==============================================================================
# Catálogo público (búsqueda, categorías, precio efectivo) y operaciones del
# panel: alta/edición con validación, visibilidad y promociones.
#
# Las lecturas dejan pasar BackendError (la ruta responde con el aviso de
# conexión); las escrituras lo capturan y retornan {'ok': False, ...}.
# ==============================================================================

import logging
from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from storefront.formatting import get_dosage_form
from storefront.models import DEFAULT_CATEGORY, Product, VALID_VISIBILITIES
from storefront.repositories.errors import BackendError
from storefront.repositories.interfaces import IProductRepository
from storefront.services.promotions import (
    DEFAULT_TIMEZONE,
    bulk_promo_price,
    effective_price,
    is_promotion_active,
    parse_calendar_date,
    store_today,
)

logger = logging.getLogger(__name__)

ALL_CATEGORIES = 'all'

# Columnas de promoción, vacías
_NO_PROMOTION = {'promoPrice': None, 'promoStartDate': None, 'promoEndDate': None}


def _is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def _date_text(value: Any) -> Optional[str]:
    """Normaliza una fecha de formulario a 'YYYY-MM-DD' (o None)."""
    parsed = parse_calendar_date(value)
    return parsed.isoformat() if parsed else None


class ProductService:
    """
    Servicio del catálogo.

    Responsabilidades:
    - Listado público (sin ocultos) con búsqueda y filtro de categoría
    - Precio efectivo y estado de promoción por producto
    - CRUD del panel con validación
    - Promociones individuales y masivas
    """

    def __init__(self, product_repo: IProductRepository, timezone: str = DEFAULT_TIMEZONE):
        """
        Args:
            product_repo: Repositorio de productos
            timezone: Zona horaria de la tienda (define "hoy")
        """
        self.product_repo = product_repo
        self.timezone = timezone

    def today(self) -> date:
        return store_today(self.timezone)

    # =========================================================================
    # LECTURA
    # =========================================================================

    def to_view(self, product: Product, today: Optional[date] = None) -> Dict[str, Any]:
        """Producto serializado con los campos derivados."""
        today = today or self.today()
        data = product.to_dict()
        data['promoActive'] = is_promotion_active(product, today)
        data['effectivePrice'] = effective_price(product, today)
        data['dosageForm'] = get_dosage_form(product.name)
        return data

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.product_repo.get_product(product_id)

    def list_catalog(
        self,
        search: str = '',
        category: str = ALL_CATEGORIES,
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Catálogo público.

        Args:
            search: Texto a buscar en el nombre (sin distinguir mayúsculas)
            category: Categoría o 'all'
            today: Fecha de referencia para las promociones

        Returns:
            Dict con products y categories
        """
        today = today or self.today()
        visible = [p for p in self.product_repo.list_products() if not p.is_hidden]

        term = (search or '').strip().lower()
        selected = category or ALL_CATEGORIES
        filtered = [
            p for p in visible
            if (not term or term in p.name.lower())
            and (selected == ALL_CATEGORIES or p.category == selected)
        ]

        return {
            'ok': True,
            'products': [self.to_view(p, today) for p in filtered],
            'categories': self.categories(visible),
        }

    def categories(self, products: List[Product]) -> List[str]:
        """['all'] + categorías únicas ordenadas."""
        return [ALL_CATEGORIES] + sorted({p.category for p in products if p.category})

    def get_public_product(self, product_id: int, today: Optional[date] = None) -> Optional[Dict[str, Any]]:
        """Ficha pública; los productos ocultos no existen para el cliente."""
        product = self.product_repo.get_product(product_id)
        if product is None or product.is_hidden:
            return None
        return self.to_view(product, today)

    def list_all(self, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Todos los productos (panel), incluidos los ocultos."""
        today = today or self.today()
        return [self.to_view(p, today) for p in self.product_repo.list_products()]

    # =========================================================================
    # VALIDACIÓN
    # =========================================================================

    def validate_product(self, data: Dict[str, Any]) -> Dict[str, str]:
        """
        Valida el formulario de producto.

        Returns:
            Dict {campo: mensaje}; vacío si es válido
        """
        errors = {}

        if not str(data.get('name') or '').strip():
            errors['name'] = 'Nome do produto é obrigatório.'

        if not str(data.get('category') or '').strip():
            errors['category'] = 'Categoria é obrigatória.'

        try:
            price = float(data.get('price'))
        except (TypeError, ValueError):
            price = 0.0
        if price <= 0:
            errors['price'] = 'O preço deve ser maior que zero.'

        image_url = str(data.get('imageUrl') or '').strip()
        if not image_url:
            errors['imageUrl'] = 'URL da imagem é obrigatória.'
        elif not _is_valid_url(image_url):
            errors['imageUrl'] = 'Por favor, insira uma URL válida.'

        visibility = data.get('visibility')
        if visibility is not None and visibility not in VALID_VISIBILITIES:
            errors['visibility'] = 'Visibilidade inválida.'

        return errors

    def _clean_product_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Columnas normalizadas a partir del formulario ya validado."""
        return {
            'name': str(data['name']).strip().upper(),
            'price': round(float(data['price']), 2),
            'imageUrl': str(data['imageUrl']).strip(),
            'category': str(data['category']).strip(),
            'action': str(data.get('action') or '').strip(),
            'indication': str(data.get('indication') or '').strip(),
            'quantityInfo': str(data.get('quantityInfo') or '').strip(),
            'visibility': data.get('visibility') or 'in_stock',
        }

    # =========================================================================
    # ESCRITURA (panel)
    # =========================================================================

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea un producto.

        Args:
            data: Formulario con columnas del backend (name, price, imageUrl...)

        Returns:
            Dict con ok y product, o errors / error
        """
        data = dict(data or {})
        data.setdefault('category', DEFAULT_CATEGORY)
        errors = self.validate_product(data)
        if errors:
            return {'ok': False, 'errors': errors}

        fields = self._clean_product_fields(data)
        product = Product.from_dict(fields)
        try:
            created = self.product_repo.create_product(product)
        except BackendError as e:
            logger.error("Error al crear producto %s: %s", fields['name'], e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao salvar o produto.'}

        logger.info("Producto creado: %s (id=%s)", created.name, created.id)
        return {'ok': True, 'product': self.to_view(created)}

    def update_product(self, product_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Edita un producto. Los campos omitidos conservan su valor actual.

        Returns:
            Dict con ok y product, o errors / error
        """
        try:
            current = self.product_repo.get_product(product_id)
        except BackendError as e:
            logger.error("Error al leer producto %s: %s", product_id, e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao salvar o produto.'}
        if current is None:
            return {'ok': False, 'error': 'Produto não encontrado.', 'not_found': True}

        merged = current.to_dict(include_id=False)
        merged.update({k: v for k, v in (data or {}).items() if k in merged})
        errors = self.validate_product(merged)
        if errors:
            return {'ok': False, 'errors': errors}

        fields = self._clean_product_fields(merged)
        return self._save_fields(product_id, fields)

    def delete_product(self, product_id: int) -> Dict[str, Any]:
        try:
            deleted = self.product_repo.delete_product(product_id)
        except BackendError as e:
            logger.error("Error al eliminar producto %s: %s", product_id, e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao excluir o produto.'}
        if not deleted:
            return {'ok': False, 'error': 'Produto não encontrado.', 'not_found': True}
        logger.info("Producto eliminado: id=%s", product_id)
        return {'ok': True}

    def set_visibility(self, product_id: int, visibility: str) -> Dict[str, Any]:
        """Cambia entre in_stock / out_of_stock / hidden."""
        if visibility not in VALID_VISIBILITIES:
            return {'ok': False, 'errors': {'visibility': 'Visibilidade inválida.'}}
        return self._save_fields(product_id, {'visibility': visibility})

    # =========================================================================
    # PROMOCIONES
    # =========================================================================

    def validate_promotion(
        self,
        base_price: Optional[float],
        promo_price: Any,
        start_date: Any,
        end_date: Any
    ) -> Dict[str, str]:
        """
        Valida una promoción individual.

        Returns:
            Dict {campo: mensaje}; vacío si es válida
        """
        errors = {}
        try:
            value = float(promo_price)
        except (TypeError, ValueError):
            value = 0.0
        if value <= 0:
            errors['promoPrice'] = 'O preço promocional deve ser maior que zero.'
        elif base_price is not None and value >= base_price:
            errors['promoPrice'] = 'O preço promocional deve ser menor que o preço normal.'

        errors.update(self._validate_window(start_date, end_date))
        return errors

    def _validate_window(self, start_date: Any, end_date: Any) -> Dict[str, str]:
        errors = {}
        end = parse_calendar_date(end_date)
        if end is None:
            errors['promoEndDate'] = 'A data final da promoção é obrigatória.'
        if start_date:
            start = parse_calendar_date(start_date)
            if start is None:
                errors['promoStartDate'] = 'Data inicial inválida.'
            elif end is not None and start > end:
                errors['promoStartDate'] = 'A data inicial deve ser anterior à data final.'
        return errors

    def set_promotion(
        self,
        product_id: int,
        promo_price: Any,
        start_date: Any = None,
        end_date: Any = None
    ) -> Dict[str, Any]:
        """Define la promoción de un producto (sin tocar el precio base)."""
        try:
            product = self.product_repo.get_product(product_id)
        except BackendError as e:
            logger.error("Error al leer producto %s: %s", product_id, e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao salvar a promoção.'}
        if product is None:
            return {'ok': False, 'error': 'Produto não encontrado.', 'not_found': True}

        errors = self.validate_promotion(product.price, promo_price, start_date, end_date)
        if errors:
            return {'ok': False, 'errors': errors}

        return self._save_fields(product_id, {
            'promoPrice': round(float(promo_price), 2),
            'promoStartDate': _date_text(start_date),
            'promoEndDate': _date_text(end_date),
        })

    def clear_promotion(self, product_id: int) -> Dict[str, Any]:
        return self._save_fields(product_id, dict(_NO_PROMOTION))

    def apply_bulk_promotion(
        self,
        discount_percent: Optional[float],
        start_date: Any = None,
        end_date: Any = None
    ) -> Dict[str, Any]:
        """
        Aplica (o quita) un descuento porcentual a todo el catálogo.

        Args:
            discount_percent: 0 < p < 100; None quita todas las promociones
            start_date: Inicio de la ventana (opcional)
            end_date: Fin de la ventana (obligatorio al aplicar)

        Returns:
            Dict con ok y updated (cantidad de productos), o errors / error
        """
        if discount_percent is not None:
            errors = {}
            try:
                pct = float(discount_percent)
            except (TypeError, ValueError):
                pct = 0.0
            if not 0 < pct < 100:
                errors['discountPercent'] = 'O desconto deve estar entre 0 e 100%.'
            errors.update(self._validate_window(start_date, end_date))
            if errors:
                return {'ok': False, 'errors': errors}

        try:
            products = self.product_repo.list_products()
            for product in products:
                if discount_percent is None:
                    fields = dict(_NO_PROMOTION)
                else:
                    fields = {
                        'promoPrice': bulk_promo_price(product.price, pct),
                        'promoStartDate': _date_text(start_date),
                        'promoEndDate': _date_text(end_date),
                    }
                self.product_repo.update_product(product.id, fields)
        except BackendError as e:
            logger.error("Error en promoción masiva: %s", e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao aplicar a promoção.'}

        if discount_percent is None:
            logger.info("Promociones eliminadas de %d productos", len(products))
        else:
            logger.info("Descuento de %s%% aplicado a %d productos", pct, len(products))
        return {'ok': True, 'updated': len(products)}

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _save_fields(self, product_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        try:
            updated = self.product_repo.update_product(product_id, fields)
        except BackendError as e:
            logger.error("Error al actualizar producto %s: %s", product_id, e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao salvar o produto.'}
        if updated is None:
            return {'ok': False, 'error': 'Produto não encontrado.', 'not_found': True}
        logger.info("Producto actualizado: id=%s campos=%s", product_id, sorted(fields))
        return {'ok': True, 'product': self.to_view(updated)}
