# ==============================================================================
# API PÚBLICA - Catálogo, carrito y checkout
# ==============================================================================

from flask import Blueprint, request

from storefront.routes import container, json_body, result_response, to_int

public_bp = Blueprint('public', __name__, url_prefix='/api')


# ==============================================================================
# CATÁLOGO
# ==============================================================================

@public_bp.route('/products')
def list_products():
    """Catálogo: ?q=texto&category=Nombre (o 'all')"""
    return container().product_service.list_catalog(
        search=request.args.get('q', ''),
        category=request.args.get('category', 'all'),
    )


@public_bp.route('/products/<int:product_id>')
def product_detail(product_id):
    product = container().product_service.get_public_product(product_id)
    if product is None:
        return {'ok': False, 'error': 'Produto não encontrado.'}, 404
    return {'ok': True, 'product': product}


@public_bp.route('/popup')
def popup():
    return {'ok': True, 'popup': container().popup_service.get_active_popup()}


# ==============================================================================
# CARRITO
# ==============================================================================

@public_bp.route('/cart')
def view_cart():
    return dict(container().cart_service.get_cart(), ok=True)


@public_bp.route('/cart/add', methods=['POST'])
def cart_add():
    data = json_body()
    product_id = to_int(data.get('productId'))
    quantity = to_int(data.get('quantity', 1))
    if product_id is None or quantity is None:
        return {'ok': False, 'error': 'Produto ou quantidade inválidos.'}, 400
    return result_response(container().cart_service.add_item(product_id, quantity))


@public_bp.route('/cart/update', methods=['POST'])
def cart_update():
    data = json_body()
    product_id = to_int(data.get('productId'))
    quantity = to_int(data.get('quantity'))
    if product_id is None or quantity is None:
        return {'ok': False, 'error': 'Produto ou quantidade inválidos.'}, 400
    return result_response(container().cart_service.update_quantity(product_id, quantity))


@public_bp.route('/cart/remove', methods=['POST'])
def cart_remove():
    product_id = to_int(json_body().get('productId'))
    if product_id is None:
        return {'ok': False, 'error': 'Produto inválido.'}, 400
    return result_response(container().cart_service.remove_item(product_id))


@public_bp.route('/cart/clear', methods=['POST'])
def cart_clear():
    cart_service = container().cart_service
    cart_service.clear()
    return dict(cart_service.get_cart(), ok=True)


# ==============================================================================
# CHECKOUT
# ==============================================================================

@public_bp.route('/checkout', methods=['POST'])
def checkout():
    """Body: {name, email, cpf}. Responde con el enlace de WhatsApp."""
    return result_response(container().checkout_service.checkout(json_body()))
