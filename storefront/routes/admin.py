# ==============================================================================
# PANEL DE ADMINISTRACIÓN
# ==============================================================================
# Todas las rutas /admin/api/... requieren session['is_admin'].
# ==============================================================================

from functools import wraps

from flask import Blueprint, Response, session

from storefront.routes import container, json_body, result_response
from storefront.services.report_service import CSV_FILENAME, TXT_FILENAME

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def admin_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not session.get('is_admin'):
            return {'ok': False, 'error': 'Acesso restrito.'}, 401
        return f(*args, **kwargs)
    return wrapper


def _download(content: str, mimetype: str, filename: str) -> Response:
    return Response(
        content,
        mimetype=mimetype,
        headers={'Content-Disposition': f'attachment;filename={filename}'},
    )


# ==============================================================================
# SESIÓN
# ==============================================================================

@admin_bp.route('/login', methods=['POST'])
def login():
    result = container().auth_service.login(json_body().get('password'))
    if not result['ok']:
        return result, 401
    session['is_admin'] = True
    return result


@admin_bp.route('/logout', methods=['POST'])
def logout():
    session.pop('is_admin', None)
    return {'ok': True}


@admin_bp.route('/api/session')
def session_status():
    return {'ok': True, 'isAdmin': bool(session.get('is_admin'))}


# ==============================================================================
# PRODUCTOS Y PROMOCIONES
# ==============================================================================

@admin_bp.route('/api/products')
@admin_required
def list_products():
    return {'ok': True, 'products': container().product_service.list_all()}


@admin_bp.route('/api/products', methods=['POST'])
@admin_required
def create_product():
    result = container().product_service.create_product(json_body())
    body, status = result_response(result)
    return body, 201 if status == 200 else status


@admin_bp.route('/api/products/<int:product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    return result_response(container().product_service.update_product(product_id, json_body()))


@admin_bp.route('/api/products/<int:product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    return result_response(container().product_service.delete_product(product_id))


@admin_bp.route('/api/products/<int:product_id>/visibility', methods=['PUT'])
@admin_required
def set_visibility(product_id):
    visibility = json_body().get('visibility')
    return result_response(container().product_service.set_visibility(product_id, visibility))


@admin_bp.route('/api/products/<int:product_id>/promotion', methods=['PUT'])
@admin_required
def set_promotion(product_id):
    data = json_body()
    return result_response(container().product_service.set_promotion(
        product_id,
        data.get('promoPrice'),
        data.get('promoStartDate'),
        data.get('promoEndDate'),
    ))


@admin_bp.route('/api/products/<int:product_id>/promotion', methods=['DELETE'])
@admin_required
def clear_promotion(product_id):
    return result_response(container().product_service.clear_promotion(product_id))


@admin_bp.route('/api/promotions/bulk', methods=['POST'])
@admin_required
def bulk_promotion():
    """Body: {discountPercent, startDate, endDate}; discountPercent null = quitar todas."""
    data = json_body()
    return result_response(container().product_service.apply_bulk_promotion(
        data.get('discountPercent'),
        data.get('startDate'),
        data.get('endDate'),
    ))


# ==============================================================================
# PEDIDOS
# ==============================================================================

@admin_bp.route('/api/orders')
@admin_required
def list_orders():
    return {'ok': True, 'orders': container().order_service.list_orders_view()}


@admin_bp.route('/api/orders/<order_id>', methods=['PATCH'])
@admin_required
def update_order(order_id):
    return result_response(container().order_service.update_order(order_id, json_body()))


@admin_bp.route('/api/orders/<order_id>', methods=['DELETE'])
@admin_required
def delete_order(order_id):
    password = json_body().get('password')
    return result_response(container().order_service.delete_order(order_id, password))


@admin_bp.route('/api/orders/export.csv')
@admin_required
def export_orders_csv():
    c = container()
    content = c.report_service.orders_csv(c.order_service.list_orders())
    return _download(content, 'text/csv', CSV_FILENAME)


@admin_bp.route('/api/orders/export.txt')
@admin_required
def export_orders_txt():
    c = container()
    content = c.report_service.orders_txt(c.order_service.list_orders())
    return _download(content, 'text/plain; charset=utf-8', TXT_FILENAME)


# ==============================================================================
# AVISO DE INICIO
# ==============================================================================

@admin_bp.route('/api/popup')
@admin_required
def get_popup():
    return {'ok': True, 'popup': container().popup_service.get_config().to_dict()}


@admin_bp.route('/api/popup', methods=['PUT'])
@admin_required
def save_popup():
    return result_response(container().popup_service.save_config(json_body()))
