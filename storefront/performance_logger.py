# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide el tiempo de cada ruta y de las funciones marcadas con
# @profile_function. Las entradas se escriben con el logger
# 'storefront.performance' (logs/performance.log).
#
# ACTIVAR/DESACTIVAR: ENABLE_PROFILING en la configuración
# ==============================================================================

import logging
import time
from functools import wraps

from storefront.logging_setup import PERFORMANCE_LOGGER

logger = logging.getLogger(PERFORMANCE_LOGGER)

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

# Nombres legibles para los logs
ROUTE_NAMES = {
    # Catálogo
    'GET /api/products': 'Ver catálogo',
    'GET /api/products/<int:product_id>': 'Ver produto',
    'GET /api/popup': 'Ver aviso',

    # Carrito
    'GET /api/cart': 'Ver carrinho',
    'POST /api/cart/add': 'Adicionar ao carrinho',
    'POST /api/cart/update': 'Alterar quantidade',
    'POST /api/cart/remove': 'Remover do carrinho',
    'POST /api/cart/clear': 'Esvaziar carrinho',
    'POST /api/checkout': 'Finalizar pedido',

    # Administración
    'POST /admin/login': 'Login admin',
    'GET /admin/api/orders': 'Ver pedidos',
    'PATCH /admin/api/orders/<order_id>': 'Atualizar pedido',
    'DELETE /admin/api/orders/<order_id>': 'Excluir pedido',
    'GET /admin/api/orders/export.csv': 'Exportar CSV',
    'GET /admin/api/orders/export.txt': 'Exportar TXT',
    'POST /admin/api/products': 'Criar produto',
    'PUT /admin/api/products/<int:product_id>': 'Editar produto',
    'DELETE /admin/api/products/<int:product_id>': 'Excluir produto',
    'PUT /admin/api/products/<int:product_id>/visibility': 'Alterar visibilidade',
    'PUT /admin/api/products/<int:product_id>/promotion': 'Definir promoção',
    'DELETE /admin/api/products/<int:product_id>/promotion': 'Remover promoção',
    'POST /admin/api/promotions/bulk': 'Promoção em massa',
    'PUT /admin/api/popup': 'Salvar aviso',
}

_enabled = True


def _get_route_name(method, rule):
    """Nombre legible de la ruta, o la regla cruda si no está mapeada."""
    return ROUTE_NAMES.get(f"{method} {rule}", f"{method} {rule}")


def log_route_performance(method, path, rule, time_ms, user=None):
    """
    Registra el tiempo de una ruta y avisa si supera los umbrales.

    Args:
        method: GET, POST, etc.
        path: Ruta solicitada (/api/cart/add)
        rule: Regla de Flask (/admin/api/orders/<order_id>)
        time_ms: Tiempo en milisegundos
        user: 'admin' o None
    """
    action_name = _get_route_name(method, rule)
    user_str = user or 'anônimo'

    if time_ms >= THRESHOLD_CRITICAL:
        level = logging.CRITICAL
    elif time_ms >= THRESHOLD_WARNING:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger.log(
        level, "%s | %s %s | %s | %.0f ms",
        action_name, method, path, user_str, time_ms
    )


def init_profiling(app, enabled=True):
    """
    Registra los hooks before_request/after_request en la app Flask.

    Uso:
        init_profiling(app, enabled=config.ENABLE_PROFILING)
    """
    global _enabled
    _enabled = enabled
    if not enabled:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request, session

        if not hasattr(g, 'start_time'):
            return response
        if request.path.startswith('/static'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        rule = str(request.url_rule) if request.url_rule else request.path
        user = 'admin' if session.get('is_admin') else None

        log_route_performance(request.method, request.path, rule, elapsed, user)
        return response


def profile_function(func=None, name=None):
    """
    Decorador para medir funciones críticas.

    Uso:
        @profile_function
        def mi_funcion(): ...

        @profile_function(name="Detectar pedidos duplicados")
        def find_duplicate_order_ids(...): ...
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not _enabled:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                if elapsed_ms >= THRESHOLD_WARNING:
                    logger.warning("Função lenta: %s (%.0f ms)", func_name, elapsed_ms)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


__all__ = [
    'init_profiling',
    'profile_function',
]
