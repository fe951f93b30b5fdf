# ==============================================================================
# RUTAS HTTP (JSON)
# ==============================================================================
# ├── public.py → catálogo, carrito, checkout, aviso  (/api/...)
# └── admin.py  → panel de administración           (/admin/...)
#
# Las rutas solo orquestan: request → service → (dict, status).
# ==============================================================================

from typing import Any, Dict, Optional, Tuple

from flask import current_app, request

CONTAINER_KEY = 'storefront_container'


def container():
    """Contenedor de la app actual."""
    return current_app.extensions[CONTAINER_KEY]


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def to_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def result_response(result: Dict[str, Any]) -> Tuple[Dict[str, Any], int]:
    """
    Traduce el dict de un servicio a (cuerpo, status HTTP).

    ok → 200, not_found → 404, forbidden → 403,
    unavailable → 503, cualquier otro error → 400.
    """
    body = {k: v for k, v in result.items() if k not in ('not_found', 'forbidden', 'unavailable')}
    if result.get('ok'):
        return body, 200
    if result.get('not_found'):
        return body, 404
    if result.get('forbidden'):
        return body, 403
    if result.get('unavailable'):
        return body, 503
    return body, 400
