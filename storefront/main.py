# ==============================================================================
# APLICACIÓN FLASK - Fábrica de la app
# ==============================================================================
# create_app() arma todo en este orden:
#   1. Config (entorno + .env + overrides)
#   2. Logging (archivos rotativos en LOG_DIR)
#   3. Contenedor de dependencias
#   4. Profiling de rutas
#   5. Blueprints (API pública y panel)
#   6. Headers de seguridad y manejo de errores
#
# Producción: gunicorn wsgi:app
# ==============================================================================

import logging
from typing import Any, Dict, Optional

from flask import Flask, request

from storefront.app_container import AppContainer, get_container
from storefront.config import Config
from storefront.logging_setup import configure_logging
from storefront.performance_logger import init_profiling
from storefront.repositories.errors import BackendError
from storefront.routes import CONTAINER_KEY
from storefront.routes.admin import admin_bp
from storefront.routes.public import public_bp

logger = logging.getLogger(__name__)

# Aviso que ve el cliente cuando el backend no responde
CONNECTION_BANNER = {
    'ok': False,
    'error': 'Erro de Conexão',
    'cause': 'As chaves de acesso ao banco de dados (Supabase) estão ausentes ou incorretas.',
    'remediation': (
        'Verifique as variáveis de ambiente SUPABASE_URL e SUPABASE_ANON_KEY '
        'e publique a aplicação novamente.'
    ),
}


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Crea la aplicación.

    Args:
        overrides: Valores de Config a reemplazar (tests, scripts)

    Returns:
        App Flask lista para servir
    """
    config = Config(overrides)

    configure_logging(config.LOG_DIR, config.LOG_LEVEL, console=not config.TESTING)

    if config.uses_default_secret:
        logger.warning("STOREFRONT_SECRET_KEY no definida: se usa la clave de desarrollo")

    app = Flask(__name__)
    app.config.update(config.to_flask())

    # Un contenedor nuevo por app (create_app puede llamarse varias veces)
    AppContainer.reset_instance()
    app.extensions[CONTAINER_KEY] = get_container(config)

    init_profiling(app, enabled=config.ENABLE_PROFILING)

    app.register_blueprint(public_bp)
    app.register_blueprint(admin_bp)

    register_hooks(app)

    logger.info("Tienda iniciada (backend=%s)", config.BACKEND)
    return app


def register_hooks(app: Flask) -> None:
    """Headers de seguridad y respuestas de error en JSON."""

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=()'
        # HSTS solo detrás de HTTPS real
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    @app.errorhandler(BackendError)
    def backend_unavailable(e):
        logger.error("Backend no disponible en %s %s: %s", request.method, request.path, e)
        return dict(CONNECTION_BANNER), 503

    @app.errorhandler(404)
    def not_found(e):
        return {'ok': False, 'error': 'Não encontrado.'}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {'ok': False, 'error': 'Método não permitido.'}, 405

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Error no controlado en %s %s", request.method, request.path)
        return {'ok': False, 'error': 'Erro interno.'}, 500
