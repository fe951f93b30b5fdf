# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Todos los valores se leen de variables de entorno (o de un archivo .env en
# la raíz del proyecto). Nada sensible vive en el código.
#
# VARIABLES PRINCIPALES:
#   STOREFRONT_SECRET_KEY  → clave de sesión de Flask
#   ADMIN_PASSWORD         → contraseña del panel de administración
#   SUPABASE_URL           → URL del proyecto (backend alojado)
#   SUPABASE_ANON_KEY      → clave pública 'anon' del proyecto
#   STOREFRONT_BACKEND     → 'supabase' o 'json' (archivos locales)
#   WHATSAPP_NUMBER        → número que recibe los pedidos
# ==============================================================================

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

_DEFAULT_SECRET = "storefront_dev_secret_key_change_in_production"

BACKEND_JSON = 'json'
BACKEND_SUPABASE = 'supabase'


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    """
    Configuración de la tienda.

    Se construye desde el entorno; `overrides` permite a los tests (o a
    un script) reemplazar cualquier valor sin tocar variables de entorno.
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        self.SECRET_KEY = os.environ.get('STOREFRONT_SECRET_KEY') or _DEFAULT_SECRET
        self.ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', '')

        self.SUPABASE_URL = os.environ.get('SUPABASE_URL', '')
        self.SUPABASE_ANON_KEY = os.environ.get('SUPABASE_ANON_KEY', '')
        self.BACKEND_TIMEOUT = _env_float('BACKEND_TIMEOUT', 10.0)

        default_backend = (
            BACKEND_SUPABASE
            if self.SUPABASE_URL and self.SUPABASE_ANON_KEY
            else BACKEND_JSON
        )
        self.BACKEND = os.environ.get('STOREFRONT_BACKEND', default_backend)
        self.DATA_DIR = os.environ.get(
            'STOREFRONT_DATA_DIR', os.path.join(BASE_DIR, 'data')
        )

        self.WHATSAPP_NUMBER = os.environ.get('WHATSAPP_NUMBER', '5511999999999')
        self.STORE_NAME = os.environ.get('STORE_NAME', 'Taimin')
        self.ORDER_COPY_EMAIL = os.environ.get('ORDER_COPY_EMAIL', 'mtc@taimin.com.br')
        self.STORE_TIMEZONE = os.environ.get('STORE_TIMEZONE', 'America/Sao_Paulo')

        self.LOG_DIR = os.environ.get(
            'STOREFRONT_LOG_DIR', os.path.join(BASE_DIR, 'logs')
        )
        self.LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
        self.ENABLE_PROFILING = _env_bool('ENABLE_PROFILING', True)
        self.TESTING = False

        for key, value in (overrides or {}).items():
            setattr(self, key, value)

    @property
    def uses_default_secret(self) -> bool:
        return self.SECRET_KEY == _DEFAULT_SECRET

    def to_flask(self) -> Dict[str, Any]:
        """Valores que se copian a app.config."""
        return {
            'SECRET_KEY': self.SECRET_KEY,
            'TESTING': self.TESTING,
            'SESSION_COOKIE_HTTPONLY': True,
            'SESSION_COOKIE_SAMESITE': 'Lax',
            'JSON_AS_ASCII': False,
        }
