# ==============================================================================
# SERVICIO DE AUTENTICACIÓN DEL PANEL
# ==============================================================================
# Una sola contraseña de administrador (ADMIN_PASSWORD). Se guarda solo su
# hash (Werkzeug) y se compara con check_password_hash.
# La misma contraseña confirma la eliminación de pedidos.
# ==============================================================================

import logging
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = (
    'O login do administrador não está configurado corretamente. '
    '(A variável de ambiente ADMIN_PASSWORD está faltando)'
)


class AdminAuthService:
    """
    Verificación de la contraseña del administrador.
    """

    def __init__(self, admin_password: Optional[str]):
        """
        Args:
            admin_password: Contraseña en texto plano (vacía = panel deshabilitado)
        """
        self._password_hash = generate_password_hash(admin_password) if admin_password else None
        if self._password_hash is None:
            logger.warning("ADMIN_PASSWORD no configurada: el panel queda deshabilitado")

    @property
    def is_configured(self) -> bool:
        return self._password_hash is not None

    def verify(self, password: Optional[str]) -> bool:
        """True si la contraseña coincide (siempre False sin configuración)."""
        if not self.is_configured or not isinstance(password, str) or not password:
            return False
        return check_password_hash(self._password_hash, password)

    def login(self, password: Optional[str]) -> Dict[str, Any]:
        """
        Intento de inicio de sesión.

        Returns:
            Dict con ok / error
        """
        if not self.is_configured:
            return {'ok': False, 'error': NOT_CONFIGURED_ERROR}
        if not self.verify(password):
            logger.warning("Intento de acceso al panel con contraseña incorrecta")
            return {'ok': False, 'error': 'Senha incorreta. Tente novamente.'}
        logger.info("Administrador autenticado")
        return {'ok': True}
