# ==============================================================================
# SERVICIO DEL AVISO DE INICIO
# ==============================================================================
# El aviso se muestra al abrir la tienda solo si:
#   - active es True
#   - text no está vacío
#   - expiresAt está vacío o todavía no pasó
# ==============================================================================

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from storefront.models import PopupConfig
from storefront.repositories.errors import BackendError
from storefront.repositories.interfaces import ISettingsRepository
from storefront.repositories.settings_repository import POPUP_KEY

logger = logging.getLogger(__name__)


def parse_expiration(value: Optional[str]) -> Optional[datetime]:
    """
    Interpreta expiresAt. Sin zona horaria se asume UTC
    ('2026-01-31' vence a las 00:00 UTC de ese día).
    """
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        logger.warning("expiresAt inválido en el aviso: %r (se ignora)", value)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_popup_visible(config: PopupConfig, now: Optional[datetime] = None) -> bool:
    if not config.active or not config.text.strip():
        return False
    expires = parse_expiration(config.expires_at)
    if expires is None:
        return True
    now = now or datetime.now(timezone.utc)
    return now <= expires


class PopupService:
    """Lectura y edición del aviso de inicio."""

    def __init__(self, settings_repo: ISettingsRepository):
        self.settings_repo = settings_repo

    def get_config(self) -> PopupConfig:
        """Configuración guardada (vacía si no existe)."""
        return PopupConfig.from_dict(self.settings_repo.get_setting(POPUP_KEY))

    def get_active_popup(self, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """Aviso a mostrar al cliente, o None."""
        config = self.get_config()
        if not is_popup_visible(config, now):
            return None
        return {'text': config.text}

    def save_config(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Guarda el aviso.

        Args:
            data: {text, expiresAt, active}

        Returns:
            Dict con ok y popup, o errors / error
        """
        config = PopupConfig.from_dict(data)
        if config.active and not config.text.strip():
            return {'ok': False, 'errors': {'text': 'O texto do aviso é obrigatório.'}}
        if config.expires_at and parse_expiration(config.expires_at) is None:
            return {'ok': False, 'errors': {'expiresAt': 'Data de expiração inválida.'}}

        try:
            self.settings_repo.set_setting(POPUP_KEY, config.to_dict())
        except BackendError as e:
            logger.error("Error al guardar el aviso de inicio: %s", e)
            return {'ok': False, 'unavailable': True, 'error': 'Falha ao salvar o aviso.'}

        logger.info("Aviso de inicio actualizado (activo=%s)", config.active)
        return {'ok': True, 'popup': config.to_dict()}
