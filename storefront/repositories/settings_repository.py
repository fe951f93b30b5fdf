# ==============================================================================
# REPOSITORIO DE CONFIGURACIONES
# ==============================================================================
# Tabla clave/valor 'settings'. Hoy solo guarda el aviso de inicio
# (clave 'startup_popup'), pero admite cualquier valor JSON.
# ==============================================================================

from typing import Any

from storefront.repositories.interfaces import ITable

TABLE_NAME = 'settings'

POPUP_KEY = 'startup_popup'


class SettingsRepository:
    """
    Repositorio de configuraciones.

    Formato de cada fila:
    {"key": "startup_popup", "value": {"text": "...", "active": true, "expiresAt": null}}
    """

    def __init__(self, table: ITable):
        self.table = table

    def get_setting(self, key: str, default: Any = None) -> Any:
        """
        Obtiene el valor de una clave.

        Args:
            key: Clave de la configuración
            default: Valor por defecto si no existe

        Returns:
            Valor guardado
        """
        rows = self.table.find_by('key', key, limit=1)
        if not rows:
            return default
        value = rows[0].get('value')
        return default if value is None else value

    def set_setting(self, key: str, value: Any) -> None:
        """Inserta o reemplaza el valor de una clave."""
        self.table.upsert({'key': key, 'value': value}, on_conflict='key')
