# ==============================================================================
# ERRORES DE LA CAPA DE PERSISTENCIA
# ==============================================================================

from typing import Optional


class BackendError(Exception):
    """
    Falla del backend de datos (no disponible, mal configurado o que
    rechazó la operación).

    Attributes:
        message: Descripción técnica (va al log)
        status_code: Código HTTP devuelto por el backend alojado, si hubo
        unavailable: True si el backend no responde o no está configurado
                     (se muestra el aviso de conexión en la interfaz)
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        unavailable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.unavailable = unavailable

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message
