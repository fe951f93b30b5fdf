# ==============================================================================
# BACKEND ALOJADO - API REST (PostgREST) del proyecto Supabase
# ==============================================================================
# Implementa ITable sobre HTTP con requests:
#
#   fetch_all  → GET    /rest/v1/<tabla>?select=*&order=<campo>.<asc|desc>
#   find_by    → GET    /rest/v1/<tabla>?<campo>=eq.<valor>&limit=N
#   insert     → POST   /rest/v1/<tabla>            (Prefer: return=representation)
#   update     → PATCH  /rest/v1/<tabla>?id=eq.<id>
#   delete     → DELETE /rest/v1/<tabla>?id=eq.<id>
#   upsert     → POST   /rest/v1/<tabla>?on_conflict=<col>
#                       (Prefer: resolution=merge-duplicates)
#
# Cualquier falla se convierte en BackendError.
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

import requests

from storefront.repositories.errors import BackendError

logger = logging.getLogger(__name__)

RETURN_REPRESENTATION = 'return=representation'


def _column(field: str) -> str:
    """'customer.cpf' → 'customer->>cpf' (consulta dentro de columna JSONB)."""
    if '.' not in field:
        return field
    column, key = field.split('.', 1)
    return f"{column}->>{key}"


class SupabaseClient:
    """
    Cliente HTTP mínimo para la API REST del proyecto.

    Uso:
        client = SupabaseClient(url, anon_key)
        products = SupabaseTable(client, 'products')
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            url: URL del proyecto (https://xxxx.supabase.co)
            api_key: Clave pública 'anon'
            timeout: Timeout por petición, en segundos
            session: Sesión HTTP (inyectable para tests)
        """
        self.base_url = (url or '').rstrip('/')
        self.api_key = api_key or ''
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            'apikey': self.api_key,
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        if prefer:
            headers['Prefer'] = prefer
        return headers

    def request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Any = None,
        prefer: Optional[str] = None
    ) -> Any:
        """
        Ejecuta una petición contra /rest/v1/<table>.

        Returns:
            JSON decodificado (lista de filas) o None si no hay cuerpo

        Raises:
            BackendError: Backend no configurado, sin conexión o con error
        """
        if not self.is_configured:
            raise BackendError(
                "Backend alojado no configurado (SUPABASE_URL / SUPABASE_ANON_KEY)",
                unavailable=True
            )

        url = f"{self.base_url}/rest/v1/{table}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=self._headers(prefer),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendError(f"Sin conexión con el backend: {e}", unavailable=True) from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get('message', response.text) if isinstance(body, dict) else response.text
            raise BackendError(
                f"{method} {table} rechazado: {detail}",
                status_code=response.status_code,
                unavailable=response.status_code in (401, 403) or response.status_code >= 500,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Respuesta inválida de {table}: {e}") from e


class SupabaseTable:
    """Tabla del backend alojado con la interfaz ITable."""

    def __init__(self, client: SupabaseClient, table: str):
        self.client = client
        self.table = table

    def fetch_all(
        self,
        order_by: Optional[str] = None,
        ascending: bool = True
    ) -> List[Dict[str, Any]]:
        params = {'select': '*'}
        if order_by:
            direction = 'asc' if ascending else 'desc'
            params['order'] = f"{order_by}.{direction}.nullslast"
        return self.client.request('GET', self.table, params=params) or []

    def find_by(
        self,
        field: str,
        value: Any,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        params = {'select': '*', _column(field): f"eq.{value}"}
        if limit:
            params['limit'] = limit
        return self.client.request('GET', self.table, params=params) or []

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        rows = self.client.request(
            'POST', self.table, payload=record, prefer=RETURN_REPRESENTATION
        ) or []
        return rows[0] if rows else dict(record)

    def update(self, record_id: Any, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        rows = self.client.request(
            'PATCH',
            self.table,
            params={'id': f"eq.{record_id}"},
            payload=fields,
            prefer=RETURN_REPRESENTATION,
        ) or []
        return rows[0] if rows else None

    def delete(self, record_id: Any) -> bool:
        rows = self.client.request(
            'DELETE',
            self.table,
            params={'id': f"eq.{record_id}"},
            prefer=RETURN_REPRESENTATION,
        ) or []
        return bool(rows)

    def upsert(self, record: Dict[str, Any], on_conflict: str) -> Dict[str, Any]:
        rows = self.client.request(
            'POST',
            self.table,
            params={'on_conflict': on_conflict},
            payload=record,
            prefer=f"resolution=merge-duplicates,{RETURN_REPRESENTATION}",
        ) or []
        return rows[0] if rows else dict(record)
