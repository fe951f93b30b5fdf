# ==============================================================================
# REPOSITORIO BASE - Tablas en archivos JSON
# ==============================================================================
# Backend local (desarrollo y tests). Cada tabla es un archivo
# <data_dir>/<tabla>.json con una lista de registros:
#
#   [{"id": 1, "name": "...", ...}, {"id": 2, ...}]
#
# Implementa la misma interfaz ITable que el backend alojado.
# ==============================================================================

import copy
import json
import logging
import os
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from storefront.repositories.errors import BackendError

logger = logging.getLogger(__name__)

ID_INTEGER = 'int'
ID_UUID = 'uuid'


class BaseRepository(ABC):
    """
    Clase base abstracta para repositorios en archivo JSON.
    Lectura/escritura con lock de proceso y reemplazo atómico.
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Crea el archivo (y su carpeta) con datos vacíos si no existe."""
        if not os.path.exists(self.file_path):
            directory = os.path.dirname(self.file_path)
            try:
                if directory:
                    os.makedirs(directory, exist_ok=True)
            except OSError as e:
                raise BackendError(
                    f"No se pudo crear el directorio de datos {directory}: {e}",
                    unavailable=True
                ) from e
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """Estructura vacía (dict, list, etc.) según el repositorio."""
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.
        Un archivo corrupto o ausente se trata como vacío.
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError:
                return self._empty_data()
            except json.JSONDecodeError as e:
                logger.warning("Archivo JSON inválido %s: %s", self.file_path, e)
                return self._empty_data()
            except OSError as e:
                raise BackendError(
                    f"No se pudo leer {self.file_path}: {e}", unavailable=True
                ) from e

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON (temporal + os.replace).

        Raises:
            BackendError: Si hay error de escritura
        """
        with self._file_lock:
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise BackendError(f"No se pudo escribir {self.file_path}: {e}") from e


def _get_path(record: Dict[str, Any], field: str) -> Any:
    """Lee un campo, permitiendo rutas con punto ('customer.cpf')."""
    value: Any = record
    for part in field.split('.'):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


class JsonTable(BaseRepository):
    """
    Tabla de registros con id, guardada como lista JSON.

    Los ids se generan aquí: enteros autoincrementales (productos,
    settings) o UUID (pedidos), igual que en la base alojada.
    """

    def __init__(self, data_dir: str, table: str, id_type: str = ID_INTEGER):
        """
        Args:
            data_dir: Carpeta de datos
            table: Nombre de la tabla (archivo <table>.json)
            id_type: ID_INTEGER o ID_UUID
        """
        self.table = table
        self.id_type = id_type
        super().__init__(os.path.join(data_dir, f'{table}.json'))

    def _empty_data(self) -> List:
        return []

    def _records(self) -> List[Dict[str, Any]]:
        data = self._read_raw()
        return data if isinstance(data, list) else []

    def _next_id(self, records: List[Dict[str, Any]]) -> Any:
        if self.id_type == ID_UUID:
            return str(uuid.uuid4())
        ids = [r.get('id') for r in records if isinstance(r.get('id'), int)]
        return max(ids) + 1 if ids else 1

    @staticmethod
    def _same_id(a: Any, b: Any) -> bool:
        # Soportar tanto int como str como id
        return a == b or str(a) == str(b)

    def fetch_all(
        self,
        order_by: Optional[str] = None,
        ascending: bool = True
    ) -> List[Dict[str, Any]]:
        """
        Obtiene todos los registros.

        Args:
            order_by: Campo por el que ordenar (los registros sin ese campo
                      van al final)
            ascending: Orden ascendente o descendente

        Returns:
            Copia de los registros
        """
        records = copy.deepcopy(self._records())
        if not order_by:
            return records
        present = [r for r in records if r.get(order_by) is not None]
        missing = [r for r in records if r.get(order_by) is None]
        present.sort(key=lambda r: r[order_by], reverse=not ascending)
        return present + missing

    def find_by(
        self,
        field: str,
        value: Any,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Busca registros por igualdad de un campo.

        Args:
            field: Nombre del campo ('customer.cpf' para campos embebidos)
            value: Valor a buscar
            limit: Máximo de resultados

        Returns:
            Lista de registros que coinciden
        """
        found = [copy.deepcopy(r) for r in self._records() if _get_path(r, field) == value]
        return found[:limit] if limit else found

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Agrega un registro al final.

        Returns:
            Registro guardado (con id asignado)
        """
        with self._file_lock:
            records = self._records()
            new_record = copy.deepcopy(record)
            if new_record.get('id') is None:
                new_record['id'] = self._next_id(records)
            records.append(new_record)
            self._write_raw(records)
        return copy.deepcopy(new_record)

    def update(self, record_id: Any, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Actualiza campos de un registro.

        Returns:
            Registro actualizado o None si no existe
        """
        with self._file_lock:
            records = self._records()
            for record in records:
                if self._same_id(record.get('id'), record_id):
                    record.update({k: v for k, v in fields.items() if k != 'id'})
                    self._write_raw(records)
                    return copy.deepcopy(record)
        return None

    def delete(self, record_id: Any) -> bool:
        """
        Elimina un registro.

        Returns:
            True si existía
        """
        with self._file_lock:
            records = self._records()
            remaining = [r for r in records if not self._same_id(r.get('id'), record_id)]
            if len(remaining) == len(records):
                return False
            self._write_raw(remaining)
        return True

    def upsert(self, record: Dict[str, Any], on_conflict: str) -> Dict[str, Any]:
        """
        Inserta o reemplaza el registro cuyo `on_conflict` coincide.

        Returns:
            Registro guardado
        """
        with self._file_lock:
            records = self._records()
            for existing in records:
                if existing.get(on_conflict) == record.get(on_conflict):
                    existing.update({k: v for k, v in record.items() if k != 'id'})
                    self._write_raw(records)
                    return copy.deepcopy(existing)
            return self.insert(record)
