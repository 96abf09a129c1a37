# ==============================================================================
# REPOSITORIO BASE - Almacén de colecciones y acceso común
# ==============================================================================
# El almacén (RecordStore) solo sabe leer y guardar colecciones completas:
#   load_collection(nombre) -> [registros]
#   save_collection(nombre, registros)
#
# Implementaciones:
#   - JsonRecordStore   → un archivo <coleccion>.json por colección
#   - MemoryRecordStore → diccionario en memoria (tests)
#
# Las operaciones que tocan varias colecciones se envuelven en
# store.transaction(): si algo falla, cada colección guardada dentro del
# bloque vuelve a su contenido original.
# ==============================================================================

import copy
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional


logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """
    Clase base abstracta para todos los almacenes de colecciones.

    No contiene lógica de negocio: solo get/put de colecciones completas
    y el soporte de transacciones lógicas.
    """

    def __init__(self):
        # Lock para evitar escrituras concurrentes
        self._lock = threading.RLock()
        # Copias originales de las colecciones tocadas en la transacción abierta
        self._snapshots: Optional[Dict[str, List[Dict[str, Any]]]] = None

    @abstractmethod
    def _read_collection(self, name: str) -> List[Dict[str, Any]]:
        """Lee los registros crudos de una colección."""
        pass

    @abstractmethod
    def _write_collection(self, name: str, records: List[Dict[str, Any]]) -> None:
        """Escribe los registros crudos de una colección."""
        pass

    def load_collection(self, name: str) -> List[Dict[str, Any]]:
        """
        Obtiene todos los registros de una colección.

        Args:
            name: Nombre lógico de la colección (products, sales...)

        Returns:
            Lista de registros (vacía si la colección no existe)
        """
        with self._lock:
            return self._read_collection(name)

    def save_collection(self, name: str, records: List[Dict[str, Any]]) -> None:
        """
        Guarda todos los registros de una colección (reemplazo completo).

        Args:
            name: Nombre lógico de la colección
            records: Lista completa de registros
        """
        with self._lock:
            if self._snapshots is not None and name not in self._snapshots:
                self._snapshots[name] = self._read_collection(name)
            self._write_collection(name, list(records))

    @contextmanager
    def transaction(self) -> Iterator['RecordStore']:
        """
        Sección atómica lógica sobre varias colecciones.

        Una transacción anidada se une a la exterior.
        """
        with self._lock:
            if self._snapshots is not None:
                yield self
                return

            self._snapshots = {}
            try:
                yield self
            except Exception:
                snapshots = self._snapshots
                self._snapshots = None
                for name, records in snapshots.items():
                    self._write_collection(name, records)
                logger.warning(
                    "Transacción revertida, colecciones restauradas: %s",
                    ', '.join(sorted(snapshots)) or '-'
                )
                raise
            finally:
                self._snapshots = None


class JsonRecordStore(RecordStore):
    """
    Almacén basado en archivos JSON, uno por colección.

    Ejemplo: data/products.json -> [{...}, {...}]
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, base_path: str):
        """
        Inicializa el almacén.

        Args:
            base_path: Carpeta donde se guardan los archivos JSON
        """
        super().__init__()
        self.base_path = base_path
        os.makedirs(self.base_path, exist_ok=True)

    def file_path(self, name: str) -> str:
        """Ruta del archivo de una colección."""
        return os.path.join(self.base_path, f'{name}.json')

    def _read_collection(self, name: str) -> List[Dict[str, Any]]:
        path = self.file_path(name)
        with self._file_lock:
            if not os.path.exists(path):
                return []
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except json.JSONDecodeError:
                # Se aparta para que el próximo guardado no lo pise
                corrupt_path = path + '.corrupt'
                os.replace(path, corrupt_path)
                logger.error("Archivo JSON corrupto, movido a %s", corrupt_path)
                return []
        return data if isinstance(data, list) else []

    def _write_collection(self, name: str, records: List[Dict[str, Any]]) -> None:
        path = self.file_path(name)
        with self._file_lock:
            # Escribir a archivo temporal primero para atomicidad
            temp_path = path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(records, f, indent=2, ensure_ascii=False)
                # Reemplazar archivo original (operación atómica en la mayoría de sistemas)
                os.replace(temp_path, path)
            except Exception:
                # Limpiar archivo temporal si algo falla
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise


class MemoryRecordStore(RecordStore):
    """Almacén en memoria. Se usa en tests y en INVENTORY_STORAGE=memory."""

    def __init__(self, initial: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        super().__init__()
        self._data: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(initial or {})

    def _read_collection(self, name: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._data.get(name, []))

    def _write_collection(self, name: str, records: List[Dict[str, Any]]) -> None:
        self._data[name] = copy.deepcopy(records)


class ListRepository:
    """
    Repositorio base para una colección almacenada como lista.

    Ejemplo: sales -> [{...}, {...}] (más reciente primero)
    """

    # Nombre de la colección; lo define cada repositorio concreto
    collection: str = ''

    def __init__(self, store: RecordStore):
        """
        Args:
            store: Almacén de colecciones compartido
        """
        self.store = store

    def get_all(self) -> List[Dict[str, Any]]:
        """Obtiene todos los registros."""
        return self.store.load_collection(self.collection)

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """Guarda todos los registros (reemplazo completo)."""
        self.store.save_collection(self.collection, data)

    def append(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al final."""
        data = self.get_all()
        data.append(record)
        self.save_all(data)

    def prepend(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al inicio (historiales más reciente primero)."""
        data = self.get_all()
        data.insert(0, record)
        self.save_all(data)

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """
        Busca un registro por un campo específico.

        Returns:
            Primer registro que coincide o None
        """
        for record in self.get_all():
            if record.get(field) == value:
                return record
        return None

    def find_all_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """Busca todos los registros que coinciden con un campo."""
        return [r for r in self.get_all() if r.get(field) == value]

    def update_where(self, field: str, value: Any, updates: Dict[str, Any]) -> bool:
        """
        Actualiza registros que coinciden con un campo.

        Returns:
            True si se actualizó al menos un registro
        """
        data = self.get_all()
        updated = False
        for record in data:
            if record.get(field) == value:
                record.update(updates)
                updated = True
        if updated:
            self.save_all(data)
        return updated

    def delete_where(self, field: str, value: Any) -> int:
        """
        Elimina los registros que coinciden con un campo.

        Returns:
            Cantidad de registros eliminados
        """
        data = self.get_all()
        kept = [r for r in data if r.get(field) != value]
        removed = len(data) - len(kept)
        if removed:
            self.save_all(kept)
        return removed
