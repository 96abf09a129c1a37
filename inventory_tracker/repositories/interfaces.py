# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Este archivo define las interfaces (protocolos) que el almacén y los
# repositorios deben implementar. Esto permite:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Los servicios dependen de interfaces, NO de implementaciones concretas
#    - Cambiar JSON → base de datos solo requiere un nuevo RecordStore
#
# 2. TESTING
#    - MemoryRecordStore implementa IRecordStore sin tocar archivos
#
# ==============================================================================

from typing import Any, ContextManager, Dict, List, Optional, Protocol, runtime_checkable

from inventory_tracker.models import Customer, Product, Sale, StockEntry, StockLevel


@runtime_checkable
class IRecordStore(Protocol):
    """
    Interfaz del almacén de colecciones.
    Solo get/put de colecciones completas, sin lógica de negocio.
    """

    def load_collection(self, name: str) -> List[Dict[str, Any]]:
        """Obtiene todos los registros de una colección."""
        ...

    def save_collection(self, name: str, records: List[Dict[str, Any]]) -> None:
        """Guarda todos los registros de una colección."""
        ...

    def transaction(self) -> ContextManager[Any]:
        """Sección atómica lógica sobre varias colecciones."""
        ...


@runtime_checkable
class IListRepository(Protocol):
    """Interfaz para repositorios basados en listas."""

    def get_all(self) -> List[Dict[str, Any]]:
        ...

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        ...

    def append(self, record: Dict[str, Any]) -> None:
        ...


# ==============================================================================
# INTERFACES ESPECÍFICAS POR DOMINIO
# ==============================================================================

@runtime_checkable
class IProductRepository(Protocol):

    def load(self) -> List[Product]:
        ...

    def get_product(self, product_id: str) -> Optional[Product]:
        ...

    def create_product(self, product: Product) -> None:
        ...

    def update_product(self, product: Product) -> bool:
        ...

    def delete_product(self, product_id: str) -> bool:
        ...


@runtime_checkable
class IStockLevelRepository(Protocol):

    def load(self) -> List[StockLevel]:
        ...

    def get_level(self, product_id: str) -> Optional[StockLevel]:
        ...

    def upsert_level(self, level: StockLevel) -> None:
        ...

    def delete_level(self, product_id: str) -> bool:
        ...


@runtime_checkable
class IStockEntryRepository(Protocol):

    def load(self) -> List[StockEntry]:
        ...

    def add_entry(self, entry: StockEntry) -> None:
        ...


@runtime_checkable
class ISalesRepository(Protocol):

    def load(self) -> List[Sale]:
        ...

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        ...

    def create_sale(self, sale: Sale) -> None:
        ...


@runtime_checkable
class ICustomerRepository(Protocol):

    def load(self) -> List[Customer]:
        ...

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        ...

    def create_customer(self, customer: Customer) -> None:
        ...

    def update_customer(self, customer: Customer) -> bool:
        ...

    def delete_customer(self, customer_id: str) -> bool:
        ...
