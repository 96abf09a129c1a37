# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia.
# Cambiar el almacenamiento solo requiere un nuevo RecordStore.
# Las interfaces (métodos públicos) permanecen iguales.
#
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos/Interfaces
# ├── base.py                → RecordStore (JSON / memoria) y ListRepository
# ├── product_repository.py  → Colección products
# ├── customer_repository.py → Colección customers
# ├── stock_repository.py    → Colecciones stock_levels y stock_entries
# └── sales_repository.py    → Colección sales
# ==============================================================================

# Interfaces
from .interfaces import (
    IRecordStore,
    IListRepository,
    IProductRepository,
    IStockLevelRepository,
    IStockEntryRepository,
    ISalesRepository,
    ICustomerRepository,
)

# Almacenes y clase base
from .base import RecordStore, JsonRecordStore, MemoryRecordStore, ListRepository

# Implementaciones concretas
from .product_repository import ProductRepository
from .customer_repository import CustomerRepository
from .stock_repository import StockLevelRepository, StockEntryRepository
from .sales_repository import SalesRepository

__all__ = [
    # Interfaces
    'IRecordStore',
    'IListRepository',
    'IProductRepository',
    'IStockLevelRepository',
    'IStockEntryRepository',
    'ISalesRepository',
    'ICustomerRepository',

    # Almacenes
    'RecordStore',
    'JsonRecordStore',
    'MemoryRecordStore',
    'ListRepository',

    # Repositorios
    'ProductRepository',
    'CustomerRepository',
    'StockLevelRepository',
    'StockEntryRepository',
    'SalesRepository',
]
