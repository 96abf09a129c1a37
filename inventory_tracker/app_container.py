# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (se inyecta un MemoryRecordStore)
#   - Cambiar de almacenamiento sin tocar servicios
#
# Todos los repositorios comparten el MISMO RecordStore para que las
# transacciones abarquen varias colecciones.
# ==============================================================================

from typing import Optional

from inventory_tracker.config import STORAGE_MEMORY, Config

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia
# ═══════════════════════════════════════════════════════════════════════════════
from inventory_tracker.repositories import (
    CustomerRepository,
    JsonRecordStore,
    MemoryRecordStore,
    ProductRepository,
    RecordStore,
    SalesRepository,
    StockEntryRepository,
    StockLevelRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from inventory_tracker.services import (
    CustomerService,
    ProductService,
    SalesService,
    StatsService,
    StockService,
)


def build_store(config: Config) -> RecordStore:
    """Crea el almacén según la configuración."""
    if config.storage == STORAGE_MEMORY:
        return MemoryRecordStore()
    return JsonRecordStore(config.data_dir)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Cada repositorio y servicio se crea la primera vez que se pide
    (lazy loading) y luego se reutiliza.

    Uso:
        container = AppContainer(Config.from_env())
        sales_service = container.sales_service
    """

    _instance: Optional['AppContainer'] = None

    def __init__(self, config: Optional[Config] = None, store: Optional[RecordStore] = None):
        """
        Inicializa el contenedor.

        Args:
            config: Configuración (por defecto desde variables de entorno)
            store: Almacén ya construido (tests); si no, se crea según config
        """
        self.config = config or Config.from_env()
        self._store = store
        self.reset()

    def reset(self) -> None:
        """
        Reinicia todas las instancias (no el almacén).
        Útil para testing o para recargar datos.
        """
        self._product_repo: Optional[ProductRepository] = None
        self._customer_repo: Optional[CustomerRepository] = None
        self._level_repo: Optional[StockLevelRepository] = None
        self._entry_repo: Optional[StockEntryRepository] = None
        self._sales_repo: Optional[SalesRepository] = None

        self._stock_service: Optional[StockService] = None
        self._product_service: Optional[ProductService] = None
        self._customer_service: Optional[CustomerService] = None
        self._sales_service: Optional[SalesService] = None
        self._stats_service: Optional[StatsService] = None

    # =========================================================================
    # ALMACÉN Y REPOSITORIOS
    # =========================================================================

    @property
    def store(self) -> RecordStore:
        if self._store is None:
            self._store = build_store(self.config)
        return self._store

    @property
    def product_repo(self) -> ProductRepository:
        if self._product_repo is None:
            self._product_repo = ProductRepository(self.store)
        return self._product_repo

    @property
    def customer_repo(self) -> CustomerRepository:
        if self._customer_repo is None:
            self._customer_repo = CustomerRepository(self.store)
        return self._customer_repo

    @property
    def level_repo(self) -> StockLevelRepository:
        if self._level_repo is None:
            self._level_repo = StockLevelRepository(self.store)
        return self._level_repo

    @property
    def entry_repo(self) -> StockEntryRepository:
        if self._entry_repo is None:
            self._entry_repo = StockEntryRepository(self.store)
        return self._entry_repo

    @property
    def sales_repo(self) -> SalesRepository:
        if self._sales_repo is None:
            self._sales_repo = SalesRepository(self.store)
        return self._sales_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def stock_service(self) -> StockService:
        """Servicio de stock (singleton)."""
        if self._stock_service is None:
            self._stock_service = StockService(
                self.store,
                self.product_repo,
                self.level_repo,
                self.entry_repo,
                low_stock_threshold=self.config.low_stock_threshold
            )
        return self._stock_service

    @property
    def product_service(self) -> ProductService:
        """Servicio de productos (singleton)."""
        if self._product_service is None:
            self._product_service = ProductService(
                self.store,
                self.product_repo,
                self.stock_service
            )
        return self._product_service

    @property
    def customer_service(self) -> CustomerService:
        """Servicio de clientes (singleton)."""
        if self._customer_service is None:
            self._customer_service = CustomerService(self.store, self.customer_repo)
        return self._customer_service

    @property
    def sales_service(self) -> SalesService:
        """Servicio de ventas (singleton)."""
        if self._sales_service is None:
            self._sales_service = SalesService(
                self.store,
                self.sales_repo,
                self.product_repo,
                self.stock_service,
                self.customer_repo
            )
        return self._sales_service

    @property
    def stats_service(self) -> StatsService:
        """Servicio de estadísticas (singleton)."""
        if self._stats_service is None:
            self._stats_service = StatsService(
                self.product_repo,
                self.sales_repo,
                self.stock_service
            )
        return self._stats_service

    # =========================================================================
    # INSTANCIA GLOBAL
    # =========================================================================

    @classmethod
    def get_instance(cls, config: Optional[Config] = None) -> 'AppContainer':
        """
        Obtiene la instancia global del contenedor.

        Args:
            config: Configuración (solo se usa en la primera llamada)
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia global (útil para tests)."""
        cls._instance = None


def get_container(config: Optional[Config] = None) -> AppContainer:
    """Obtiene el contenedor de dependencias global."""
    return AppContainer.get_instance(config)
