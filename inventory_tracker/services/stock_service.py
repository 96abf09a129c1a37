# ==============================================================================
# SERVICIO DE STOCK (LIBRO DE INVENTARIO)
# ==============================================================================
# Única autoridad para modificar cantidades. Mantiene:
#   - stock_levels  → una fila por producto con la cantidad actual
#   - stock_entries → historial de movimientos, el más reciente primero
#
# Cada movimiento actualiza la fila de stock y agrega su entrada de historial
# dentro de una misma transacción del almacén: nunca queda una sin la otra.
# ==============================================================================

import logging
from typing import List, Optional, Union

from inventory_tracker.exceptions import NotFoundError, ValidationError
from inventory_tracker.models import MovementType, StockEntry, StockLevel, generate_id, now
from inventory_tracker.performance_logger import profile_function
from inventory_tracker.repositories.base import RecordStore
from inventory_tracker.repositories.product_repository import ProductRepository
from inventory_tracker.repositories.stock_repository import (
    StockEntryRepository,
    StockLevelRepository,
)
from inventory_tracker.validation import optional_text, to_int


logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10


class StockService:
    """
    Servicio para gestión de stock.

    Responsabilidades:
    - Aplicar movimientos (add, adjust, sale)
    - Mantener el historial inmutable de movimientos
    - Crear, renombrar y eliminar la fila de stock de un producto
      (contrato usado por ProductService)
    - Consultas de stock actual, stock bajo e historial
    """

    def __init__(
        self,
        store: RecordStore,
        product_repo: ProductRepository,
        level_repo: StockLevelRepository,
        entry_repo: StockEntryRepository,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    ):
        """
        Inicializa el servicio de stock.

        Args:
            store: Almacén compartido (para transacciones)
            product_repo: Repositorio de productos (solo lectura)
            level_repo: Repositorio de stock actual
            entry_repo: Repositorio de historial
            low_stock_threshold: Cantidad bajo la cual el stock se considera bajo
        """
        self.store = store
        self.product_repo = product_repo
        self.level_repo = level_repo
        self.entry_repo = entry_repo
        self.low_stock_threshold = low_stock_threshold

    # =========================================================================
    # MOVIMIENTOS
    # =========================================================================

    @profile_function(name="Aplicar movimiento de stock")
    def apply_movement(
        self,
        product_id: str,
        movement_type: Union[MovementType, str],
        quantity: int,
        notes: Optional[str] = None
    ) -> StockEntry:
        """
        Aplica un movimiento de stock y lo registra en el historial.

        Reglas por tipo:
        - add:    nuevo = anterior + |cantidad|
        - sale:   nuevo = max(0, anterior - |cantidad|)
        - adjust: nuevo = cantidad (valor absoluto, no delta)

        Args:
            product_id: ID del producto
            movement_type: Tipo de movimiento
            quantity: Cantidad del movimiento
            notes: Nota opcional

        Returns:
            Entrada de historial creada

        Raises:
            NotFoundError: Si el producto no existe
            ValidationError: Tipo desconocido o cantidad inválida
        """
        try:
            movement_type = MovementType(movement_type)
        except ValueError:
            raise ValidationError(f"Tipo de movimiento desconocido: {movement_type}", 'type')

        quantity = to_int(quantity, 'quantity')
        if movement_type == MovementType.ADJUST and quantity < 0:
            raise ValidationError("El ajuste no puede dejar stock negativo", 'quantity')

        product = self.product_repo.get_product(product_id)
        if product is None:
            raise NotFoundError('Producto', product_id)

        with self.store.transaction():
            level = self.level_repo.get_level(product_id)
            previous = level.quantity if level else 0

            if movement_type == MovementType.ADD:
                new_quantity = previous + abs(quantity)
            elif movement_type == MovementType.SALE:
                # Red de seguridad: la venta ya validó el stock suficiente
                new_quantity = max(0, previous - abs(quantity))
            else:
                new_quantity = quantity

            self.level_repo.upsert_level(StockLevel(
                product_id=product_id,
                product_name=level.product_name if level else product.name,
                quantity=new_quantity,
            ))

            entry = StockEntry(
                id=generate_id(),
                product_id=product_id,
                product_name=product.name,
                type=movement_type,
                quantity=new_quantity if movement_type == MovementType.ADJUST else abs(quantity),
                previous_quantity=previous,
                new_quantity=new_quantity,
                notes=optional_text(notes),
                created_at=now(),
            )
            self.entry_repo.add_entry(entry)

        logger.info(
            "Movimiento %s en %s (%s): %d → %d",
            movement_type.value, product.name, product_id, previous, new_quantity
        )
        return entry

    def add_stock(self, product_id: str, quantity: int, notes: Optional[str] = None) -> StockEntry:
        """
        Entrada manual de stock.

        Raises:
            ValidationError: Si la cantidad no es mayor que 0
        """
        quantity = to_int(quantity, 'quantity')
        if quantity <= 0:
            raise ValidationError("La cantidad debe ser mayor que 0", 'quantity')
        return self.apply_movement(product_id, MovementType.ADD, quantity, notes)

    def adjust_stock(self, product_id: str, new_quantity: int, notes: Optional[str] = None) -> StockEntry:
        """Ajusta el stock de un producto a un valor absoluto."""
        return self.apply_movement(product_id, MovementType.ADJUST, new_quantity, notes)

    # =========================================================================
    # CONTRATO CON EL CATÁLOGO DE PRODUCTOS
    # =========================================================================

    def initialize_stock(self, product_id: str, product_name: str) -> StockLevel:
        """
        Crea la fila de stock (cantidad 0) para un producto nuevo.
        No genera entrada de historial.
        """
        level = StockLevel(product_id=product_id, product_name=product_name, quantity=0)
        self.level_repo.upsert_level(level)
        return level

    def rename_stock(self, product_id: str, product_name: str) -> bool:
        """Sincroniza el nombre copiado en la fila de stock. El historial no cambia."""
        return self.level_repo.rename(product_id, product_name)

    def remove_stock(self, product_id: str) -> bool:
        """Elimina la fila de stock de un producto borrado. El historial se conserva."""
        return self.level_repo.delete_level(product_id)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def current_level(self, product_id: str) -> int:
        """Cantidad actual del producto (0 si no tiene fila de stock)."""
        level = self.level_repo.get_level(product_id)
        return level.quantity if level else 0

    def all_levels(self) -> List[StockLevel]:
        return self.level_repo.load()

    def history(self, product_id: Optional[str] = None, limit: Optional[int] = None) -> List[StockEntry]:
        """
        Historial de movimientos, el más reciente primero.

        Args:
            product_id: Filtra por producto si se indica
            limit: Máximo de entradas a retornar
        """
        if product_id:
            entries = self.entry_repo.get_entries_by_product(product_id)
        else:
            entries = self.entry_repo.load()
        return entries[:limit] if limit is not None else entries

    def low_stock(self, threshold: Optional[int] = None, limit: Optional[int] = None) -> List[StockLevel]:
        """
        Filas con cantidad menor al umbral, en el orden almacenado.

        Args:
            threshold: Umbral (por defecto el configurado)
            limit: Máximo de filas a retornar
        """
        if threshold is None:
            threshold = self.low_stock_threshold
        levels = [level for level in self.all_levels() if level.quantity < threshold]
        return levels[:limit] if limit is not None else levels

    def search_levels(self, term: str = '') -> List[StockLevel]:
        """Filtra filas de stock por nombre de producto (sin distinguir mayúsculas)."""
        term = (term or '').strip().lower()
        levels = self.all_levels()
        if not term:
            return levels
        return [level for level in levels if term in level.product_name.lower()]
