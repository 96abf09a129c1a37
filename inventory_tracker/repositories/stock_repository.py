# ==============================================================================
# REPOSITORIOS DE STOCK
# ==============================================================================
# Encapsula el acceso a las colecciones "stock_levels" y "stock_entries".
# Solo StockService escribe en ellas.
# ==============================================================================

from typing import List, Optional

from inventory_tracker.models import StockEntry, StockLevel
from inventory_tracker.repositories.base import ListRepository


class StockLevelRepository(ListRepository):
    """
    Stock actual por producto.

    Formato de datos en stock_levels:
    [
        {"productId": "3f2a...", "productName": "Cuaderno A4", "quantity": 45}
    ]
    """

    collection = 'stock_levels'

    def load(self) -> List[StockLevel]:
        return [StockLevel.from_dict(r) for r in self.get_all()]

    def get_level(self, product_id: str) -> Optional[StockLevel]:
        """
        Obtiene la fila de stock de un producto.

        Returns:
            StockLevel o None si el producto no tiene fila
        """
        record = self.find_by('productId', product_id)
        return StockLevel.from_dict(record) if record else None

    def upsert_level(self, level: StockLevel) -> None:
        """Actualiza la fila del producto o la crea al final si no existe."""
        data = self.get_all()
        for index, record in enumerate(data):
            if record.get('productId') == level.product_id:
                data[index] = level.to_dict()
                break
        else:
            data.append(level.to_dict())
        self.save_all(data)

    def rename(self, product_id: str, product_name: str) -> bool:
        return self.update_where('productId', product_id, {'productName': product_name})

    def delete_level(self, product_id: str) -> bool:
        return self.delete_where('productId', product_id) > 0


class StockEntryRepository(ListRepository):
    """
    Historial de movimientos (solo se agrega, nunca se modifica).

    Formato de datos en stock_entries (más reciente primero):
    [
        {
            "id": "e0d4...",
            "productId": "3f2a...",
            "productName": "Cuaderno A4",
            "type": "sale",
            "quantity": 5,
            "previousQuantity": 50,
            "newQuantity": 45,
            "notes": "Sale: 5 units",
            "createdAt": "..."
        }
    ]
    """

    collection = 'stock_entries'

    def load(self) -> List[StockEntry]:
        return [StockEntry.from_dict(r) for r in self.get_all()]

    def add_entry(self, entry: StockEntry) -> None:
        """Agrega un movimiento al inicio del historial."""
        self.prepend(entry.to_dict())

    def get_entries_by_product(self, product_id: str) -> List[StockEntry]:
        return [StockEntry.from_dict(r) for r in self.find_all_by('productId', product_id)]
