# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Encapsula todo el acceso a la colección "sales"
# Las ventas se almacenan como lista, la más reciente primero
# ==============================================================================

from datetime import datetime
from typing import List, Optional

from inventory_tracker.models import Sale
from inventory_tracker.repositories.base import ListRepository


class SalesRepository(ListRepository):
    """
    Repositorio para gestión de ventas.

    Formato de datos en sales:
    [
        {
            "id": "b71c...",
            "productId": "3f2a...",
            "productName": "Cuaderno A4",
            "customerId": "9c1e...",
            "customerName": "Jane Doe",
            "quantity": 5,
            "unitPrice": 20.0,
            "totalPrice": 100.0,
            "profit": 50.0,
            "createdAt": "2024-01-01T10:00:00.000000"
        }
    ]
    """

    collection = 'sales'

    def load(self) -> List[Sale]:
        """
        Carga todas las ventas.

        Returns:
            Lista de ventas (más recientes primero)
        """
        return [Sale.from_dict(r) for r in self.get_all()]

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        """Busca una venta por su ID."""
        record = self.find_by('id', sale_id)
        return Sale.from_dict(record) if record else None

    def create_sale(self, sale: Sale) -> None:
        """Registra una venta nueva al inicio de la lista."""
        self.prepend(sale.to_dict())

    def get_sales_since(self, since: datetime) -> List[Sale]:
        """
        Ventas con createdAt >= since.

        Args:
            since: Límite inferior inclusivo (hora local)
        """
        return [sale for sale in self.load() if sale.created_at >= since]
