# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a la colección "products"
# Los productos se almacenan como lista en orden de creación
# ==============================================================================

from typing import List, Optional

from inventory_tracker.models import Product
from inventory_tracker.repositories.base import ListRepository


class ProductRepository(ListRepository):
    """
    Repositorio para gestión de productos.

    Formato de datos en products:
    [
        {
            "id": "3f2a...",
            "name": "Cuaderno A4",
            "sku": "CUA-001",
            "purchasePrice": 10.0,
            "sellingPrice": 20.0,
            "category": "Papelería",
            "createdAt": "2024-01-01T10:00:00.000000",
            "updatedAt": "2024-01-01T10:00:00.000000"
        }
    ]
    """

    collection = 'products'

    def load(self) -> List[Product]:
        """Carga todos los productos."""
        return [Product.from_dict(r) for r in self.get_all()]

    def get_product(self, product_id: str) -> Optional[Product]:
        """
        Obtiene un producto por su ID.

        Returns:
            Producto o None
        """
        record = self.find_by('id', product_id)
        return Product.from_dict(record) if record else None

    def product_exists(self, product_id: str) -> bool:
        return self.find_by('id', product_id) is not None

    def create_product(self, product: Product) -> None:
        """Agrega un producto nuevo al final de la colección."""
        self.append(product.to_dict())

    def update_product(self, product: Product) -> bool:
        """
        Reemplaza los datos de un producto existente.

        Returns:
            True si se actualizó
        """
        data = self.get_all()
        for index, record in enumerate(data):
            if record.get('id') == product.id:
                data[index] = product.to_dict()
                self.save_all(data)
                return True
        return False

    def delete_product(self, product_id: str) -> bool:
        """
        Elimina un producto.

        Returns:
            True si existía
        """
        return self.delete_where('id', product_id) > 0
