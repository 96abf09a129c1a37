# ==============================================================================
# SERVICIO DE PRODUCTOS (CATÁLOGO)
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con productos.
# Crear o eliminar un producto también crea o elimina su fila de stock a
# través del contrato de StockService (initialize/rename/remove_stock).
# ==============================================================================

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from inventory_tracker.models import Product, generate_id, now
from inventory_tracker.repositories.base import RecordStore
from inventory_tracker.repositories.product_repository import ProductRepository
from inventory_tracker.services.stock_service import StockService
from inventory_tracker.validation import optional_text, required_text, to_price


logger = logging.getLogger(__name__)


# Campos editables: clave recibida → atributo de Product
EDITABLE_FIELDS = {
    'name': 'name',
    'sku': 'sku',
    'purchasePrice': 'purchase_price',
    'purchase_price': 'purchase_price',
    'sellingPrice': 'selling_price',
    'selling_price': 'selling_price',
    'category': 'category',
    'description': 'description',
}


class ProductService:
    """
    Servicio para gestión del catálogo.

    Responsabilidades:
    - CRUD de productos
    - Mantener la fila de stock sincronizada con el producto
    - Búsqueda y margen de ganancia

    SKU y nombre NO son únicos.
    """

    def __init__(
        self,
        store: RecordStore,
        product_repo: ProductRepository,
        stock_service: StockService
    ):
        """
        Inicializa el servicio de productos.

        Args:
            store: Almacén compartido (para transacciones)
            product_repo: Repositorio de productos
            stock_service: Servicio de stock (dueño de stock_levels)
        """
        self.store = store
        self.product_repo = product_repo
        self.stock_service = stock_service

    # =========================================================================
    # OPERACIONES DE PRODUCTOS
    # =========================================================================

    def get_all_products(self) -> List[Product]:
        """Todos los productos en orden de creación."""
        return self.product_repo.load()

    def get_product(self, product_id: str) -> Optional[Product]:
        return self.product_repo.get_product(product_id)

    def product_exists(self, product_id: str) -> bool:
        return self.product_repo.product_exists(product_id)

    def create_product(self, data: Dict[str, Any]) -> Product:
        """
        Crea un producto nuevo con su fila de stock en 0.

        Args:
            data: name (obligatorio), sku, purchasePrice, sellingPrice,
                  category, description

        Returns:
            Producto creado

        Raises:
            ValidationError: Nombre vacío o precios inválidos
        """
        fields = self._normalize_fields(data)
        timestamp = now()

        product = Product(
            id=generate_id(),
            name=required_text(fields.get('name'), 'name'),
            sku=fields.get('sku') or '',
            purchase_price=fields.get('purchase_price', 0.0),
            selling_price=fields.get('selling_price', 0.0),
            category=fields.get('category') or '',
            description=fields.get('description'),
            created_at=timestamp,
            updated_at=timestamp,
        )

        with self.store.transaction():
            self.product_repo.create_product(product)
            self.stock_service.initialize_stock(product.id, product.name)

        logger.info("Producto creado: %s (%s)", product.name, product.id)
        return product

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[Product]:
        """
        Actualiza datos de un producto.

        Args:
            product_id: ID del producto
            updates: Campos a actualizar (los no editables se ignoran)

        Returns:
            Producto actualizado o None si no existe
        """
        product = self.product_repo.get_product(product_id)
        if product is None:
            logger.warning("Actualización de producto inexistente: %s", product_id)
            return None

        fields = self._normalize_fields(updates)
        if 'name' in fields:
            fields['name'] = required_text(fields['name'], 'name')

        updated = replace(product, updated_at=now(), **fields)

        with self.store.transaction():
            self.product_repo.update_product(updated)
            if updated.name != product.name:
                self.stock_service.rename_stock(product_id, updated.name)

        logger.info("Producto actualizado: %s (%s)", updated.name, product_id)
        return updated

    def delete_product(self, product_id: str) -> bool:
        """
        Elimina un producto y su fila de stock.
        El historial y las ventas conservan el nombre anterior.

        Returns:
            True si el producto existía
        """
        with self.store.transaction():
            removed = self.product_repo.delete_product(product_id)
            if removed:
                self.stock_service.remove_stock(product_id)

        if removed:
            logger.info("Producto eliminado: %s", product_id)
        return removed

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def search_products(self, term: str = '') -> List[Product]:
        """Busca por nombre, SKU o categoría (sin distinguir mayúsculas)."""
        term = (term or '').strip().lower()
        products = self.get_all_products()
        if not term:
            return products
        return [
            p for p in products
            if term in p.name.lower() or term in p.sku.lower() or term in p.category.lower()
        ]

    @staticmethod
    def calculate_margin(product: Product) -> float:
        """Margen porcentual sobre el precio de venta, redondeado a 1 decimal."""
        return round(product.margin, 1)

    # =========================================================================
    # NORMALIZACIÓN
    # =========================================================================

    def _normalize_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Filtra campos editables y normaliza sus valores."""
        fields: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            attr = EDITABLE_FIELDS.get(key)
            if attr is None:
                continue
            if attr in ('purchase_price', 'selling_price'):
                fields[attr] = to_price(value, key)
            elif attr == 'description':
                fields[attr] = optional_text(value)
            else:
                fields[attr] = str(value).strip() if value is not None else ''
        return fields
