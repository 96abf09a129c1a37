# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con ventas.
#
# ORDEN DE UNA VENTA (una sola transacción del almacén):
# 1. Validar producto, cantidad y stock suficiente (antes de escribir nada)
# 2. Descontar stock vía StockService.apply_movement('sale')
# 3. Registrar la venta
# Si el paso 3 falla, el almacén restaura stock_levels y stock_entries.
# Este servicio NUNCA escribe stock_levels directamente.
# ==============================================================================

import logging
from typing import List, Optional

from inventory_tracker.exceptions import InsufficientStockError, NotFoundError, ValidationError
from inventory_tracker.models import MovementType, Sale, generate_id, now
from inventory_tracker.performance_logger import profile_function
from inventory_tracker.repositories.base import RecordStore
from inventory_tracker.repositories.customer_repository import CustomerRepository
from inventory_tracker.repositories.product_repository import ProductRepository
from inventory_tracker.repositories.sales_repository import SalesRepository
from inventory_tracker.services.stock_service import StockService
from inventory_tracker.validation import to_int, to_price


logger = logging.getLogger(__name__)

RECENT_SALES_LIMIT = 5


class SalesService:
    """
    Servicio para gestión de ventas.

    Responsabilidades:
    - Registrar ventas validando stock
    - Calcular total y ganancia
    - Consultar y buscar ventas
    """

    def __init__(
        self,
        store: RecordStore,
        sales_repo: SalesRepository,
        product_repo: ProductRepository,
        stock_service: StockService,
        customer_repo: Optional[CustomerRepository] = None
    ):
        """
        Inicializa el servicio de ventas.

        Args:
            store: Almacén compartido (para transacciones)
            sales_repo: Repositorio de ventas
            product_repo: Repositorio de productos (solo lectura)
            stock_service: Servicio de stock
            customer_repo: Repositorio de clientes (opcional, solo lectura)
        """
        self.store = store
        self.sales_repo = sales_repo
        self.product_repo = product_repo
        self.stock_service = stock_service
        self.customer_repo = customer_repo

    # =========================================================================
    # REGISTRO DE VENTAS
    # =========================================================================

    @profile_function(name="Registrar venta")
    def record_sale(
        self,
        product_id: str,
        quantity: int,
        unit_price: Optional[float] = None,
        customer_id: Optional[str] = None
    ) -> Sale:
        """
        Registra una venta y descuenta el stock.
        Esta es la ÚNICA función que crea ventas.

        Args:
            product_id: ID del producto vendido
            quantity: Unidades vendidas (> 0)
            unit_price: Precio unitario; por defecto el precio de venta del producto
            customer_id: Cliente opcional; si no existe se omite su nombre

        Returns:
            Venta registrada

        Raises:
            NotFoundError: Producto inexistente
            ValidationError: Cantidad o precio inválidos
            InsufficientStockError: Stock actual menor a la cantidad
        """
        quantity = to_int(quantity, 'quantity')
        if quantity <= 0:
            raise ValidationError("La cantidad debe ser mayor que 0", 'quantity')

        product = self.product_repo.get_product(product_id)
        if product is None:
            raise NotFoundError('Producto', product_id)

        price = to_price(unit_price, 'unitPrice') if unit_price is not None else product.selling_price

        customer_name = None
        if customer_id and self.customer_repo is not None:
            customer = self.customer_repo.get_customer(customer_id)
            if customer is not None:
                customer_name = customer.full_name

        with self.store.transaction():
            available = self.stock_service.current_level(product_id)
            if available < quantity:
                logger.warning(
                    "Venta rechazada por stock insuficiente: %s (pedido %d, disponible %d)",
                    product_id, quantity, available
                )
                raise InsufficientStockError(product_id, quantity, available)

            self.stock_service.apply_movement(
                product_id, MovementType.SALE, quantity, f"Sale: {quantity} units"
            )

            sale = Sale(
                id=generate_id(),
                product_id=product_id,
                product_name=product.name,
                quantity=quantity,
                unit_price=price,
                total_price=round(price * quantity, 2),
                profit=round((price - product.purchase_price) * quantity, 2),
                customer_id=customer_id or None,
                customer_name=customer_name,
                created_at=now(),
            )
            self.sales_repo.create_sale(sale)

        logger.info(
            "Venta registrada: %d x %s - Total: %.2f - Ganancia: %.2f",
            quantity, product.name, sale.total_price, sale.profit
        )
        return sale

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_all_sales(self) -> List[Sale]:
        """Todas las ventas, la más reciente primero."""
        return self.sales_repo.load()

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        return self.sales_repo.get_sale(sale_id)

    def recent_sales(self, limit: int = RECENT_SALES_LIMIT) -> List[Sale]:
        return self.get_all_sales()[:limit]

    def search_sales(self, term: str = '') -> List[Sale]:
        """Busca por nombre de producto o de cliente."""
        term = (term or '').strip().lower()
        sales = self.get_all_sales()
        if not term:
            return sales
        return [
            s for s in sales
            if term in s.product_name.lower() or term in (s.customer_name or '').lower()
        ]
