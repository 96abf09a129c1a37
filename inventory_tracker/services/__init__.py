# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la aplicación.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones
# 3. Las rutas (controllers) solo llaman a servicios
# 4. Los servicios NO conocen el tipo de almacenamiento (JSON/memoria)
#
# ESTRUCTURA:
# ├── stock_service.py    → Libro de stock: niveles e historial (único que los escribe)
# ├── product_service.py  → Catálogo de productos
# ├── customer_service.py → Clientes, unicidad y sugerencia de username
# ├── sales_service.py    → Registro de ventas
# └── stats_service.py    → Estadísticas (solo lectura)
# ==============================================================================

from inventory_tracker.services.stock_service import StockService
from inventory_tracker.services.product_service import ProductService
from inventory_tracker.services.customer_service import CustomerService
from inventory_tracker.services.sales_service import SalesService
from inventory_tracker.services.stats_service import StatsService

__all__ = [
    'StockService',
    'ProductService',
    'CustomerService',
    'SalesService',
    'StatsService',
]
