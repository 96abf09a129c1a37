# ==============================================================================
# APLICACIÓN FLASK - API JSON
# ==============================================================================
# Capa delgada sobre los servicios: cada ruta lee el request, llama a UN
# servicio y arma la respuesta. Ninguna regla de negocio vive aquí.
#
# FORMATO DE RESPUESTA:
#   éxito → {"success": true, ...}
#   error → {"success": false, "error": "mensaje", "field": "campo"?}
#
# CÓDIGOS:
#   400 → ValidationError / InsufficientStockError
#   404 → NotFoundError
#   409 → DuplicateKeyError
# ==============================================================================

import logging
from typing import Optional

from flask import Blueprint, Flask, current_app, request
from werkzeug.exceptions import HTTPException

from inventory_tracker.app_container import AppContainer
from inventory_tracker.config import Config
from inventory_tracker.exceptions import (
    DuplicateKeyError,
    InsufficientStockError,
    InventoryError,
    NotFoundError,
    ValidationError,
)
from inventory_tracker.logging_setup import configure_logging
from inventory_tracker.performance_logger import configure_profiling, init_profiling
from inventory_tracker.validation import to_int


logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')


def _container() -> AppContainer:
    """Contenedor de la aplicación Flask actual."""
    return current_app.extensions['inventory_container']


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Se esperaba un cuerpo JSON")
    return data


def _limit_arg() -> Optional[int]:
    limit = request.args.get('limit')
    if limit in (None, ''):
        return None
    limit = to_int(limit, 'limit')
    if limit < 0:
        raise ValidationError("limit no puede ser negativo", 'limit')
    return limit


# ═══════════════════════════════════════════════════════════════════════════
# PRODUCTOS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/products', methods=['GET'])
def list_products():
    service = _container().product_service
    products = service.search_products(request.args.get('q', ''))
    return {
        "success": True,
        "products": [
            dict(p.to_dict(), margin=service.calculate_margin(p)) for p in products
        ],
    }


@api.route('/products', methods=['POST'])
def create_product():
    product = _container().product_service.create_product(_json_body())
    return {"success": True, "product": product.to_dict()}, 201


@api.route('/products/<product_id>', methods=['GET'])
def get_product(product_id):
    c = _container()
    product = c.product_service.get_product(product_id)
    if product is None:
        raise NotFoundError('Producto', product_id)
    return {
        "success": True,
        "product": product.to_dict(),
        "stock": c.stock_service.current_level(product_id),
    }


@api.route('/products/<product_id>', methods=['PUT', 'PATCH'])
def update_product(product_id):
    product = _container().product_service.update_product(product_id, _json_body())
    if product is None:
        raise NotFoundError('Producto', product_id)
    return {"success": True, "product": product.to_dict()}


@api.route('/products/<product_id>', methods=['DELETE'])
def delete_product(product_id):
    if not _container().product_service.delete_product(product_id):
        raise NotFoundError('Producto', product_id)
    return {"success": True}


# ═══════════════════════════════════════════════════════════════════════════
# STOCK
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/stock', methods=['GET'])
def list_stock():
    levels = _container().stock_service.search_levels(request.args.get('q', ''))
    return {"success": True, "levels": [level.to_dict() for level in levels]}


@api.route('/stock/history', methods=['GET'])
def stock_history():
    entries = _container().stock_service.history(
        product_id=request.args.get('product_id') or None,
        limit=_limit_arg(),
    )
    return {"success": True, "entries": [e.to_dict() for e in entries]}


@api.route('/stock/add', methods=['POST'])
def add_stock():
    data = _json_body()
    entry = _container().stock_service.add_stock(
        data.get('productId'), data.get('quantity'), data.get('notes')
    )
    return {"success": True, "entry": entry.to_dict()}


@api.route('/stock/adjust', methods=['POST'])
def adjust_stock():
    data = _json_body()
    entry = _container().stock_service.adjust_stock(
        data.get('productId'), data.get('quantity'), data.get('notes')
    )
    return {"success": True, "entry": entry.to_dict()}


# ═══════════════════════════════════════════════════════════════════════════
# VENTAS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/sales', methods=['GET'])
def list_sales():
    sales = _container().sales_service.search_sales(request.args.get('q', ''))
    return {"success": True, "sales": [s.to_dict() for s in sales]}


@api.route('/sales', methods=['POST'])
def record_sale():
    data = _json_body()
    sale = _container().sales_service.record_sale(
        data.get('productId'),
        data.get('quantity'),
        unit_price=data.get('unitPrice'),
        customer_id=data.get('customerId') or None,
    )
    return {"success": True, "sale": sale.to_dict()}, 201


# ═══════════════════════════════════════════════════════════════════════════
# CLIENTES
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/customers', methods=['GET'])
def list_customers():
    customers = _container().customer_service.search_customers(request.args.get('q', ''))
    return {"success": True, "customers": [c.to_dict() for c in customers]}


@api.route('/customers', methods=['POST'])
def create_customer():
    customer = _container().customer_service.create_customer(_json_body())
    return {"success": True, "customer": customer.to_dict()}, 201


@api.route('/customers/suggest-username', methods=['GET'])
def suggest_username():
    username = _container().customer_service.suggest_username(
        request.args.get('first_name'), request.args.get('last_name')
    )
    return {"success": True, "username": username}


@api.route('/customers/<customer_id>', methods=['GET'])
def get_customer(customer_id):
    customer = _container().customer_service.get_customer(customer_id)
    if customer is None:
        raise NotFoundError('Cliente', customer_id)
    return {"success": True, "customer": customer.to_dict()}


@api.route('/customers/<customer_id>', methods=['PUT', 'PATCH'])
def update_customer(customer_id):
    customer = _container().customer_service.update_customer(customer_id, _json_body())
    return {"success": True, "customer": customer.to_dict()}


@api.route('/customers/<customer_id>', methods=['DELETE'])
def delete_customer(customer_id):
    if not _container().customer_service.delete_customer(customer_id):
        raise NotFoundError('Cliente', customer_id)
    return {"success": True}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/stats/dashboard', methods=['GET'])
def dashboard_stats():
    return dict(_container().stats_service.dashboard_overview(), success=True)


@api.route('/stats/sales', methods=['GET'])
def sales_stats():
    return {"success": True, "stats": _container().stats_service.period_stats()}


# ═══════════════════════════════════════════════════════════════════════════
# MANEJO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════

def _error(message: str, status: int, field: Optional[str] = None):
    body = {"success": False, "error": message}
    if field:
        body["field"] = field
    return body, status


def handle_inventory_error(exc: InventoryError):
    """Traduce excepciones del dominio a respuestas JSON."""
    if isinstance(exc, NotFoundError):
        return _error(str(exc), 404)
    if isinstance(exc, DuplicateKeyError):
        return _error(str(exc), 409, exc.field)
    if isinstance(exc, ValidationError):
        return _error(str(exc), 400, exc.field)
    if isinstance(exc, InsufficientStockError):
        return _error(str(exc), 400, 'quantity')
    return _error(str(exc), 400)


def handle_http_error(exc: HTTPException):
    return _error(exc.description or exc.name, exc.code or 500)


# ═══════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APLICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Config] = None, container: Optional[AppContainer] = None) -> Flask:
    """
    Crea la aplicación Flask.

    Args:
        config: Configuración (por defecto la del contenedor o del entorno)
        container: Contenedor ya armado (tests)

    Returns:
        Aplicación lista para servir
    """
    if container is None:
        container = AppContainer(config or Config.from_env())
    config = container.config

    configure_logging(config.log_level)
    configure_profiling(config.enable_profiling, config.slow_warning_ms, config.slow_critical_ms)

    if config.uses_default_secret and not config.testing:
        logger.warning("INVENTORY_SECRET_KEY no definida, se usa la clave de desarrollo")

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config['TESTING'] = config.testing
    app.extensions['inventory_container'] = container

    app.register_blueprint(api)
    app.register_error_handler(InventoryError, handle_inventory_error)
    app.register_error_handler(HTTPException, handle_http_error)
    init_profiling(app)

    logger.info("Aplicación iniciada (almacenamiento: %s)", config.storage)
    return app
