import pytest

from inventory_tracker.app_container import AppContainer
from inventory_tracker.config import TestingConfig
from inventory_tracker.main import create_app
from inventory_tracker.performance_logger import configure_profiling, reset_stats
from inventory_tracker.repositories import MemoryRecordStore


@pytest.fixture
def container():
    # fresh in-memory store per test, no files touched
    return AppContainer(TestingConfig(), store=MemoryRecordStore())


@pytest.fixture
def products(container):
    return container.product_service


@pytest.fixture
def stock(container):
    return container.stock_service


@pytest.fixture
def sales(container):
    return container.sales_service


@pytest.fixture
def customers(container):
    return container.customer_service


@pytest.fixture
def stats(container):
    return container.stats_service


@pytest.fixture
def widget(products):
    """Product with purchasePrice=10, sellingPrice=20."""
    return products.create_product({
        'name': 'Widget',
        'sku': 'WID-001',
        'purchasePrice': 10,
        'sellingPrice': 20,
        'category': 'Tools',
    })


@pytest.fixture
def app(container):
    app = create_app(container=container)
    yield app
    configure_profiling(enabled=True)
    reset_stats()


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
