import json
from datetime import datetime, timezone

import pytest

from inventory_tracker.app_container import AppContainer
from inventory_tracker.config import STORAGE_JSON, TestingConfig
from inventory_tracker.models import parse_timestamp
from inventory_tracker.repositories import JsonRecordStore, MemoryRecordStore


def test_json_store_writes_one_file_per_collection(tmp_path):
    store = JsonRecordStore(str(tmp_path))
    store.save_collection('products', [{'id': 'a', 'name': 'Ñandú'}])

    path = tmp_path / 'products.json'
    assert path.exists()
    assert json.loads(path.read_text(encoding='utf-8')) == [{'id': 'a', 'name': 'Ñandú'}]
    assert not (tmp_path / 'products.json.tmp').exists()


def test_missing_collection_loads_empty(tmp_path):
    assert JsonRecordStore(str(tmp_path)).load_collection('sales') == []


def test_corrupt_file_loads_empty_and_is_kept_aside(tmp_path):
    (tmp_path / 'sales.json').write_text('{not json', encoding='utf-8')
    store = JsonRecordStore(str(tmp_path))

    assert store.load_collection('sales') == []

    store.save_collection('sales', [{'id': 'new'}])
    assert (tmp_path / 'sales.json.corrupt').read_text(encoding='utf-8') == '{not json'
    assert store.load_collection('sales') == [{'id': 'new'}]


def test_memory_store_returns_copies():
    store = MemoryRecordStore({'products': [{'id': 'a'}]})
    records = store.load_collection('products')
    records[0]['id'] = 'changed'
    assert store.load_collection('products') == [{'id': 'a'}]


def test_transaction_restores_collections_on_error():
    store = MemoryRecordStore({'products': [{'id': 'a'}]})

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.save_collection('products', [])
            store.save_collection('sales', [{'id': 's'}])
            raise RuntimeError('boom')

    assert store.load_collection('products') == [{'id': 'a'}]
    assert store.load_collection('sales') == []


def test_nested_transaction_joins_outer():
    store = MemoryRecordStore()

    with pytest.raises(RuntimeError):
        with store.transaction():
            with store.transaction():
                store.save_collection('products', [{'id': 'a'}])
            raise RuntimeError('boom')

    assert store.load_collection('products') == []


def test_ledger_survives_restart_on_json_store(tmp_path):
    config = TestingConfig(storage=STORAGE_JSON, data_dir=str(tmp_path))
    first = AppContainer(config)
    product = first.product_service.create_product({'name': 'Lamp', 'purchasePrice': 5, 'sellingPrice': 8})
    first.stock_service.add_stock(product.id, 4, notes='initial')
    sale = first.sales_service.record_sale(product.id, 1)

    second = AppContainer(config)

    assert second.stock_service.current_level(product.id) == 3
    assert second.sales_service.get_sale(sale.id) == sale
    assert second.stock_service.history() == first.stock_service.history()
    for name in ('products', 'stock_levels', 'stock_entries', 'sales'):
        assert (tmp_path / f'{name}.json').exists()

    stored = json.loads((tmp_path / 'sales.json').read_text(encoding='utf-8'))
    assert stored[0]['productName'] == 'Lamp'
    assert stored[0]['totalPrice'] == 8
    assert 'customerId' not in stored[0]


def test_parse_timestamp_variants():
    assert parse_timestamp('2024-01-01T10:00:00') == datetime(2024, 1, 1, 10, 0)
    assert parse_timestamp('') is None
    assert parse_timestamp('yesterday') is None

    aware = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    parsed = parse_timestamp('2024-01-01T10:00:00Z')
    assert parsed.tzinfo is None
    assert parsed == aware.astimezone().replace(tzinfo=None)


def test_repositories_satisfy_their_protocols(container):
    from inventory_tracker import repositories as repos

    assert isinstance(container.store, repos.IRecordStore)
    assert isinstance(container.product_repo, repos.IProductRepository)
    assert isinstance(container.product_repo, repos.IListRepository)
    assert isinstance(container.customer_repo, repos.ICustomerRepository)
    assert isinstance(container.level_repo, repos.IStockLevelRepository)
    assert isinstance(container.entry_repo, repos.IStockEntryRepository)
    assert isinstance(container.sales_repo, repos.ISalesRepository)
