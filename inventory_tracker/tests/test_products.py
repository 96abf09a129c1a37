import pytest

from inventory_tracker.exceptions import ValidationError


def test_create_product_normalizes_fields(products):
    product = products.create_product({
        'name': '  Hammer ',
        'sku': 'HAM-1',
        'purchasePrice': '4.499',
        'selling_price': 9,
        'category': 'Tools',
        'description': '',
        'stock': 999,  # ignored, not editable
    })

    assert product.name == 'Hammer'
    assert product.purchase_price == 4.5
    assert product.selling_price == 9.0
    assert product.description is None
    assert products.get_product(product.id) == product


def test_create_product_initializes_zero_stock(products, stock):
    product = products.create_product({'name': 'Hammer'})
    assert stock.current_level(product.id) == 0
    assert [l.product_name for l in stock.all_levels()] == ['Hammer']


@pytest.mark.parametrize('data', [
    {'name': ''},
    {'name': 'Hammer', 'purchasePrice': -1},
    {'name': 'Hammer', 'sellingPrice': 'cheap'},
])
def test_create_product_rejects_invalid_data(products, stock, data):
    with pytest.raises(ValidationError):
        products.create_product(data)
    assert products.get_all_products() == []
    assert stock.all_levels() == []


def test_duplicate_names_and_skus_are_allowed(products):
    products.create_product({'name': 'Hammer', 'sku': 'H'})
    products.create_product({'name': 'Hammer', 'sku': 'H'})
    assert len(products.get_all_products()) == 2


def test_rename_updates_stock_row_but_not_history(widget, products, stock):
    stock.add_stock(widget.id, 5)

    updated = products.update_product(widget.id, {'name': 'Widget Pro', 'sellingPrice': 25})

    assert updated.name == 'Widget Pro'
    assert updated.selling_price == 25
    assert updated.created_at == widget.created_at
    assert updated.updated_at >= widget.updated_at
    assert [l.product_name for l in stock.all_levels()] == ['Widget Pro']
    assert stock.history()[0].product_name == 'Widget'

    # the next movement snapshots the new name
    entry = stock.add_stock(widget.id, 1)
    assert entry.product_name == 'Widget Pro'


def test_update_unknown_product_returns_none(products):
    assert products.update_product('missing', {'name': 'X'}) is None


def test_update_rejects_blank_name(widget, products):
    with pytest.raises(ValidationError):
        products.update_product(widget.id, {'name': '   '})
    assert products.get_product(widget.id).name == 'Widget'


def test_delete_removes_stock_row_and_keeps_history(widget, products, stock):
    stock.add_stock(widget.id, 5)

    assert products.delete_product(widget.id) is True

    assert products.get_product(widget.id) is None
    assert not products.product_exists(widget.id)
    assert stock.all_levels() == []
    assert len(stock.history(product_id=widget.id)) == 1
    assert products.delete_product(widget.id) is False


def test_search_matches_name_sku_and_category(products, widget):
    products.create_product({'name': 'Paint', 'sku': 'PNT-9', 'category': 'Decor'})

    assert [p.name for p in products.search_products('wid-')] == ['Widget']
    assert [p.name for p in products.search_products('decor')] == ['Paint']
    assert [p.name for p in products.search_products('widget')] == ['Widget']
    assert len(products.search_products('  ')) == 2


def test_margin(products, widget):
    assert products.calculate_margin(widget) == 50.0

    free = products.create_product({'name': 'Sample', 'purchasePrice': 1, 'sellingPrice': 0})
    assert products.calculate_margin(free) == 0.0

    odd = products.create_product({'name': 'Odd', 'purchasePrice': 2, 'sellingPrice': 3})
    assert products.calculate_margin(odd) == 33.3
