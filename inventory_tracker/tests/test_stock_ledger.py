import random

import pytest

from inventory_tracker.exceptions import NotFoundError, ValidationError
from inventory_tracker.models import MovementType


def test_new_product_starts_with_zero_stock_row(widget, stock):
    levels = stock.all_levels()
    assert len(levels) == 1
    assert levels[0].product_id == widget.id
    assert levels[0].product_name == 'Widget'
    assert levels[0].quantity == 0
    # initializing stock is not a movement
    assert stock.history() == []


def test_add_records_previous_and_new_quantity(widget, stock):
    entry = stock.add_stock(widget.id, 50, notes='first delivery')

    assert stock.current_level(widget.id) == 50
    assert entry.type == MovementType.ADD
    assert (entry.previous_quantity, entry.new_quantity, entry.quantity) == (0, 50, 50)
    assert entry.notes == 'first delivery'
    assert entry.product_name == 'Widget'
    assert stock.history() == [entry]


def test_add_uses_absolute_value(widget, stock):
    entry = stock.apply_movement(widget.id, 'add', -7)
    assert entry.new_quantity == 7
    assert entry.quantity == 7


def test_add_stock_rejects_non_positive(widget, stock):
    with pytest.raises(ValidationError):
        stock.add_stock(widget.id, 0)
    assert stock.history() == []


def test_adjust_without_stock_row_starts_from_zero(widget, stock, container):
    # simulate a product whose level row is missing
    container.level_repo.delete_level(widget.id)
    assert stock.all_levels() == []

    entry = stock.adjust_stock(widget.id, 30)

    assert stock.current_level(widget.id) == 30
    assert entry.type == MovementType.ADJUST
    assert (entry.previous_quantity, entry.new_quantity, entry.quantity) == (0, 30, 30)
    level = container.level_repo.get_level(widget.id)
    assert level.product_name == 'Widget'


def test_adjust_to_same_value_twice(widget, stock):
    stock.add_stock(widget.id, 12)
    first = stock.adjust_stock(widget.id, 5)
    second = stock.adjust_stock(widget.id, 5)

    assert stock.current_level(widget.id) == 5
    assert (first.previous_quantity, first.new_quantity) == (12, 5)
    assert (second.previous_quantity, second.new_quantity) == (5, 5)
    assert len(stock.history()) == 3


def test_adjust_rejects_negative(widget, stock):
    with pytest.raises(ValidationError):
        stock.adjust_stock(widget.id, -1)
    assert stock.current_level(widget.id) == 0


def test_sale_movement_clamps_at_zero(widget, stock):
    stock.add_stock(widget.id, 3)
    entry = stock.apply_movement(widget.id, MovementType.SALE, 10)

    assert stock.current_level(widget.id) == 0
    assert entry.new_quantity == 0
    assert entry.quantity == 10


@pytest.mark.parametrize('move', [
    lambda stock, product_id: stock.add_stock(product_id, 5),
    lambda stock, product_id: stock.adjust_stock(product_id, 3),
])
def test_failed_history_write_restores_level(widget, stock, container, monkeypatch, move):
    stock.add_stock(widget.id, 10)
    entries_before = stock.history()

    def boom(entry):
        raise RuntimeError('disk full')

    monkeypatch.setattr(container.entry_repo, 'add_entry', boom)

    with pytest.raises(RuntimeError):
        move(stock, widget.id)

    assert stock.current_level(widget.id) == 10
    assert stock.history() == entries_before


def test_unknown_product_is_not_found(stock):
    with pytest.raises(NotFoundError):
        stock.apply_movement('missing', 'add', 1)
    assert stock.history() == []


@pytest.mark.parametrize('movement', ['remove', '', None])
def test_unknown_movement_type_is_rejected(widget, stock, movement):
    with pytest.raises(ValidationError):
        stock.apply_movement(widget.id, movement, 1)


@pytest.mark.parametrize('quantity', [1.5, '2.0', True, 'abc'])
def test_non_integer_quantity_is_rejected(widget, stock, quantity):
    with pytest.raises(ValidationError):
        stock.apply_movement(widget.id, 'add', quantity)


def test_history_is_newest_first_and_filterable(products, stock, widget):
    other = products.create_product({'name': 'Gadget', 'purchasePrice': 1, 'sellingPrice': 2})
    stock.add_stock(widget.id, 1)
    stock.add_stock(other.id, 2)
    stock.add_stock(widget.id, 3)

    history = stock.history()
    assert [e.quantity for e in history] == [3, 2, 1]
    assert [e.quantity for e in stock.history(product_id=widget.id)] == [3, 1]
    assert [e.quantity for e in stock.history(limit=2)] == [3, 2]


def test_low_stock_and_search(products, stock, widget):
    other = products.create_product({'name': 'Gadget', 'purchasePrice': 1, 'sellingPrice': 2})
    stock.add_stock(widget.id, 10)
    stock.add_stock(other.id, 9)

    assert [l.product_id for l in stock.low_stock()] == [other.id]
    assert [l.product_id for l in stock.low_stock(threshold=11)] == [widget.id, other.id]
    assert [l.product_name for l in stock.search_levels('gAd')] == ['Gadget']
    assert len(stock.search_levels('')) == 2


def test_random_movements_keep_ledger_consistent(products, stock, sales):
    rng = random.Random(1234)
    items = [
        products.create_product({'name': f'P{i}', 'purchasePrice': 1, 'sellingPrice': 3})
        for i in range(3)
    ]

    for _ in range(60):
        product = rng.choice(items)
        action = rng.choice(['add', 'adjust', 'sale', 'record_sale'])
        qty = rng.randint(0, 15)
        if action == 'record_sale':
            if qty and stock.current_level(product.id) >= qty:
                sales.record_sale(product.id, qty)
        else:
            stock.apply_movement(product.id, action, qty)

        assert all(level.quantity >= 0 for level in stock.all_levels())

    for product in items:
        # oldest first to walk the chain of transitions
        entries = list(reversed(stock.history(product_id=product.id)))
        previous = 0
        for entry in entries:
            assert entry.previous_quantity == previous
            previous = entry.new_quantity
        assert previous == stock.current_level(product.id)
