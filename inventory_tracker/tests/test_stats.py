from datetime import datetime, timedelta

import pytest

from inventory_tracker.models import Sale, generate_id


NOW = datetime(2024, 3, 15, 14, 30)


def _sale_at(created_at, total, profit):
    return Sale(
        id=generate_id(),
        product_id='p1',
        product_name='Widget',
        quantity=1,
        unit_price=total,
        total_price=total,
        profit=profit,
        created_at=created_at,
    )


@pytest.fixture
def dated_sales(container):
    repo = container.sales_repo
    # stored oldest first so the newest ends up at the top
    for created_at, total, profit in [
        (NOW - timedelta(days=40), 1000, 100),          # outside every window
        (NOW - timedelta(days=30), 300, 30),            # month boundary, included
        (NOW - timedelta(days=7, seconds=1), 70, 7),    # just outside the week
        (NOW - timedelta(days=7), 50, 5),               # week boundary, included
        (datetime(2024, 3, 14, 23, 59), 20, 2),         # yesterday
        (datetime(2024, 3, 15, 0, 0), 10, 1),           # midnight today
    ]:
        repo.create_sale(_sale_at(created_at, total, profit))
    return repo


def test_dashboard_after_first_sale(widget, stock, sales, stats):
    stock.add_stock(widget.id, 50)
    sales.record_sale(widget.id, 5)

    result = stats.dashboard_stats()

    assert result['totalRevenue'] == 100
    assert result['totalProfit'] == 50
    assert result['totalSales'] == 1
    assert result['totalStock'] == 45
    assert result['totalProducts'] == 1
    assert result['lowStockCount'] == 0
    assert result['weekRevenue'] == 100


def test_dashboard_counts_low_stock_rows(products, stock, stats, widget):
    products.create_product({'name': 'Empty'})
    stock.add_stock(widget.id, 10)

    assert stats.dashboard_stats()['lowStockCount'] == 1


def test_empty_dashboard(stats):
    assert stats.dashboard_stats(NOW) == {
        'totalProducts': 0,
        'totalStock': 0,
        'lowStockCount': 0,
        'totalRevenue': 0,
        'totalProfit': 0,
        'totalSales': 0,
        'weekRevenue': 0,
    }


def test_period_windows_are_inclusive(stats, dated_sales):
    result = stats.period_stats(NOW)

    assert result == {
        'todayRevenue': 10,
        'todayProfit': 1,
        'weekRevenue': 80,
        'weekProfit': 8,
        'monthRevenue': 450,
        'monthProfit': 45,
    }


def test_week_revenue_on_dashboard_uses_same_window(stats, dated_sales):
    result = stats.dashboard_stats(NOW)
    assert result['weekRevenue'] == 80
    assert result['totalRevenue'] == 1450
    assert result['totalSales'] == 6


def test_sales_in_period(stats, dated_sales):
    assert [s.total_price for s in stats.sales_in_period('today', NOW)] == [10]
    assert [s.total_price for s in stats.sales_in_period('week', NOW)] == [10, 20, 50]
    with pytest.raises(ValueError):
        stats.sales_in_period('year', NOW)


def test_overview_limits_recent_sales_and_low_stock(products, stock, sales, stats):
    for i in range(7):
        products.create_product({'name': f'P{i}', 'sellingPrice': 1})
    first = products.get_all_products()[0]
    stock.add_stock(first.id, 9)
    for _ in range(6):
        sales.record_sale(first.id, 1)

    overview = stats.dashboard_overview()

    assert overview['stats']['totalSales'] == 6
    assert len(overview['recentSales']) == 5
    assert overview['recentSales'][0]['productName'] == 'P0'
    assert len(overview['lowStock']) == 5
    assert {'productId', 'productName', 'quantity'} <= set(overview['lowStock'][0])
